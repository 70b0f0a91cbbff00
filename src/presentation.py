# src/presentation.py

from typing import List
import math

from algorithms.apriori import Itemset, Rule
from pipeline import MiningResult


def format_itemset(itemset: Itemset) -> str:
    """{Bread, Milk}"""
    return "{" + ", ".join(itemset) + "}"


def confidence_percent(confidence: float) -> int:
    # round half away from zero, 2/3 -> 67
    return int(math.floor(confidence * 100 + 0.5))


def format_rule(rule: Rule) -> str:
    return (
        f"{format_itemset(rule.antecedent)} -> {format_itemset(rule.consequent)} "
        f"[Sup: {rule.support}, Conf: {confidence_percent(rule.confidence)}%]"
    )


def format_frequent_itemsets(result: MiningResult) -> str:
    lines: List[str] = ["--- Frequent Itemsets ---"]
    for k in sorted(result.frequent_itemsets):
        lines.append(f"Level {k}:")
        for itemset, support in result.frequent_itemsets[k].items():
            lines.append(f"  {format_itemset(itemset)}: {support}")
    return "\n".join(lines)


def format_report(result: MiningResult) -> str:
    lines = ["--- Association Rules ---"]
    lines.extend(format_rule(r) for r in result.rules)
    return "\n".join(lines)
