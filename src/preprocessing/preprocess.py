# src/preprocessing/preprocess.py

from typing import Iterable, List, Set, Tuple
import re

Transactions = List[Set[str]]


def standardize_item_name(name: str) -> str:
    """
    Standardize item names:
    - convert to string
    - strip leading/trailing whitespace
    - collapse multiple spaces
    - lowercase
    """
    return re.sub(r"\s+", " ", str(name).strip()).lower()


def tokenize_transaction(line: str, lowercase: bool = False) -> Set[str]:
    """
    Split one transaction line on whitespace; repeated tokens collapse into one item.
    """
    tokens = line.split()
    if lowercase:
        tokens = [standardize_item_name(t) for t in tokens]
    return set(tokens)


def preprocess_transactions(
    lines: Iterable[str],
    lowercase: bool = False,
) -> Tuple[Transactions, str]:
    """
    Turn raw transaction lines into item sets:
      - split each line on whitespace
      - optionally lowercase item names
      - duplicates inside a line are removed by using sets
      - empty lines are kept as empty transactions, they still count
        towards the support threshold

    Returns:
      transactions: list of set(items), in input order
      report: multi-line string describing what was done
    """
    transactions: Transactions = []
    empty_transactions = 0
    duplicate_tokens = 0
    total_tokens = 0

    for line in lines:
        tokens = line.split()
        items = tokenize_transaction(line, lowercase)

        total_tokens += len(tokens)
        duplicate_tokens += len(tokens) - len(items)
        if not items:
            empty_transactions += 1
        transactions.append(items)

    unique_items = set().union(*transactions) if transactions else set()

    report_lines = [
        "Preprocessing Report:",
        "---------------------",
        f"- Total transactions: {len(transactions)}",
        f"- Empty transactions: {empty_transactions}",
        f"- Tokens read: {total_tokens}",
        f"- Duplicate items removed: {duplicate_tokens}",
        f"- Unique items: {len(unique_items)}",
    ]

    report = "\n".join(report_lines)
    return transactions, report
