# src/pipeline.py

from typing import Iterable, List, NamedTuple
import logging
import time

from algorithms.apriori import FrequentTable, Rule, generate_rules, make_transactions, mine
from config import MiningConfig

logger = logging.getLogger(__name__)


class MiningResult(NamedTuple):
    frequent_itemsets: FrequentTable
    rules: List[Rule]
    min_support_count: int
    n_transactions: int
    elapsed: float


def run_apriori(transactions: Iterable[Iterable[str]], config: MiningConfig) -> MiningResult:
    """
    Full mining run: threshold from the config, frequent itemsets, then rules.
    elapsed is the runtime in seconds.
    """
    config.validate()
    start = time.time()

    store = make_transactions(transactions)
    threshold = config.support_count(len(store))
    logger.info(
        "Mining %d transactions, min support count %d (%s%%), min confidence %s%%",
        len(store), threshold, config.min_support_percent, config.min_confidence_percent,
    )

    table = mine(store, threshold)
    rules = generate_rules(table, config.min_confidence)

    elapsed = time.time() - start
    logger.info(
        "Found %d frequent itemsets over %d levels and %d rules in %.3f s",
        sum(len(level) for level in table.values()), len(table), len(rules), elapsed,
    )
    return MiningResult(table, rules, threshold, len(store), elapsed)
