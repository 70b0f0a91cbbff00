# src/algorithms/apriori.py

from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple
from itertools import combinations
import logging
import math

logger = logging.getLogger(__name__)

Item = str
Itemset = Tuple[Item, ...]
SupportMap = Dict[Itemset, int]
FrequentTable = Dict[int, SupportMap]


class AprioriInvariantError(RuntimeError):
    """Raised when the frequent-itemset lattice breaks the apriori property."""


class Rule(NamedTuple):
    antecedent: Itemset
    consequent: Itemset
    support: int
    confidence: float


def make_itemset(items: Iterable[Item]) -> Itemset:
    """
    Canonical itemset: unique labels sorted lexicographically.
    Two itemsets compare equal iff their member sets are equal.
    """
    return tuple(sorted(set(items)))


def make_transactions(baskets: Iterable[Iterable[Item]]) -> Tuple[Itemset, ...]:
    """Freeze raw baskets into the immutable transaction store."""
    return tuple(make_itemset(basket) for basket in baskets)


def is_subset(candidate: Itemset, transaction: Itemset) -> bool:
    """
    Linear merge containment test over two canonical itemsets.
    """
    if len(candidate) > len(transaction):
        return False
    j = 0
    n = len(transaction)
    for item in candidate:
        while j < n and transaction[j] < item:
            j += 1
        if j == n or transaction[j] != item:
            return False
        j += 1
    return True


def min_support_count(min_support_percent: float, n_transactions: int) -> int:
    """
    Support threshold as an absolute count: ceil(percent / 100 * n).
    0% gives 0; mine() still never stores an itemset no transaction contains.
    """
    # multiply before dividing so 7% of 100 stays 7, not 7.000000000000001
    return math.ceil(min_support_percent * n_transactions / 100)


def generate_candidates(frequent_prev: SupportMap) -> Set[Itemset]:
    """
    Generate candidate k-itemsets from (k-1)-itemsets (Apriori join and prune step).
    """
    prev = list(frequent_prev)
    if not prev:
        return set()

    sizes = {len(itemset) for itemset in prev}
    if len(sizes) != 1:
        raise AprioriInvariantError(f"mixed itemset sizes in one level: {sorted(sizes)}")
    k = sizes.pop() + 1

    candidates: Set[Itemset] = set()
    n = len(prev)
    for i in range(n):
        for j in range(i + 1, n):
            union = make_itemset(prev[i] + prev[j])
            if len(union) != k or union in candidates:
                continue
            # prune: all (k-1)-subsets must be frequent
            if all(subset in frequent_prev for subset in combinations(union, k - 1)):
                candidates.add(union)
    return candidates


def count_support(transactions: Sequence[Itemset], candidates: Iterable[Itemset]) -> SupportMap:
    """
    Count, for every candidate, the transactions containing it.
    Candidates never seen keep a count of 0.
    """
    ordered = sorted(candidates)
    counts: SupportMap = {c: 0 for c in ordered}
    for transaction in transactions:
        for c in ordered:
            if is_subset(c, transaction):
                counts[c] += 1
    return counts


def _count_single_items(transactions: Sequence[Itemset]) -> SupportMap:
    item_counts: Dict[Item, int] = {}
    for transaction in transactions:
        for item in transaction:
            item_counts[item] = item_counts.get(item, 0) + 1
    return {(item,): item_counts[item] for item in sorted(item_counts)}


def _filter_frequent(counts: SupportMap, threshold: int) -> SupportMap:
    # an itemset found in no transaction is never frequent, even at threshold 0
    threshold = max(threshold, 1)
    return {itemset: count for itemset, count in counts.items() if count >= threshold}


def mine(transactions: Sequence[Iterable[Item]], min_support_count: int) -> FrequentTable:
    """
    Level-wise Apriori search.

    Returns:
      frequent table: dict[k] -> dict[itemset] = support count, for k = 1..K
      where K is the last non-empty level ({} when no single item is frequent)
    """
    store = make_transactions(transactions)
    table: FrequentTable = {}

    # L1
    level = _filter_frequent(_count_single_items(store), min_support_count)
    logger.debug("level 1: %d frequent items", len(level))
    if not level:
        return table
    table[1] = level

    # Lk for k >= 2
    k = 2
    while True:
        candidates = generate_candidates(table[k - 1])
        if not candidates:
            logger.debug("level %d: no candidates, stopping", k)
            break

        level = _filter_frequent(count_support(store, candidates), min_support_count)
        logger.debug("level %d: %d candidates, %d frequent", k, len(candidates), len(level))
        if not level:
            break
        table[k] = level
        k += 1

    return table


def generate_rules(table: FrequentTable, min_confidence: float) -> List[Rule]:
    """
    Generate association rules A -> C from every frequent itemset of size >= 2.

    Each itemset I is split into every non-empty proper antecedent A
    (2^n - 2 partitions, ascending antecedent bitmask over the sorted members)
    and C = I - A. A rule is kept iff support(I) / support(A) >= min_confidence.
    """
    rules: List[Rule] = []

    for k in sorted(table):
        if k < 2:
            continue
        for itemset, support in table[k].items():
            n = len(itemset)
            for mask in range(1, (1 << n) - 1):
                antecedent = tuple(itemset[j] for j in range(n) if mask >> j & 1)
                consequent = tuple(itemset[j] for j in range(n) if not mask >> j & 1)

                try:
                    antecedent_support = table[len(antecedent)][antecedent]
                except KeyError:
                    raise AprioriInvariantError(
                        f"antecedent {antecedent} of frequent itemset {itemset} is not frequent"
                    ) from None

                confidence = support / antecedent_support
                if confidence >= min_confidence:
                    rules.append(Rule(antecedent, consequent, support, confidence))

    logger.debug("generated %d rules at min_confidence=%s", len(rules), min_confidence)
    return rules


def check_frequent_table(table: FrequentTable, n_transactions: Optional[int] = None) -> None:
    """
    Verify the lattice invariants of a frequent table:
      - every itemset stored at level k has exactly k items
      - every (k-1)-subset of a level-k itemset is stored at level k-1
      - a subset's support is never below its superset's
      - no count exceeds the number of transactions (when given)
    Raises AprioriInvariantError on the first violation.
    """
    for k, level in table.items():
        for itemset, support in level.items():
            if len(itemset) != k:
                raise AprioriInvariantError(f"{itemset} stored at level {k}")
            if n_transactions is not None and support > n_transactions:
                raise AprioriInvariantError(
                    f"{itemset} has support {support} > {n_transactions} transactions"
                )
            if k < 2:
                continue
            for subset in combinations(itemset, k - 1):
                sub_support = table.get(k - 1, {}).get(subset)
                if sub_support is None:
                    raise AprioriInvariantError(f"subset {subset} of {itemset} is not frequent")
                if sub_support < support:
                    raise AprioriInvariantError(
                        f"subset {subset} has support {sub_support} < {support} of {itemset}"
                    )
