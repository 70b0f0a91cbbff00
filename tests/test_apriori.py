from itertools import combinations

import pytest

import algorithms.apriori as apriori
from algorithms.apriori import (
    AprioriInvariantError,
    check_frequent_table,
    count_support,
    generate_candidates,
    generate_rules,
    is_subset,
    make_itemset,
    make_transactions,
    min_support_count,
    mine,
)


def test_make_itemset_is_order_independent():
    assert make_itemset(["b", "a", "c"]) == make_itemset({"c", "b", "a"}) == ("a", "b", "c")
    assert make_itemset(["a", "a"]) == ("a",)


@pytest.mark.parametrize("candidate, transaction, expected", [
    (("a",), ("a", "b"), True),
    (("a", "c"), ("a", "b", "c"), True),
    (("a", "d"), ("a", "b", "c"), False),
    (("b", "c", "d"), ("b", "c"), False),
    (("a",), (), False),
    ((), ("a",), True),
])
def test_is_subset(candidate, transaction, expected):
    assert is_subset(candidate, transaction) is expected


@pytest.mark.parametrize("percent, n, expected", [
    (50, 4, 2),
    (40, 5, 2),
    (41, 5, 3),
    (7, 100, 7),
    (100, 4, 4),
    (0, 10, 0),
    (50, 0, 0),
])
def test_min_support_count(percent, n, expected):
    assert min_support_count(percent, n) == expected


def test_generate_candidates_joins_and_collapses_duplicates():
    prev = {("a", "b"): 3, ("a", "c"): 3, ("b", "c"): 3}
    assert generate_candidates(prev) == {("a", "b", "c")}


def test_generate_candidates_prunes_infrequent_subsets():
    prev = {("a", "b"): 3, ("a", "c"): 3}
    assert generate_candidates(prev) == set()


def test_generate_candidates_discards_larger_unions():
    prev = {("a", "b"): 2, ("c", "d"): 2}
    assert generate_candidates(prev) == set()


def test_generate_candidates_from_single_items():
    prev = {("a",): 1, ("b",): 1, ("c",): 1}
    assert generate_candidates(prev) == {("a", "b"), ("a", "c"), ("b", "c")}


def test_generate_candidates_empty():
    assert generate_candidates({}) == set()


def test_generate_candidates_rejects_mixed_sizes():
    with pytest.raises(AprioriInvariantError):
        generate_candidates({("a",): 2, ("a", "b"): 2})


def test_count_support_keeps_zero_counts(basket_transactions):
    store = make_transactions(basket_transactions)
    counts = count_support(store, {("Bread", "Milk"), ("Beer", "Milk")})
    assert counts == {("Beer", "Milk"): 0, ("Bread", "Milk"): 2}


def test_mine_basket_scenario(basket_transactions):
    table = mine(basket_transactions, 2)
    assert table == {
        1: {("Bread",): 3, ("Diaper",): 3, ("Milk",): 3},
        2: {("Bread", "Diaper"): 2, ("Bread", "Milk"): 2, ("Diaper", "Milk"): 2},
    }
    assert 3 not in table


def test_mine_support_boundary():
    transactions = [{"a", "b"}, {"a", "b"}, {"a"}, {"c"}]
    assert mine(transactions, 2)[2] == {("a", "b"): 2}
    table = mine(transactions, 3)
    assert table == {1: {("a",): 3}}


def test_mine_empty_results():
    assert mine([], 1) == {}
    assert mine([{"a"}, {"b"}], 2) == {}
    assert mine([set(), set()], 1) == {}
    assert mine([set(), set()], 0) == {}


def test_mine_zero_threshold_skips_unseen_itemsets():
    table = mine([{"a"}, {"b"}, {"c"}], 0)
    assert table == {1: {("a",): 1, ("b",): 1, ("c",): 1}}
    assert generate_rules(table, 0.0) == []

    table = mine([{"a", "b"}, {"c"}], 0)
    assert table == {1: {("a",): 1, ("b",): 1, ("c",): 1}, 2: {("a", "b"): 1}}
    assert [(r.antecedent, r.consequent) for r in generate_rules(table, 0.0)] == [
        (("a",), ("b",)),
        (("b",), ("a",)),
    ]


def test_mine_stops_after_empty_level(monkeypatch):
    seen = []
    original = apriori.generate_candidates

    def recording(prev):
        seen.append(dict(prev))
        return original(prev)

    monkeypatch.setattr(apriori, "generate_candidates", recording)
    table = mine([{"a", "b"}, {"a"}, {"b"}], 2)

    assert table == {1: {("a",): 2, ("b",): 2}}
    assert seen == [{("a",): 2, ("b",): 2}]


def test_mine_stops_when_no_candidates(monkeypatch):
    counted = []
    original = apriori.count_support

    def recording(transactions, candidates):
        counted.append(set(candidates))
        return original(transactions, candidates)

    monkeypatch.setattr(apriori, "count_support", recording)
    table = mine([{"a"}, {"a"}, {"b"}], 2)

    assert table == {1: {("a",): 2}}
    assert counted == []


def test_mine_matches_brute_force(random_transactions):
    threshold = 6
    table = mine(random_transactions, threshold)
    items = sorted(set().union(*random_transactions))

    for k in range(1, len(items) + 1):
        expected = {}
        for combo in combinations(items, k):
            count = sum(1 for t in random_transactions if set(combo) <= t)
            if count >= threshold:
                expected[combo] = count
        if expected:
            assert table[k] == expected
        else:
            assert k not in table
            break


def test_mine_lattice_invariants(random_transactions):
    table = mine(random_transactions, 5)
    assert len(table) >= 2
    check_frequent_table(table, len(random_transactions))

    flat = {itemset: s for level in table.values() for itemset, s in level.items()}
    for itemset, support in flat.items():
        for r in range(1, len(itemset)):
            for subset in combinations(itemset, r):
                assert flat[subset] >= support


def test_mine_is_deterministic(random_transactions):
    first = mine(random_transactions, 5)
    second = mine(list(reversed(random_transactions)), 5)
    assert first == second
    assert [list(level) for level in first.values()] == [list(level) for level in second.values()]


def test_check_frequent_table_detects_missing_subset():
    table = {1: {("a",): 2}, 2: {("a", "b"): 2}}
    with pytest.raises(AprioriInvariantError, match="not frequent"):
        check_frequent_table(table)


def test_check_frequent_table_detects_wrong_level_and_counts():
    with pytest.raises(AprioriInvariantError):
        check_frequent_table({2: {("a",): 1}})
    with pytest.raises(AprioriInvariantError):
        check_frequent_table({1: {("a",): 5}}, n_transactions=4)
    with pytest.raises(AprioriInvariantError):
        check_frequent_table({1: {("a",): 1, ("b",): 3}, 2: {("a", "b"): 2}})
