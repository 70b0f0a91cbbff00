import random

import pytest


@pytest.fixture
def basket_transactions():
    return [
        {"Milk", "Bread"},
        {"Bread", "Diaper"},
        {"Milk", "Bread", "Diaper"},
        {"Milk", "Diaper"},
    ]


@pytest.fixture
def random_transactions():
    rng = random.Random(1234)
    items = list("abcdefgh")
    return [set(rng.sample(items, rng.randint(1, 6))) for _ in range(40)]
