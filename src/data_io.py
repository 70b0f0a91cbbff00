# src/data_io.py

from typing import Callable, Iterable, List, Optional, Set, TextIO, Tuple

import pandas as pd

from algorithms.apriori import FrequentTable, Rule
from config import MiningConfig, parse_percent, validate_transaction_count
from preprocessing.preprocess import tokenize_transaction

Transactions = List[Set[str]]

PROMPT_COUNT = "Please enter the number of transactions desired: "
PROMPT_SUPPORT = "Please enter the minimum support percentage (e.g., 40): "
PROMPT_CONFIDENCE = "Please enter the minimum confidence percentage (e.g., 60): "
PROMPT_TRANSACTIONS = "\nPlease enter each transaction on a new line:"


class InputFormatError(ValueError):
    """Malformed transaction input."""


def read_session(
    stream: TextIO,
    prompt: Optional[Callable[[str], None]] = None,
) -> Tuple[Transactions, MiningConfig]:
    """
    Read the interactive input protocol:

        <transaction count> <support %> <confidence %>
        <items of transaction 1>
        ...

    The three header numbers are whitespace separated and may span lines;
    anything after the third number on its line is ignored. Each of the
    following lines is one transaction, blank lines being empty transactions.
    """
    pending: List[str] = []

    def next_token(message: str) -> str:
        if prompt is not None:
            prompt(message)
        while not pending:
            line = stream.readline()
            if line == "":
                raise InputFormatError("unexpected end of input while reading the header")
            pending.extend(line.split())
        return pending.pop(0)

    count = validate_transaction_count(next_token(PROMPT_COUNT))
    support = parse_percent(next_token(PROMPT_SUPPORT), "support percentage")
    confidence = parse_percent(next_token(PROMPT_CONFIDENCE), "confidence percentage")

    if prompt is not None:
        prompt(PROMPT_TRANSACTIONS + "\n")

    transactions: Transactions = []
    for i in range(count):
        line = stream.readline()
        if line == "":
            raise InputFormatError(f"expected {count} transactions, got {i}")
        transactions.append(tokenize_transaction(line))

    return transactions, MiningConfig(support, confidence)


def load_transactions_text(path: str, lowercase: bool = False) -> Transactions:
    """
    One transaction per line, items separated by whitespace.
    Lines starting with '#' are comments; blank lines are empty transactions
    and count towards the support threshold.
    """
    transactions: Transactions = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            if line.lstrip().startswith("#"):
                continue
            transactions.append(tokenize_transaction(line, lowercase))
    return transactions


def _split_cell(tid, cell) -> List[dict]:
    if pd.isna(cell):
        return []
    rows = []
    # Split by comma in case it's "milk, bread, eggs"
    for token in str(cell).split(","):
        val = token.strip()
        if val != "":
            rows.append({"tid": tid, "item": val})
    return rows


def load_transactions_csv(path) -> pd.DataFrame:
    """
    Handles a few formats:

    1) Long format, one item column:
        transaction_id, item
        1, "milk"
        1, "bread"

    2) Long format, items column with comma-separated lists:
        transaction_id, items
        1, "milk, bread, eggs"

    3) Wide format, multiple item columns:
        transaction_id, item1, item2, item3, ...

    We always normalize to a long DataFrame with cols: ['tid', 'item'].
    """
    df = pd.read_csv(path)
    cols_lower = [str(c).lower() for c in df.columns]

    # Try to detect a "transaction id" column, fallback to the first column
    tid_col = df.columns[0]
    for c, cl in zip(df.columns, cols_lower):
        if cl in ["transaction_id", "tid", "id"]:
            tid_col = c
            break

    item_col = None
    for c, cl in zip(df.columns, cols_lower):
        if cl in ["item", "items", "product", "products"]:
            item_col = c
            break

    long_rows: List[dict] = []
    if item_col is not None:
        # Case 1/2: a single item(s) column, extra columns ignored
        for _, row in df.iterrows():
            long_rows.extend(_split_cell(row[tid_col], row[item_col]))
    else:
        # Case 3: wide format, every non-id column holds one item
        item_cols = [c for c in df.columns if c != tid_col]
        for _, row in df.iterrows():
            for c in item_cols:
                long_rows.extend(_split_cell(row[tid_col], row[c]))

    return pd.DataFrame(long_rows, columns=["tid", "item"])


def df_to_transactions(df: pd.DataFrame) -> Transactions:
    """
    Convert a long df (tid, item) into a list of item sets, ordered by first appearance of each tid.
    """
    transactions: Transactions = []
    for _, group in df.groupby("tid", sort=False):
        transactions.append(set(group["item"].astype(str)))
    return transactions


def basic_stats(transactions: Iterable[Set[str]]) -> dict:
    """
    Simple statistics about the transaction DB:
      - number of transactions
      - total items (counting duplicates across transactions)
      - unique items
    """
    all_items: Set[str] = set()
    total_items = 0
    count = 0
    for items in transactions:
        all_items |= set(items)
        total_items += len(items)
        count += 1

    return {
        "transaction_count": count,
        "total_items": total_items,
        "unique_items": len(all_items),
    }


def frequent_table_to_df(table: FrequentTable) -> pd.DataFrame:
    """
    Flatten the frequent table into rows (level, itemset, support).
    """
    rows = []
    for k in sorted(table):
        for itemset, support in table[k].items():
            rows.append({"level": k, "itemset": ", ".join(itemset), "support": support})
    return pd.DataFrame(rows, columns=["level", "itemset", "support"])


def rules_to_df(rules: Iterable[Rule]) -> pd.DataFrame:
    rows = [
        {
            "antecedent": ", ".join(r.antecedent),
            "consequent": ", ".join(r.consequent),
            "support": r.support,
            "confidence": r.confidence,
        }
        for r in rules
    ]
    return pd.DataFrame(rows, columns=["antecedent", "consequent", "support", "confidence"])
