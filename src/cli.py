# src/cli.py

import argparse
import logging
import sys
from typing import List, Optional

from config import ConfigError, DEFAULT_MIN_CONFIDENCE_PERCENT, DEFAULT_MIN_SUPPORT_PERCENT, MiningConfig, parse_percent
from data_io import InputFormatError, df_to_transactions, load_transactions_csv, load_transactions_text, read_session
from pipeline import run_apriori
from presentation import format_frequent_itemsets, format_report


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="apriori-mine",
        description="Mine frequent itemsets and association rules with Apriori. "
                    "Without --file/--csv the transactions are read interactively from stdin.",
    )
    source = ap.add_mutually_exclusive_group()
    source.add_argument("--file", help="text file, one whitespace-separated transaction per line")
    source.add_argument("--csv", help="CSV file of transactions (long or wide format)")
    ap.add_argument("--support", default=None,
                    help=f"minimum support percentage (default {DEFAULT_MIN_SUPPORT_PERCENT:g})")
    ap.add_argument("--confidence", default=None,
                    help=f"minimum confidence percentage (default {DEFAULT_MIN_CONFIDENCE_PERCENT:g})")
    ap.add_argument("--lowercase", action="store_true", help="lowercase item names when reading files")
    ap.add_argument("--show-itemsets", action="store_true", help="also print frequent itemsets per level")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def _prompt(message: str) -> None:
    sys.stdout.write(message)
    sys.stdout.flush()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.file or args.csv:
            if args.file:
                transactions = load_transactions_text(args.file, args.lowercase)
            else:
                transactions = df_to_transactions(load_transactions_csv(args.csv))
            config = MiningConfig(
                DEFAULT_MIN_SUPPORT_PERCENT if args.support is None
                else parse_percent(args.support, "support percentage"),
                DEFAULT_MIN_CONFIDENCE_PERCENT if args.confidence is None
                else parse_percent(args.confidence, "confidence percentage"),
            )
        else:
            transactions, config = read_session(sys.stdin, _prompt)
        result = run_apriori(transactions, config)
    except (ConfigError, InputFormatError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print()
    if args.show_itemsets:
        print(format_frequent_itemsets(result))
    print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
