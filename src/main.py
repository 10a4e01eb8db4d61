import csv
import logging
import os
import sys
from typing import List, Optional

from csv_writer import write_accounts
from payments_engine import PaymentsEngine

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"


def configure_logging() -> None:
    """Log to stderr so stdout carries only the CSV output."""
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[1]
    engine = PaymentsEngine()

    try:
        accounts = engine.process_file(filepath)
    except (OSError, csv.Error) as e:
        print(f"Error: cannot read {filepath}: {e}", file=sys.stderr)
        return 1

    try:
        write_accounts(accounts, sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        print(f"Error: cannot write output: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
