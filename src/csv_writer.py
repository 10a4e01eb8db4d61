import csv
from decimal import Decimal, localcontext
from typing import Dict, TextIO

from models import ClientAccount

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]
FOUR_PLACES = Decimal("0.0001")
FRACTIONAL_DIGITS = 4


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places, keeping trailing zeros."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + FRACTIONAL_DIGITS)
        return f"{value.quantize(FOUR_PLACES):f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """
    Write final account states as CSV, ordered by client id.
    Every row is formatted before anything is written.
    """
    rows = []
    for client_id in sorted(accounts):
        account = accounts[client_id]
        rows.append([
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    writer.writerows(rows)
