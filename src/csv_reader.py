import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Iterator, List, Optional, TextIO, Union

from models import Transaction, TransactionType, make_transaction

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
AMOUNT_PRECISION = 4
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_PRECISION)
# balances stay exact under the default 28-digit decimal context
MAX_AMOUNT_INTEGER_DIGITS = 20


class MalformedRowError(ValueError):
    """Row cannot be decoded into a transaction."""


def parse_amount(value: str) -> Optional[Decimal]:
    """
    Parse an amount cell. Empty cell means no amount.
    More than four fractional digits is rejected, not truncated.
    Amounts too large to stay exact under account arithmetic are rejected.
    """
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise MalformedRowError(f"invalid amount {value!r}")
    if not amount.is_finite():
        raise MalformedRowError(f"invalid amount {value!r}")
    if amount.adjusted() >= MAX_AMOUNT_INTEGER_DIGITS:
        raise MalformedRowError(f"amount {value!r} has more than {MAX_AMOUNT_INTEGER_DIGITS} integer digits")
    if amount.quantize(AMOUNT_QUANTUM) != amount:
        raise MalformedRowError(f"amount {value!r} has more than {AMOUNT_PRECISION} decimal places")
    return amount


def _parse_id(value: str, name: str, maximum: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise MalformedRowError(f"invalid {name} {value!r}")
    if not 0 <= parsed <= maximum:
        raise MalformedRowError(f"{name} {parsed} out of range")
    return parsed


def _normalize_row(row: Dict[Optional[str], Union[str, List[str], None]]) -> Dict[str, str]:
    # DictReader puts overflow cells under None and fills short rows with None
    normalized = {}
    for key, value in row.items():
        if key is None:
            if any(cell.strip() for cell in value):
                raise MalformedRowError("too many fields")
            continue
        normalized[key.strip().lower()] = value.strip() if value is not None else ""
    return normalized


def parse_row(row: Dict[Optional[str], Union[str, List[str], None]]) -> Transaction:
    """Parse CSV row into Transaction. Raises MalformedRowError."""
    normalized = _normalize_row(row)

    try:
        type_str = normalized["type"].lower()
        client_str = normalized["client"]
        tx_str = normalized["tx"]
    except KeyError as e:
        raise MalformedRowError(f"missing column {e}")

    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise MalformedRowError(f"invalid transaction type {type_str!r}")

    client_id = _parse_id(client_str, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(tx_str, "tx", MAX_TRANSACTION_ID)
    amount = parse_amount(normalized.get("amount", ""))

    try:
        return make_transaction(transaction_type, client_id, transaction_id, amount)
    except ValueError as e:
        raise MalformedRowError(str(e))


def read_transactions(
    stream: TextIO,
    on_malformed: Optional[Callable[[int, Dict], None]] = None,
) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV stream in input order.
    Malformed rows are logged and skipped. csv.Error and I/O errors propagate.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    for row in reader:
        try:
            transaction = parse_row(row)
        except MalformedRowError as e:
            logger.warning(f"Skipping malformed row at line {reader.line_num}: {e}")
            if on_malformed is not None:
                on_malformed(reader.line_num, row)
            continue
        yield transaction
