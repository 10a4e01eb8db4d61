from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_monetary(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass(frozen=True)
class MonetaryTransaction:
    """Deposit or withdrawal. Always carries an amount."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal

    def __post_init__(self):
        if not self.transaction_type.is_monetary:
            raise ValueError(f"{self.transaction_type.value} does not carry an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class DisputeTransaction:
    """Dispute, resolve or chargeback. References an earlier monetary transaction by id."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int

    def __post_init__(self):
        if self.transaction_type.is_monetary:
            raise ValueError(f"{self.transaction_type.value} requires an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id})"


Transaction = Union[MonetaryTransaction, DisputeTransaction]


def make_transaction(
    transaction_type: TransactionType,
    client_id: int,
    transaction_id: int,
    amount: Optional[Decimal] = None,
) -> Transaction:
    """
    Build the variant matching transaction_type.
    An amount passed for a dispute, resolve or chargeback is dropped.
    """
    if transaction_type.is_monetary:
        if amount is None:
            raise ValueError(f"{transaction_type.value} tx {transaction_id}: missing amount")
        return MonetaryTransaction(transaction_type, client_id, transaction_id, amount)
    return DisputeTransaction(transaction_type, client_id, transaction_id)


@dataclass
class LedgerEntry:
    transaction_id: int
    client_id: int
    amount: Decimal
    disputed: bool = False


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount


class ProcessingStats:
    """Counters for the end-of-run report."""

    def __init__(self):
        self.processed = 0
        self.ignored = 0
        self.malformed = 0

    def record_success(self):
        self.processed += 1

    def record_ignored(self):
        self.ignored += 1

    def record_malformed(self):
        self.malformed += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Ignored: {self.ignored}, Malformed: {self.malformed}"
