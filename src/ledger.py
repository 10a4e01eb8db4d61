from decimal import Decimal
from typing import Dict, Optional

from models import LedgerEntry


class TransactionLedger:
    """
    Append-only record of accepted deposits and withdrawals, keyed by transaction id.
    Shared across all clients so dispute records can be checked for ownership.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def record(self, transaction_id: int, client_id: int, amount: Decimal) -> bool:
        """
        Insert a new entry.
        Returns False without touching the existing entry if the id is already taken.
        """
        if transaction_id in self._entries:
            return False
        self._entries[transaction_id] = LedgerEntry(
            transaction_id=transaction_id,
            client_id=client_id,
            amount=amount,
        )
        return True

    def lookup(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve entry by transaction id."""
        return self._entries.get(transaction_id)

    def mark_disputed(self, transaction_id: int, disputed: bool) -> None:
        """Set the dispute flag. Caller must have checked the entry exists."""
        self._entries[transaction_id].disputed = disputed

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
