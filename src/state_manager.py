from typing import Dict

from ledger import TransactionLedger
from models import ClientAccount


class StateManager:
    """
    State for a single processing run.
    Stores client accounts and the ledger used for dispute lookups.
    Single-threaded: records are applied one at a time in input order.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.ledger = TransactionLedger()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
