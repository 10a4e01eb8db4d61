import logging
from typing import Dict, Iterable

from csv_reader import read_transactions
from models import ClientAccount, ProcessingResult, ProcessingStats, Transaction
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Runs one processing session: a single sequential pass over the input.
    Transactions are applied strictly in the order they are read.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states. OSError propagates."""
        logger.info(f"Processing {filepath}")

        with open(filepath, "r", newline="") as f:
            transactions = read_transactions(f, on_malformed=lambda line, row: self.stats.record_malformed())
            accounts = self.process_transactions(transactions)

        logger.info(f"Finished {filepath}: {self.stats}")
        return accounts

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply transactions in order and return final account states."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)

            if result == ProcessingResult.SUCCESS:
                self.stats.record_success()
            else:
                self.stats.record_ignored()

        return self._state.get_all_accounts()
