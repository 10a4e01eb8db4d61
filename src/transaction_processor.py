import logging
from typing import Optional

from models import (
    ClientAccount,
    DisputeTransaction,
    LedgerEntry,
    MonetaryTransaction,
    ProcessingResult,
    Transaction,
    TransactionType,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions against state, one at a time, in the order received.
    Domain violations are never raised: the record is dropped and IGNORED returned.
    """

    def __init__(self, state: StateManager):
        self._state = state
        self._ledger = state.ledger

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Account state changed
            IGNORED: Policy no-op (locked account, duplicate id, insufficient funds, bad reference)
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.debug(f"{transaction}: account {account.client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

        return ProcessingResult.IGNORED

    def _handle_deposit(self, account: ClientAccount, transaction: MonetaryTransaction) -> ProcessingResult:
        if transaction.amount < 0:
            logger.info(f"Deposit tx {transaction.transaction_id}: negative amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if not self._ledger.record(transaction.transaction_id, account.client_id, transaction.amount):
            logger.info(f"Deposit tx {transaction.transaction_id}: duplicate transaction id, keeping original")
            return ProcessingResult.IGNORED

        account.credit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: MonetaryTransaction) -> ProcessingResult:
        if transaction.amount < 0:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: negative amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if transaction.transaction_id in self._ledger:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: duplicate transaction id, keeping original")
            return ProcessingResult.IGNORED

        if transaction.amount > account.available:
            logger.info(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.IGNORED

        self._ledger.record(transaction.transaction_id, account.client_id, transaction.amount)
        account.debit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _find_entry(self, account: ClientAccount, transaction: DisputeTransaction) -> Optional[LedgerEntry]:
        """Ledger entry referenced by a dispute-family record, if it exists and belongs to this client."""
        entry = self._ledger.lookup(transaction.transaction_id)
        name = transaction.transaction_type.value.capitalize()

        if entry is None:
            logger.info(f"{name} for tx {transaction.transaction_id}: transaction not found")
            return None

        if entry.client_id != account.client_id:
            logger.warning(
                f"{name} for tx {transaction.transaction_id}: client mismatch "
                f"(expected {entry.client_id}, got {account.client_id})"
            )
            return None

        return entry

    def _handle_dispute(self, account: ClientAccount, transaction: DisputeTransaction) -> ProcessingResult:
        entry = self._find_entry(account, transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if entry.disputed:
            logger.info(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.IGNORED

        # available must never go negative
        if entry.amount > account.available:
            logger.info(
                f"Dispute for tx {transaction.transaction_id}: available {account.available} "
                f"cannot cover held amount {entry.amount}"
            )
            return ProcessingResult.IGNORED

        account.hold(entry.amount)
        self._ledger.mark_disputed(entry.transaction_id, True)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: DisputeTransaction) -> ProcessingResult:
        entry = self._find_entry(account, transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction not under dispute")
            return ProcessingResult.IGNORED

        account.release_hold(entry.amount)
        self._ledger.mark_disputed(entry.transaction_id, False)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: DisputeTransaction) -> ProcessingResult:
        entry = self._find_entry(account, transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction not under dispute")
            return ProcessingResult.IGNORED

        account.remove_held(entry.amount)
        account.locked = True
        self._ledger.mark_disputed(entry.transaction_id, False)
        logger.info(f"Chargeback for tx {transaction.transaction_id}: account {account.client_id} locked")
        return ProcessingResult.SUCCESS
