import logging
from typing import Dict, Optional

from config import LedgerConfig
from ledger_state import LedgerState
from models import (
    ApplyOutcome,
    Chargeback,
    ClientAccount,
    Deposit,
    Dispute,
    DisputeState,
    HistoryEntry,
    Resolve,
    TransactionRecord,
    Withdrawal,
)

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies transaction records, one at a time and in input order, to the ledger.

    Records that break a business rule (insufficient funds, unknown or foreign
    transaction, dispute in the wrong state, locked account) are ignored without
    touching any state. apply() reports the outcome but never raises for them.
    """

    def __init__(self, config: Optional[LedgerConfig] = None):
        self._config = config if config is not None else LedgerConfig()
        self._state = LedgerState()

    def apply(self, record: TransactionRecord) -> ApplyOutcome:
        """
        Apply a single record.

        Returns:
            APPLIED: The record changed the ledger
            IGNORED: The record was invalid for the current state and was skipped
        """
        match record:
            case Deposit():
                return self._handle_deposit(record)
            case Withdrawal():
                return self._handle_withdrawal(record)
            case Dispute():
                return self._handle_dispute(record)
            case Resolve():
                return self._handle_resolve(record)
            case Chargeback():
                return self._handle_chargeback(record)
            case _:
                raise TypeError(f"Unsupported record type: {type(record).__name__}")

    def accounts(self) -> Dict[int, ClientAccount]:
        """Snapshot of every account, keyed by client id."""
        return self._state.snapshot_accounts()

    def _is_blocked(self, account: Optional[ClientAccount]) -> bool:
        return account is not None and account.locked and self._config.blocks_locked_accounts()

    def _handle_deposit(self, record: Deposit) -> ApplyOutcome:
        if record.amount < 0:
            logger.debug(f"Deposit tx {record.tx_id}: negative amount {record.amount}")
            return ApplyOutcome.IGNORED

        if not self._state.reserve_transaction_id(record.tx_id):
            logger.debug(f"Deposit tx {record.tx_id}: transaction id already used")
            return ApplyOutcome.IGNORED

        if self._is_blocked(self._state.get_account(record.client_id)):
            logger.debug(f"Deposit tx {record.tx_id}: client {record.client_id} is locked")
            return ApplyOutcome.IGNORED

        account = self._state.get_or_create_account(record.client_id)
        account.credit(record.amount)
        self._state.store_deposit(HistoryEntry(tx_id=record.tx_id, client_id=record.client_id, amount=record.amount))
        return ApplyOutcome.APPLIED

    def _handle_withdrawal(self, record: Withdrawal) -> ApplyOutcome:
        if record.amount < 0:
            logger.debug(f"Withdrawal tx {record.tx_id}: negative amount {record.amount}")
            return ApplyOutcome.IGNORED

        if not self._state.reserve_transaction_id(record.tx_id):
            logger.debug(f"Withdrawal tx {record.tx_id}: transaction id already used")
            return ApplyOutcome.IGNORED

        account = self._state.get_account(record.client_id)
        if account is None:
            logger.debug(f"Withdrawal tx {record.tx_id}: no account for client {record.client_id}")
            return ApplyOutcome.IGNORED

        if self._is_blocked(account):
            logger.debug(f"Withdrawal tx {record.tx_id}: client {record.client_id} is locked")
            return ApplyOutcome.IGNORED

        if account.available < record.amount:
            logger.debug(f"Withdrawal tx {record.tx_id}: insufficient funds ({account.available} < {record.amount})")
            return ApplyOutcome.IGNORED

        account.debit(record.amount)
        return ApplyOutcome.APPLIED

    def _find_deposit(self, record: TransactionRecord, expected: DisputeState) -> Optional[HistoryEntry]:
        """Look up the deposit a dispute-family record refers to, if it is in the expected state."""
        entry = self._state.get_deposit(record.tx_id)
        kind = record.transaction_type.value.capitalize()

        if entry is None:
            logger.debug(f"{kind} for tx {record.tx_id}: no such deposit")
            return None

        if entry.client_id != record.client_id:
            logger.debug(f"{kind} for tx {record.tx_id}: client mismatch (expected {entry.client_id}, got {record.client_id})")
            return None

        if entry.dispute_state != expected:
            logger.debug(f"{kind} for tx {record.tx_id}: expected {expected.value}, found {entry!r}")
            return None

        return entry

    def _handle_dispute(self, record: Dispute) -> ApplyOutcome:
        entry = self._find_deposit(record, DisputeState.UNDISPUTED)
        if entry is None:
            return ApplyOutcome.IGNORED

        account = self._state.get_or_create_account(entry.client_id)
        account.hold(entry.amount)
        entry.dispute_state = DisputeState.DISPUTED
        return ApplyOutcome.APPLIED

    def _handle_resolve(self, record: Resolve) -> ApplyOutcome:
        entry = self._find_deposit(record, DisputeState.DISPUTED)
        if entry is None:
            return ApplyOutcome.IGNORED

        account = self._state.get_or_create_account(entry.client_id)
        account.release_hold(entry.amount)
        entry.dispute_state = DisputeState.RESOLVED
        return ApplyOutcome.APPLIED

    def _handle_chargeback(self, record: Chargeback) -> ApplyOutcome:
        entry = self._find_deposit(record, DisputeState.DISPUTED)
        if entry is None:
            return ApplyOutcome.IGNORED

        account = self._state.get_or_create_account(entry.client_id)
        account.remove_held(entry.amount)
        account.lock()
        entry.dispute_state = DisputeState.CHARGED_BACK
        return ApplyOutcome.APPLIED
