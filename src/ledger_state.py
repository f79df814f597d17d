from dataclasses import replace
from typing import Dict, Optional, Set

from models import ClientAccount, HistoryEntry


class LedgerState:
    """
    In-memory ledger state owned by a single LedgerEngine.
    Stores client accounts and the deposit history used for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._history: Dict[int, HistoryEntry] = {}
        # Deposit and withdrawal ids seen so far, applied or not.
        self._seen_transaction_ids: Set[int] = set()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account for a client, or None if it was never created."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_deposit(self, entry: HistoryEntry) -> None:
        """Store a deposit for future dispute lookups."""
        self._history[entry.tx_id] = entry

    def get_deposit(self, tx_id: int) -> Optional[HistoryEntry]:
        """Retrieve stored deposit by transaction ID."""
        return self._history.get(tx_id)

    def reserve_transaction_id(self, tx_id: int) -> bool:
        """Mark a transaction id as seen. Returns False if it was already taken."""
        if tx_id in self._seen_transaction_ids:
            return False
        self._seen_transaction_ids.add(tx_id)
        return True

    def snapshot_accounts(self) -> Dict[int, ClientAccount]:
        """Return copies of all accounts (for final output)."""
        return {client_id: replace(account) for client_id, account in self._accounts.items()}
