import logging
from typing import Dict, Iterable, Optional

from config import LedgerConfig
from ledger_engine import LedgerEngine
from models import ClientAccount, ProcessingStats, TransactionRecord
from records import read_records

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transaction records, in file order, into a LedgerEngine.
    Structural input errors propagate to the caller and abort the run.
    """

    def __init__(self, config: Optional[LedgerConfig] = None):
        self._ledger = LedgerEngine(config)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        with open(filepath, "r", newline="") as f:
            self.process_records(read_records(f))

        logger.info(f"Processed: {self._stats.total}, applied: {self._stats.applied}, ignored: {self._stats.ignored}")
        return self._ledger.accounts()

    def process_records(self, records: Iterable[TransactionRecord]) -> Dict[int, ClientAccount]:
        """Apply already-parsed records in order and return final account states."""
        for record in records:
            self._stats.record(self._ledger.apply(record))
        return self._ledger.accounts()
