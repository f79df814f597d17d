import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import Chargeback, Deposit, Dispute, Resolve, TransactionRecord, TransactionType, Withdrawal

logger = logging.getLogger(__name__)


class RecordParseError(ValueError):
    """Raised when an input row does not have the shape of a transaction record."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def _parse_amount(raw: str) -> Decimal:
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise RecordParseError(f"invalid amount {raw!r}")
    if not amount.is_finite():
        raise RecordParseError(f"invalid amount {raw!r}")
    return amount


def parse_row(row: Dict[str, Optional[str]]) -> Optional[TransactionRecord]:
    """
    Parse a CSV row (as produced by csv.DictReader) into a typed record.

    Returns None for a deposit or withdrawal with an empty amount; such rows are
    skipped, not treated as malformed.
    """
    # Surplus fields land under the None key; short rows give None values.
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        type_str = normalized["type"].lower()
        client_str = normalized["client"]
        tx_str = normalized["tx"]
    except KeyError as e:
        raise RecordParseError(f"missing column {e.args[0]!r}")

    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise RecordParseError(f"unknown transaction type {type_str!r}")

    try:
        client_id = int(client_str)
        tx_id = int(tx_str)
    except ValueError:
        raise RecordParseError(f"invalid client or tx id ({client_str!r}, {tx_str!r})")

    amount_str = normalized.get("amount", "")

    match transaction_type:
        case TransactionType.DEPOSIT | TransactionType.WITHDRAWAL:
            if not amount_str:
                logger.debug(f"Skipping {transaction_type.value} tx {tx_id}: no amount")
                return None
            record_class = Deposit if transaction_type == TransactionType.DEPOSIT else Withdrawal
            return record_class(client_id=client_id, tx_id=tx_id, amount=_parse_amount(amount_str))
        case TransactionType.DISPUTE:
            return Dispute(client_id=client_id, tx_id=tx_id)
        case TransactionType.RESOLVE:
            return Resolve(client_id=client_id, tx_id=tx_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(client_id=client_id, tx_id=tx_id)


def read_records(stream: TextIO) -> Iterator[TransactionRecord]:
    """Yield records from a CSV stream with a `type, client, tx, amount` header."""
    reader = csv.DictReader(stream)
    if reader.fieldnames is None:
        return
    for row in reader:
        try:
            record = parse_row(row)
        except RecordParseError as e:
            raise RecordParseError(str(e), line_number=reader.line_num) from e
        if record is not None:
            yield record
