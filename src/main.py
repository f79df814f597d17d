import csv
import logging
import os
import sys
from decimal import Decimal, DecimalException
from typing import Dict, List, TextIO

from config import load_config
from models import MONEY_CONTEXT, ClientAccount
from payments_engine import PaymentsEngine
from records import RecordParseError

logger = logging.getLogger(__name__)

OUTPUT_PRECISION = Decimal("0.0001")
OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros but keeping one."""
    normalized = MONEY_CONTEXT.normalize(MONEY_CONTEXT.quantize(value, OUTPUT_PRECISION))
    text = f"{normalized:f}"
    if "." not in text:
        text += ".0"
    return text


def render_accounts(accounts: Dict[int, ClientAccount]) -> List[list]:
    """Build the account table, one row per client in ascending client id."""
    rows = [OUTPUT_HEADER]
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        rows.append([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
    return rows


def write_accounts(accounts: Dict[int, ClientAccount], out: TextIO) -> None:
    """Write the account table as CSV. Every row is rendered before anything is written."""
    rows = render_accounts(accounts)
    writer = csv.writer(out, lineterminator="\n")
    writer.writerows(rows)


def configure_logging() -> None:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: toy-ledger <transactions.csv>", file=sys.stderr)
        return 1

    configure_logging()
    engine = PaymentsEngine(load_config())

    try:
        accounts = engine.process_file(args[0])
    except (OSError, RecordParseError, DecimalException) as e:
        logger.error(f"Failed to process {args[0]}: {e}")
        return 1

    try:
        write_accounts(accounts, sys.stdout)
    except DecimalException as e:
        logger.error(f"Failed to render balances for {args[0]}: {e!r}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
