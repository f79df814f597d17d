"""
Runtime configuration for the ledger.

The only setting is whether accounts locked by a chargeback refuse further
deposits and withdrawals. It is read once from the `BLOCK_LOCKED_ACCOUNTS`
environment variable and handed to the engine as an immutable value.
"""

import logging
import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

BLOCK_LOCKED_ACCOUNTS_ENV = "BLOCK_LOCKED_ACCOUNTS"


class LedgerConfig(BaseModel):
    """Settings resolved at startup and fixed for the rest of the run."""

    model_config = ConfigDict(frozen=True)

    block_locked_accounts: bool = False

    @field_validator("block_locked_accounts", mode="before")
    @classmethod
    def parse_toggle(cls, v: Any) -> bool:
        if v is None or isinstance(v, bool):
            return bool(v)
        value = str(v)
        if value == "true":
            return True
        if value != "false":
            logger.warning(f"Unrecognised {BLOCK_LOCKED_ACCOUNTS_ENV} value {v!r}, defaulting to false")
        return False

    def blocks_locked_accounts(self) -> bool:
        return self.block_locked_accounts


def load_config(environ: Optional[Mapping[str, str]] = None) -> LedgerConfig:
    """Build a LedgerConfig from the process environment (or the given mapping)."""
    if environ is None:
        environ = os.environ
    return LedgerConfig(block_locked_accounts=environ.get(BLOCK_LOCKED_ACCOUNTS_ENV))
