"""Index ledger state: virtual/real totals and per-account real balances."""

from .exceptions import (
    InsufficientBalance,
    InsufficientVirtual,
    LedgerError,
    LedgerInvariantError,
)
from .index_ledger import IndexLedger
from .models import IndexSnapshot, IndexState

__all__ = [
    "IndexLedger",
    "IndexSnapshot",
    "IndexState",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientVirtual",
    "LedgerInvariantError",
]
