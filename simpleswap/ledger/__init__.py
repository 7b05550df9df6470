"""Asset ledger collaborators."""

from simpleswap.ledger.base import (
    AssetLedger,
    InsufficientAllowance,
    InsufficientBalance,
    LedgerError,
    Unauthorized,
)
from simpleswap.ledger.memory import InMemoryLedger

__all__ = [
    "AssetLedger",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Unauthorized",
    "InMemoryLedger",
]
