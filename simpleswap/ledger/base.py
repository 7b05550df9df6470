"""Asset ledger contract used by the pool engine.

The engine never reads ledger balances. It only asks a ledger to move an
amount and observes whether the move succeeded. Python has no implicit
message sender, so the acting identity is passed explicitly: ``operator``
for allowance-based pulls and ``sender`` for direct transfers.
"""

from typing import Protocol, runtime_checkable


class LedgerError(Exception):
    """Base error for asset ledger operations."""

    pass


class InsufficientBalance(LedgerError):
    """Sender holds less than the amount to move."""

    pass


class InsufficientAllowance(LedgerError):
    """Operator is not approved for the amount to move."""

    pass


class Unauthorized(LedgerError):
    """Caller may not perform this ledger operation."""

    pass


@runtime_checkable
class AssetLedger(Protocol):
    """Protocol for fungible asset ledgers.

    Each call either moves the full amount and returns a truthy value, or
    has no effect and returns a falsy value / raises LedgerError.
    """

    def transfer_from(self, operator: str, payer: str, payee: str, amount: int) -> bool:
        """Move ``amount`` from ``payer`` to ``payee`` on ``operator``'s allowance."""
        ...

    def transfer(self, sender: str, payee: str, amount: int) -> bool:
        """Move ``amount`` from ``sender`` to ``payee``."""
        ...
