"""Pool engine error classes.

Every failure of an engine operation is one of these named conditions.
Each carries a stable ``code`` matching the revert reason of the on-chain
pool these semantics come from, so callers and the HTTP layer can report
it without parsing messages.
"""

from typing import ClassVar


class PoolError(Exception):
    """Base error for pool engine operations."""

    code: ClassVar[str] = "POOL_ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class Expired(PoolError):
    """The operation's deadline has passed."""

    code = "EXPIRED"


class IdenticalAssets(PoolError):
    """Both sides of a pair are the same asset."""

    code = "IDENTICAL_ADDRESSES"


class InsufficientAAmount(PoolError):
    """Amount of asset A is below the caller's minimum."""

    code = "INSUFFICIENT_A_AMOUNT"


class InsufficientBAmount(PoolError):
    """Amount of asset B is below the caller's minimum."""

    code = "INSUFFICIENT_B_AMOUNT"


class InsufficientLiquidity(PoolError):
    """Claim or reserves too small for the requested operation."""

    code = "INSUFFICIENT_LIQUIDITY"


class InsufficientOutput(PoolError):
    """Swap output is below the caller's minimum."""

    code = "INSUFFICIENT_OUTPUT_AMOUNT"


class InsufficientInput(PoolError):
    """Input amount is zero."""

    code = "INSUFFICIENT_INPUT_AMOUNT"


class UnsupportedPath(PoolError):
    """Swap path is not a direct two-asset path."""

    code = "INVALID_PATH"


class NoLiquidity(PoolError):
    """Price requested for a pool without reserves."""

    code = "NO_LIQUIDITY"


class TransferFailed(PoolError):
    """An asset ledger rejected a custody move."""

    code = "TRANSFER_FAILED"


class ReentrantCall(PoolError):
    """Engine entered again while an operation is in progress on this thread."""

    code = "REENTRANT_CALL"
