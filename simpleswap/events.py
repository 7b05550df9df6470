"""Notifications emitted by the pool engine after an operation commits.

Events are append-only and have no effect on engine behavior. The engine
writes each one to the structlog stream and hands it to every registered
listener.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import ClassVar


@dataclass(frozen=True)
class LiquidityAdded:
    """Liquidity provisioned into a pool."""

    name: ClassVar[str] = "liquidity_added"

    provider: str
    token_a: str
    token_b: str
    amount_a: int
    amount_b: int
    liquidity: int

    def as_log(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class LiquidityRemoved:
    """Liquidity withdrawn from a pool."""

    name: ClassVar[str] = "liquidity_removed"

    provider: str
    token_a: str
    token_b: str
    amount_a: int
    amount_b: int

    def as_log(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class SwapExecuted:
    """Exact-input swap through a pool."""

    name: ClassVar[str] = "swap_executed"

    sender: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int

    def as_log(self) -> dict[str, object]:
        return asdict(self)


PoolEvent = LiquidityAdded | LiquidityRemoved | SwapExecuted

EventListener = Callable[[PoolEvent], None]
