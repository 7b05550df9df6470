"""Engine configuration."""

import os
from dataclasses import dataclass

from simpleswap.constants import DEFAULT_CUSTODY, DEFAULT_FEE_BPS, FEE_DENOMINATOR, PRICE_SCALE
from simpleswap.models.types import normalize_address


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the pool engine.

    The trading fee is a single engine-level constant rather than a per-pool
    tier. A fee of 0 bps is the fee-free configuration of the same swap
    algorithm.

    Attributes:
        fee_bps: Trading fee on swap input in basis points (default: 30 = 0.3%)
        price_scale: Fixed-point scale for spot prices (default: 1e18)
        custody: Address of the pool's account on every asset ledger
    """

    fee_bps: int = DEFAULT_FEE_BPS
    price_scale: int = PRICE_SCALE
    custody: str = DEFAULT_CUSTODY

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < FEE_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}), got {self.fee_bps}")
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive, got {self.price_scale}")
        object.__setattr__(self, "custody", normalize_address(self.custody, validate=True))

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for swap math (10000 - fee_bps).

        For 30 bps (0.3%), this returns 9970.
        """
        return FEE_DENOMINATOR - self.fee_bps

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables.

        - SIMPLESWAP_FEE_BPS: Trading fee in basis points (default: 30)
        - SIMPLESWAP_CUSTODY: Pool custody address
        """
        return cls(
            fee_bps=int(os.environ.get("SIMPLESWAP_FEE_BPS", str(DEFAULT_FEE_BPS))),
            custody=os.environ.get("SIMPLESWAP_CUSTODY", DEFAULT_CUSTODY),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
