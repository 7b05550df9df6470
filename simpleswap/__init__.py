"""SimpleSwap - constant-product liquidity pool engine."""

from simpleswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from simpleswap.engine import LiquidityResult, PoolEngine, get_default_engine
from simpleswap.pools import PairKey, PoolStore, pair_key

__version__ = "0.1.0"
__all__ = [
    "PoolEngine",
    "LiquidityResult",
    "get_default_engine",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "PoolStore",
    "PairKey",
    "pair_key",
    "__version__",
]
