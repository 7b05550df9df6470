"""Pool state package.

Provides canonical pair keys and the PoolStore holding reserves and positions.
"""

from .pair import PairKey, pair_key, sort_tokens
from .store import LiquidityPosition, Pool, PoolStore, StoreTransaction

__all__ = [
    "PairKey",
    "pair_key",
    "sort_tokens",
    "Pool",
    "LiquidityPosition",
    "PoolStore",
    "StoreTransaction",
]
