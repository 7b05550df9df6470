"""Keyed state container for pools and liquidity positions.

PoolStore owns every Pool and LiquidityPosition record. It has no behavior
beyond lookup and update; the engine stages its writes in a StoreTransaction
and applies them in one step once the whole operation has succeeded.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

import structlog

from simpleswap.errors import InsufficientLiquidity
from simpleswap.models.types import normalize_address
from simpleswap.pools.pair import PairKey

logger = structlog.get_logger()


@dataclass(frozen=True)
class Pool:
    """Reserve state of one canonical pair.

    reserve0/reserve1 follow the canonical ordering of the key, not the order
    a caller supplied the assets in. Both reserves are zero (empty pool) or
    both are positive.
    """

    key: PairKey
    reserve0: int = 0
    reserve1: int = 0
    # Sum of all outstanding liquidity claims on this pool
    total_shares: int = 0

    def __post_init__(self) -> None:
        if self.reserve0 < 0 or self.reserve1 < 0 or self.total_shares < 0:
            raise ValueError(f"Negative pool state: {self}")
        if (self.reserve0 == 0) != (self.reserve1 == 0):
            raise InsufficientLiquidity(
                f"Pool {self.key.token0[-8:]}/{self.key.token1[-8:]} would hold "
                f"reserves {self.reserve0}/{self.reserve1}"
            )

    @property
    def is_empty(self) -> bool:
        return self.reserve0 == 0 and self.reserve1 == 0

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if self.key.orient(token_in) == 0:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def with_reserves(self, token_a: str, reserve_a: int, reserve_b: int) -> Pool:
        """Return a copy with reserves given in (token_a, other) order."""
        if self.key.orient(token_a) == 0:
            return replace(self, reserve0=reserve_a, reserve1=reserve_b)
        return replace(self, reserve0=reserve_b, reserve1=reserve_a)


@dataclass(frozen=True)
class LiquidityPosition:
    """A holder's claim on one pool."""

    holder: str
    key: PairKey
    shares: int = 0


class PoolStore:
    """Pools keyed by PairKey and positions keyed by (holder, PairKey).

    Pools that were never provisioned read as empty; they are only stored
    once written.
    """

    def __init__(self) -> None:
        self._pools: dict[PairKey, Pool] = {}
        self._positions: dict[tuple[str, PairKey], int] = {}

    def get_pool(self, key: PairKey) -> Pool:
        return self._pools.get(key) or Pool(key=key)

    def has_pool(self, key: PairKey) -> bool:
        return key in self._pools

    def put_pool(self, pool: Pool) -> None:
        self._pools[pool.key] = pool

    def get_shares(self, holder: str, key: PairKey) -> int:
        return self._positions.get((normalize_address(holder), key), 0)

    def put_shares(self, holder: str, key: PairKey, shares: int) -> None:
        if shares < 0:
            raise ValueError(f"Negative share balance for {holder}: {shares}")
        self._positions[(normalize_address(holder), key)] = shares

    def get_position(self, holder: str, key: PairKey) -> LiquidityPosition:
        holder_norm = normalize_address(holder)
        shares = self.get_shares(holder_norm, key)
        return LiquidityPosition(holder=holder_norm, key=key, shares=shares)

    def pools(self) -> Iterator[Pool]:
        """Iterate over every pool that has been written at least once."""
        return iter(list(self._pools.values()))

    def positions(self, key: PairKey) -> Iterator[LiquidityPosition]:
        """Iterate over the non-zero positions of one pool."""
        for (holder, pos_key), shares in list(self._positions.items()):
            if pos_key == key and shares > 0:
                yield LiquidityPosition(holder=holder, key=key, shares=shares)

    def begin(self) -> StoreTransaction:
        """Open a staging transaction over this store."""
        return StoreTransaction(self)


class StoreTransaction:
    """Scratch overlay of pending writes against a PoolStore.

    Reads see the pending writes first and fall back to the store. Nothing
    reaches the store until ``commit``; dropping the transaction discards
    every staged write.
    """

    def __init__(self, store: PoolStore) -> None:
        self._store = store
        self._pools: dict[PairKey, Pool] = {}
        self._positions: dict[tuple[str, PairKey], int] = {}
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Store transaction already committed")

    def get_pool(self, key: PairKey) -> Pool:
        if key in self._pools:
            return self._pools[key]
        return self._store.get_pool(key)

    def put_pool(self, pool: Pool) -> None:
        self._check_open()
        self._pools[pool.key] = pool

    def get_shares(self, holder: str, key: PairKey) -> int:
        slot = (normalize_address(holder), key)
        if slot in self._positions:
            return self._positions[slot]
        return self._store.get_shares(holder, key)

    def put_shares(self, holder: str, key: PairKey, shares: int) -> None:
        self._check_open()
        if shares < 0:
            raise ValueError(f"Negative share balance for {holder}: {shares}")
        self._positions[(normalize_address(holder), key)] = shares

    def commit(self) -> None:
        """Apply every staged write to the store."""
        self._check_open()
        for pool in self._pools.values():
            self._store.put_pool(pool)
        for (holder, key), shares in self._positions.items():
            self._store.put_shares(holder, key, shares)
        self._closed = True
        logger.debug(
            "store_committed",
            pools=len(self._pools),
            positions=len(self._positions),
        )
