"""Canonical pair keys.

A pool is identified by an unordered pair of distinct assets. The key is
built by normalizing both addresses and ordering them, so ``(a, b)`` and
``(b, a)`` always resolve to the same pool. All store lookups go through
``pair_key``.
"""

from __future__ import annotations

import hashlib
from typing import NamedTuple

from eth_abi import encode  # type: ignore[attr-defined]

from simpleswap.errors import IdenticalAssets
from simpleswap.models.types import normalize_address


class PairKey(NamedTuple):
    """Canonically ordered asset pair (token0 < token1)."""

    token0: str
    token1: str

    @property
    def pair_id(self) -> str:
        """Order-independent hash of the pair.

        sha256 over the ABI encoding of ``(address token0, address token1)``.
        """
        packed = encode(["address", "address"], [self.token0, self.token1])
        return "0x" + hashlib.sha256(packed).hexdigest()

    def orient(self, token: str) -> int:
        """Return the canonical position (0 or 1) of a token in this pair.

        Raises:
            ValueError: If the token is not part of the pair
        """
        token_norm = normalize_address(token)
        if token_norm == self.token0:
            return 0
        if token_norm == self.token1:
            return 1
        raise ValueError(f"Token {token} not in pair")

    def other(self, token: str) -> str:
        """Return the counterpart of ``token`` in this pair."""
        return self.token1 if self.orient(token) == 0 else self.token0


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Normalize and order two token addresses.

    Raises:
        IdenticalAssets: If both addresses refer to the same asset
        ValueError: If either address is malformed
    """
    a = normalize_address(token_a, validate=True)
    b = normalize_address(token_b, validate=True)
    if a == b:
        raise IdenticalAssets(f"Pair needs two distinct assets, got {a} twice")
    return (a, b) if a < b else (b, a)


def pair_key(token_a: str, token_b: str) -> PairKey:
    """Build the canonical key for a pair of assets (argument order irrelevant)."""
    token0, token1 = sort_tokens(token_a, token_b)
    return PairKey(token0, token1)
