"""Test helpers module for shared test utilities.

- constants: Asset/account addresses, amounts and the fixed clock reading
- factories: Ledger and engine factory functions
"""

from tests.helpers.constants import (
    CUSTODY,
    DEADLINE,
    ERX,
    INITIAL_SUPPLY,
    NINX,
    NOW,
    ONE,
    OTHER,
    OWNER,
    THIRD,
    USER,
)
from tests.helpers.factories import FixedClock, fund, make_engine, make_ledger, seed_pool

__all__ = [
    # Constants
    "ERX",
    "NINX",
    "THIRD",
    "OWNER",
    "USER",
    "OTHER",
    "CUSTODY",
    "ONE",
    "INITIAL_SUPPLY",
    "NOW",
    "DEADLINE",
    # Factories
    "FixedClock",
    "make_ledger",
    "make_engine",
    "fund",
    "seed_pool",
]
