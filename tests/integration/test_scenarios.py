"""End-to-end pool scenarios over real in-memory ledgers.

Each test starts from two freshly deployed tokens and a pool seeded with
500/500 by the deployer (with 490/490 slippage floors).
"""

import pytest

from simpleswap.constants import PRICE_SCALE
from simpleswap.errors import (
    Expired,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientInput,
    InsufficientLiquidity,
    InsufficientOutput,
    NoLiquidity,
)
from tests.helpers import DEADLINE, ERX, NINX, NOW, ONE, OWNER, THIRD, USER


@pytest.fixture
def pool(engine_and_ledgers):
    engine, ledgers = engine_and_ledgers
    engine.add_liquidity(
        ERX, NINX, 500 * ONE, 500 * ONE, 490 * ONE, 490 * ONE, OWNER, DEADLINE, sender=OWNER
    )
    return engine, ledgers


@pytest.fixture
def user_with_erx(pool):
    """USER holding 10 ERX, approved for the pool."""
    engine, ledgers = pool
    ledgers[ERX].transfer(OWNER, USER, 10 * ONE)
    ledgers[ERX].approve(USER, engine.config.custody, 10 * ONE)
    return USER


class TestLiquidityLifecycle:
    """Provisioning and withdrawing the seeded pool."""

    def test_seeded_reserves(self, pool):
        engine, _ = pool
        assert engine.get_reserves(ERX, NINX) == (500 * ONE, 500 * ONE)

    def test_remove_everything(self, pool):
        engine, _ = pool
        liquidity = engine.get_liquidity(OWNER, ERX, NINX)

        engine.remove_liquidity(ERX, NINX, liquidity, ONE, ONE, OWNER, DEADLINE, sender=OWNER)

        assert engine.get_reserves(ERX, NINX) == (0, 0)

    def test_reseed_after_draining(self, pool):
        """A drained pool can be provisioned again at a new price."""
        engine, _ = pool
        engine.remove_liquidity(ERX, NINX, 1_000 * ONE, 0, 0, OWNER, DEADLINE, sender=OWNER)

        engine.add_liquidity(ERX, NINX, ONE, 3 * ONE, 0, 0, OWNER, DEADLINE, sender=OWNER)

        assert engine.get_price(ERX, NINX) == 3 * PRICE_SCALE

    def test_optimal_b_below_minimum(self, pool):
        engine, _ = pool
        with pytest.raises(InsufficientBAmount):
            engine.add_liquidity(
                ERX, NINX, 100 * ONE, 100 * ONE, 90 * ONE, 200 * ONE, OWNER, DEADLINE,
                sender=OWNER,
            )

    def test_optimal_a_below_minimum(self, pool):
        engine, _ = pool
        with pytest.raises(InsufficientAAmount):
            engine.add_liquidity(
                ERX, NINX, 50 * ONE, 10 * ONE, 60 * ONE, ONE, OWNER, DEADLINE, sender=OWNER
            )


class TestSwapping:
    """Swaps from ERX to NINX by a second account."""

    def test_swap_increases_output_balance(self, pool, user_with_erx):
        engine, ledgers = pool
        before = ledgers[NINX].balance_of(user_with_erx)

        engine.swap_exact_tokens_for_tokens(
            10 * ONE, 0, [ERX, NINX], user_with_erx, DEADLINE, sender=user_with_erx
        )

        assert ledgers[NINX].balance_of(user_with_erx) > before
        assert ledgers[ERX].balance_of(user_with_erx) == 0

    def test_expired_swap(self, pool, user_with_erx):
        engine, _ = pool
        with pytest.raises(Expired):
            engine.swap_exact_tokens_for_tokens(
                10 * ONE, 0, [ERX, NINX], user_with_erx, NOW - 60, sender=user_with_erx
            )

    @pytest.mark.parametrize("minimum", [50 * ONE, 1_000 * ONE])
    def test_output_below_minimum(self, pool, user_with_erx, minimum):
        engine, ledgers = pool
        with pytest.raises(InsufficientOutput):
            engine.swap_exact_tokens_for_tokens(
                10 * ONE, minimum, [ERX, NINX], user_with_erx, DEADLINE, sender=user_with_erx
            )
        assert ledgers[ERX].balance_of(user_with_erx) == 10 * ONE


class TestPricing:
    """Spot price and stateless output quotes."""

    def test_price_positive(self, pool):
        engine, _ = pool
        assert engine.get_price(ERX, NINX) > 0

    def test_price_in_either_order(self, pool):
        """Both argument orders read the same pool."""
        engine, _ = pool
        assert engine.get_price(NINX, ERX) == PRICE_SCALE

    def test_price_of_unprovisioned_pair(self, pool):
        engine, _ = pool
        with pytest.raises(NoLiquidity):
            engine.get_price(THIRD, ERX)

    def test_get_amount_out_matches_formula(self, pool):
        engine, _ = pool
        amount_in, reserve_in, reserve_out = 10 * ONE, 500 * ONE, 500 * ONE

        expected = amount_in * reserve_out // (reserve_in + amount_in)

        assert engine.get_amount_out(amount_in, reserve_in, reserve_out) == expected

    def test_get_amount_out_zero_input(self, pool):
        engine, _ = pool
        with pytest.raises(InsufficientInput):
            engine.get_amount_out(0, 100 * ONE, 100 * ONE)

    def test_get_amount_out_zero_reserves(self, pool):
        engine, _ = pool
        with pytest.raises(InsufficientLiquidity):
            engine.get_amount_out(10 * ONE, 0, 100 * ONE)
        with pytest.raises(InsufficientLiquidity):
            engine.get_amount_out(10 * ONE, 100 * ONE, 0)
