"""Tests for constant-product pool math."""

import pytest

from simpleswap.amm import ConstantProduct, constant_product
from simpleswap.constants import PRICE_SCALE
from simpleswap.errors import (
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientInput,
    InsufficientLiquidity,
    NoLiquidity,
)
from simpleswap.safe_int import Uint256Overflow


class TestGetAmountOut:
    """Tests for swap output with and without fee."""

    def test_fee_free_small_pool(self):
        """10 in against 500/500 without fee: 10*500/510 = 9.8, rounded down."""
        assert constant_product.get_amount_out(10, 500, 500, 10_000) == 9

    def test_default_fee_small_pool(self):
        """10 in against 500/500 at 0.3%: 49_850_000 / 5_099_700 = 9.77, rounded down."""
        assert constant_product.get_amount_out(10, 500, 500, 9_970) == 9

    def test_fee_reduces_output(self):
        """The fee always leaves the trader with no more than the fee-free output."""
        amm = ConstantProduct()
        amount_in = 1 * 10**18
        reserve_in = 100 * 10**18
        reserve_out = 250_000 * 10**6

        with_fee = amm.get_amount_out(amount_in, reserve_in, reserve_out, 9_970)
        without_fee = amm.get_amount_out(amount_in, reserve_in, reserve_out)

        assert with_fee < without_fee
        # (1 * 9970 * 250000) / (100 * 10000 + 1 * 9970) = 2467.895...
        assert with_fee == 2_467_895_085

    def test_output_below_reserve(self):
        """A huge input still cannot drain the output reserve."""
        amount_out = constant_product.get_amount_out(10**30, 1_000, 1_000, 9_970)
        assert amount_out < 1_000

    def test_zero_input_rejected(self):
        with pytest.raises(InsufficientInput):
            constant_product.get_amount_out(0, 100, 100)

    def test_zero_reserve_rejected(self):
        with pytest.raises(InsufficientLiquidity):
            constant_product.get_amount_out(100, 0, 100)
        with pytest.raises(InsufficientLiquidity):
            constant_product.get_amount_out(100, 100, 0)

    def test_overflow_raises(self):
        """Products beyond uint256 fail instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            constant_product.get_amount_out(2**200, 2**100, 2**100, 9_970)

    def test_quote_output_is_fee_free(self):
        assert constant_product.quote_output(10, 500, 500) == 9
        assert constant_product.quote_output(100, 1_000, 1_000) == 90


class TestQuote:
    """Tests for ratio quoting."""

    def test_proportional(self):
        assert constant_product.quote(10, 100, 200) == 20

    def test_truncates(self):
        assert constant_product.quote(1, 3, 2) == 0
        assert constant_product.quote(10, 3, 2) == 6

    def test_zero_amount_rejected(self):
        with pytest.raises(InsufficientInput):
            constant_product.quote(0, 100, 100)

    def test_zero_reserve_rejected(self):
        with pytest.raises(InsufficientLiquidity):
            constant_product.quote(10, 0, 100)


class TestOptimalAmounts:
    """Tests for ratio-matched provisioning amounts."""

    def test_empty_pool_takes_desired(self):
        assert constant_product.optimal_amounts(0, 0, 70, 30, 0, 0) == (70, 30)

    def test_matches_b_to_desired_a(self):
        """B is matched to the full desired A when it fits under B's ceiling."""
        assert constant_product.optimal_amounts(100, 100, 50, 80, 0, 0) == (50, 50)

    def test_matches_a_to_desired_b(self):
        """A is matched to the full desired B when B would exceed its ceiling."""
        assert constant_product.optimal_amounts(100, 200, 50, 60, 0, 0) == (30, 60)

    def test_b_below_minimum(self):
        """Reserves 100/100, desired 100/100, B min 200: matched B of 100 is too low."""
        with pytest.raises(InsufficientBAmount):
            constant_product.optimal_amounts(100, 100, 100, 100, 90, 200)

    def test_a_below_minimum(self):
        """Reserves 100/100, desired 50/10, A min 60: matched A of 10 is too low."""
        with pytest.raises(InsufficientAAmount):
            constant_product.optimal_amounts(100, 100, 50, 10, 60, 1)


class TestWithdrawalAmounts:
    """Tests for splitting a burned claim across reserves."""

    def test_balanced_pool(self):
        assert constant_product.withdrawal_amounts(100, 500, 500) == (50, 50)

    def test_full_claim_drains_pool(self):
        assert constant_product.withdrawal_amounts(1_000, 500, 500) == (500, 500)

    def test_skewed_pool_truncates_each_side(self):
        """Claim 10 on 510/491: 5100/1001 = 5.09 and 4910/1001 = 4.9."""
        assert constant_product.withdrawal_amounts(10, 510, 491) == (5, 4)

    def test_empty_pool_rejected(self):
        with pytest.raises(InsufficientLiquidity):
            constant_product.withdrawal_amounts(10, 0, 0)

    def test_claim_above_reserves_rejected(self):
        with pytest.raises(InsufficientLiquidity):
            constant_product.withdrawal_amounts(1_001, 500, 500)


class TestSpotPrice:
    """Tests for scaled spot prices."""

    def test_balanced_pool_prices_at_one(self):
        assert constant_product.spot_price(500, 500) == PRICE_SCALE

    def test_price_is_b_per_a(self):
        assert constant_product.spot_price(100, 250) == 5 * PRICE_SCALE // 2
        assert constant_product.spot_price(250, 100) == 2 * PRICE_SCALE // 5

    def test_custom_scale(self):
        assert constant_product.spot_price(3, 1, scale=1_000) == 333

    def test_empty_pool_rejected(self):
        with pytest.raises(NoLiquidity):
            constant_product.spot_price(0, 0)
