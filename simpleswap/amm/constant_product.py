"""Constant-product pool math.

The pool prices swaps with the constant product formula: x * y = k
with an optional proportional fee on input amounts. Every function here is
pure integer arithmetic on reserves; all divisions round down so rounding
always favors the pool.
"""

from __future__ import annotations

from simpleswap.constants import FEE_DENOMINATOR, PRICE_SCALE
from simpleswap.errors import (
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientInput,
    InsufficientLiquidity,
    NoLiquidity,
)
from simpleswap.safe_int import S


class ConstantProduct:
    """Constant-product math for provisioning, withdrawal, swaps and prices.

    Formula: amount_out = (in * m * res_out) / (res_in * 10000 + in * m)

    where m = 10000 - fee_bps. With m = 10000 this reduces to the fee-free
    amount_out = in * res_out / (res_in + in).
    """

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B matching ``amount_a`` of A at the current reserve ratio.

        Formula: amount_b = amount_a * reserve_b / reserve_a (truncating)

        Raises:
            InsufficientInput: If amount_a is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_a == 0:
            raise InsufficientInput()
        if reserve_a == 0 or reserve_b == 0:
            raise InsufficientLiquidity()
        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value

    def quote_output(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Fee-free swap output for ``amount_in`` against the given reserves.

        Formula: amount_out = amount_in * reserve_out / (reserve_in + amount_in)

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded down

        Raises:
            InsufficientInput: If amount_in is zero
            InsufficientLiquidity: If either reserve is zero
        """
        return self.get_amount_out(amount_in, reserve_in, reserve_out, FEE_DENOMINATOR)

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = FEE_DENOMINATOR,
    ) -> int:
        """Calculate output amount using the constant product formula with fee.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: 10000 - fee_bps (9970 for 0.3%, 10000 for no fee)

        Returns:
            Output token amount, rounded down

        Raises:
            InsufficientInput: If amount_in is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_in == 0:
            raise InsufficientInput()
        if reserve_in == 0 or reserve_out == 0:
            raise InsufficientLiquidity()

        amount_in_with_fee = S(amount_in) * S(fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def optimal_amounts(
        self,
        reserve_a: int,
        reserve_b: int,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
    ) -> tuple[int, int]:
        """Deposit amounts for provisioning at the current reserve ratio.

        An empty pool accepts the desired amounts as-is. Otherwise side B is
        matched to the full desired A first; if that would exceed B's ceiling,
        side A is matched to the full desired B instead.

        Returns:
            (amount_a, amount_b) to deposit

        Raises:
            InsufficientAAmount / InsufficientBAmount: If the matched amount
                falls below the caller's minimum
        """
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired

        amount_b_optimal = self.quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            if amount_b_optimal < amount_b_min:
                raise InsufficientBAmount(
                    f"Optimal B amount {amount_b_optimal} below minimum {amount_b_min}"
                )
            return amount_a_desired, amount_b_optimal

        amount_a_optimal = self.quote(amount_b_desired, reserve_b, reserve_a)
        if amount_a_optimal < amount_a_min:
            raise InsufficientAAmount(
                f"Optimal A amount {amount_a_optimal} below minimum {amount_a_min}"
            )
        return amount_a_optimal, amount_b_desired

    def withdrawal_amounts(self, liquidity: int, reserve_a: int, reserve_b: int) -> tuple[int, int]:
        """Split a burned claim across both reserves.

        Formula: amount_x = liquidity * reserve_x / (reserve_a + reserve_b)

        Each side is truncated independently, never in the withdrawer's favor.

        Raises:
            InsufficientLiquidity: If the pool is empty or the claim exceeds
                the combined reserves
        """
        total = S(reserve_a) + S(reserve_b)
        if not total:
            raise InsufficientLiquidity("Pool has no reserves")
        if total < liquidity:
            raise InsufficientLiquidity(
                f"Claim {liquidity} exceeds combined reserves {total.value}"
            )
        amount_a = S(liquidity) * S(reserve_a) // total
        amount_b = S(liquidity) * S(reserve_b) // total
        return amount_a.value, amount_b.value

    def spot_price(self, reserve_a: int, reserve_b: int, scale: int = PRICE_SCALE) -> int:
        """Units of B per unit of A, scaled by ``scale``.

        Raises:
            NoLiquidity: If reserve_a is zero
        """
        if reserve_a == 0:
            raise NoLiquidity()
        return (S(reserve_b) * S(scale) // S(reserve_a)).value


# Singleton instance
constant_product = ConstantProduct()
