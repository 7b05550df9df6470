"""Tests for SafeInt checked arithmetic."""

import pytest

from simpleswap.constants import UINT256_MAX
from simpleswap.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
    to_amount,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_bounds_accepted(self):
        """Zero and uint256 max are both valid values."""
        assert SafeInt(0).value == 0
        assert SafeInt(UINT256_MAX).value == UINT256_MAX

    def test_negative_rejected(self):
        """Negative values are out of range."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_above_uint256_rejected(self):
        """Values above uint256 max are out of range."""
        with pytest.raises(Uint256Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_invalid_type_raises(self):
        """SafeInt rejects non-int types, including bool."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add(self):
        assert (S(2) + S(3)).value == 5
        assert (S(2) + 3).value == 5
        assert (2 + S(3)).value == 5

    def test_add_overflow(self):
        """Addition past uint256 max raises instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX) + 1

    def test_mul_overflow(self):
        """Multiplication past uint256 max raises instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            S(2**200) * S(2**60)

    def test_sub(self):
        assert (S(5) - S(3)).value == 2
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow(self):
        """Subtraction below zero raises."""
        with pytest.raises(Underflow):
            S(3) - S(5)
        with pytest.raises(Underflow):
            3 - S(5)

    def test_floordiv_truncates(self):
        """Division rounds down."""
        assert (S(10) // S(3)).value == 3
        assert (S(4_985_000) // S(509_970)).value == 9

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(10) // S(0)
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors derive from ArithmeticError."""
        assert issubclass(SafeIntError, ArithmeticError)
        for err in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(err, SafeIntError)


class TestSafeIntComparison:
    """Tests for comparisons with SafeInt and int."""

    def test_compare_with_int(self):
        assert S(5) == 5
        assert S(5) > 4
        assert S(5) >= 5
        assert S(4) < 5
        assert S(4) <= 4

    def test_bool(self):
        assert not S(0)
        assert S(1)


class TestToAmount:
    """Tests for boundary amount validation."""

    def test_valid_amount_returned(self):
        assert to_amount(123) == 123

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="amount_in"):
            to_amount(-1, "amount_in")

    def test_oversized_amount_rejected(self):
        with pytest.raises(ValueError):
            to_amount(UINT256_MAX + 1)

    def test_non_int_rejected(self):
        with pytest.raises(ValueError):
            to_amount("10")  # type: ignore[arg-type]
