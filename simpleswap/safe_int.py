"""Checked integer arithmetic for reserves, amounts and liquidity claims.

Every value the pool engine handles is a uint256 quantity. SafeInt wraps a
plain int and makes each arithmetic step checked, the way a contract compiled
with overflow checks would behave:

- Results above 2**256 - 1 raise Uint256Overflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero

Usage pattern:
    from simpleswap.safe_int import S

    def share_of(amount: int, reserve: int, total: int) -> int:
        return (S(amount) * S(reserve) // S(total)).value
"""

from __future__ import annotations

from simpleswap.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Result would be negative."""

    pass


class Uint256Overflow(SafeIntError):
    """Result exceeds the uint256 range."""

    pass


def _checked(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative result: {value}")
    if value > UINT256_MAX:
        raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
    return value


def _extract_value(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    if isinstance(x, bool) or not isinstance(x, int):
        raise TypeError(f"SafeInt operand must be int, got {type(x).__name__}")
    return x


class SafeInt:
    """Non-negative uint256 integer with checked operators.

    Construction validates the range, so a SafeInt always holds a value in
    [0, 2**256 - 1]. Operators return new SafeInt instances and raise a
    SafeIntError subclass instead of producing an out-of-range result.
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _checked(value)

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(_extract_value(other) + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return SafeInt(self._value - other_val)

    def __rsub__(self, other: int) -> SafeInt:
        other_val = _extract_value(other)
        if self._value > other_val:
            raise Underflow(f"Underflow: {other_val} - {self._value}")
        return SafeInt(other_val - self._value)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(_extract_value(other) * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, truncating toward zero.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(_extract_value(other) // self._value)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0


def to_amount(value: int, name: str = "amount") -> int:
    """Validate a caller-supplied uint256 amount and return it unchanged.

    Raises:
        ValueError: If value is not an int in [0, 2**256 - 1]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


# Convenience alias for concise code
S = SafeInt
