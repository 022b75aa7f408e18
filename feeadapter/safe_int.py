"""Checked uint256 arithmetic for token amounts.

This module provides SafeInt, a small wrapper that behaves like Solidity's
checked arithmetic on uint256 values:
- Addition and multiplication past 2^256-1 raise Uint256Overflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero

Every intermediate result is checked, not just the final one, so a product
that would wrap on-chain fails here as well.

Usage pattern:
    from feeadapter.safe_int import S

    def take_fee(amount_in: int, fee_bps: int) -> int:
        # Wrap at entry
        fee = S(amount_in) * fee_bps // 10_000
        # Unwrap at exit
        return fee.value
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""

    pass


class Uint256Overflow(SafeIntError):
    """Value is outside the uint256 range."""

    pass


def _check(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative value cannot be uint256: {value}")
    if value > UINT256_MAX:
        raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
    return value


class SafeInt:
    """uint256 integer with checked arithmetic.

    Construction validates the range, so a SafeInt always holds a value in
    [0, 2^256-1]. Operators accept SafeInt or plain int on either side.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt (bool is rejected)
            Uint256Overflow: If value exceeds 2^256-1
            Underflow: If value is negative
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = _check(value)
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

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
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Uint256Overflow: If the product exceeds 2^256-1
        """
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer (floor) division.

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
        return SafeInt(other // self._value)

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

    def __bool__(self) -> bool:
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def mul_div(self, numerator: SafeInt | int, denominator: SafeInt | int) -> SafeInt:
        """Compute floor(self * numerator / denominator) with checked steps.

        This is the basis-point share primitive: S(amount).mul_div(bps, 10_000).

        Raises:
            Uint256Overflow: If the intermediate product exceeds 2^256-1
            DivisionByZero: If denominator is zero
        """
        return (self * numerator) // denominator

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
