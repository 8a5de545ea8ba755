"""Checked unsigned integer wrapper for reserve and share arithmetic.

Pool amounts live in the uint256 domain of the token contracts. SafeInt keeps
every intermediate result inside that domain:
- Addition and multiplication beyond 2^256-1 raise Uint256Overflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero

All three derive from ArithmeticInvalidState, so callers see one error type
for any arithmetic failure.

Usage pattern:
    from amm.safe_int import S

    def shares_for(amount: int, total: int, reserve: int) -> int:
        return (S(amount) * total // reserve).value
"""

from __future__ import annotations

from amm.errors import ArithmeticInvalidState

UINT256_MAX = 2**256 - 1


class DivisionByZero(ArithmeticInvalidState):
    """Division by zero."""

    pass


class Underflow(ArithmeticInvalidState):
    """Subtraction would produce a negative result."""

    pass


class Uint256Overflow(ArithmeticInvalidState):
    """Value falls outside [0, 2^256-1]."""

    pass


class SafeInt:
    """Unsigned integer with checked arithmetic.

    Unlike a plain int, a SafeInt can never hold a negative value or one
    larger than UINT256_MAX; construction validates the bound and every
    operator re-validates its result.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Wrap an integer or copy another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt (bool is rejected)
            Underflow: If value is negative
            Uint256Overflow: If value exceeds UINT256_MAX
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value outside the unsigned domain: {value}")
        if value > UINT256_MAX:
            raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
        self._value = value

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
        """Add two values.

        Raises:
            Uint256Overflow: If the sum exceeds UINT256_MAX
        """
        result = self._value + _extract_value(other)
        if result > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} + {_extract_value(other)}")
        return SafeInt(result)

    __radd__ = __add__

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

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Uint256Overflow: If the product exceeds UINT256_MAX
        """
        other_val = _extract_value(other)
        result = self._value * other_val
        if result > UINT256_MAX:
            raise Uint256Overflow(f"Overflow: {self._value} * {other_val}")
        return SafeInt(result)

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

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

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // other_val))

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
