"""Decimal arithmetic layer.

All monetary math goes through ``DecimalMath``, which carries its own
``decimal.Context``. The thread-local ambient context is never read or
modified, so concurrent evaluations with different parameters cannot
interfere with each other.
"""

from decimal import (
    Context,
    Decimal,
    InvalidOperation,
    Overflow,
    ROUND_DOWN,
    ROUND_HALF_EVEN,
)
from typing import Union

from lendingrisk.core.constants import DEFAULT_DECIMAL_PRECISION
from lendingrisk.core.errors import DivisionByZero, InvalidSnapshot
from lendingrisk.core.parameters import RiskParameters

Number = Union[Decimal, int, str]


class DecimalMath:
    """Arbitrary-precision arithmetic with explicit rounding."""

    def __init__(self, precision: int = DEFAULT_DECIMAL_PRECISION):
        self.context = Context(
            prec=precision,
            rounding=ROUND_HALF_EVEN,
            traps=[InvalidOperation, Overflow],
        )

    @classmethod
    def from_parameters(cls, params: RiskParameters) -> "DecimalMath":
        return cls(precision=params.decimal_precision)

    @staticmethod
    def to_decimal(value: Number) -> Decimal:
        """Convert an exact input to Decimal. Binary floats are rejected."""
        if isinstance(value, Decimal):
            return value
        if isinstance(value, bool) or isinstance(value, float):
            raise InvalidSnapshot(f"Expected an exact decimal value, got {type(value).__name__}: {value!r}")
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, str):
            try:
                return Decimal(value.strip())
            except InvalidOperation:
                raise InvalidSnapshot(f"Not a decimal number: {value!r}") from None
        raise InvalidSnapshot(f"Unsupported numeric type: {type(value).__name__}")

    def add(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.add(a, b)

    def sub(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.subtract(a, b)

    def mul(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.multiply(a, b)

    def div(self, a: Decimal, b: Decimal, operation: str = "division") -> Decimal:
        """
        Divide ``a`` by ``b``.

        Raises:
            DivisionByZero: If ``b`` is zero (including 0 / 0)
        """
        if b == 0:
            raise DivisionByZero(a, operation)
        return self.context.divide(a, b)

    def min(self, a: Decimal, b: Decimal) -> Decimal:
        return a if self.compare(a, b) <= 0 else b

    def max(self, a: Decimal, b: Decimal) -> Decimal:
        return a if self.compare(a, b) >= 0 else b

    def compare(self, a: Decimal, b: Decimal) -> int:
        """Return -1, 0 or 1."""
        return int(self.context.compare(a, b))

    @staticmethod
    def is_zero(value: Decimal) -> bool:
        return value == 0

    def shift(self, value: Decimal, exponent: int) -> Decimal:
        """Multiply by 10**exponent without rounding error."""
        return self.context.scaleb(value, exponent)

    def round_down(self, value: Decimal, places: int) -> Decimal:
        """Truncate to ``places`` fractional digits (toward zero)."""
        return self._quantize(value, places, ROUND_DOWN)

    def round_half_even(self, value: Decimal, places: int) -> Decimal:
        """Round to ``places`` fractional digits, ties to even."""
        return self._quantize(value, places, ROUND_HALF_EVEN)

    def _quantize(self, value: Decimal, places: int, rounding: str) -> Decimal:
        if not value.is_finite():
            return value
        exponent = Decimal((0, (1,), -places))
        # Widen precision so large values keep every requested fractional digit
        context = self.context.copy()
        context.prec = max(context.prec, value.adjusted() + places + 1)
        return value.quantize(exponent, rounding=rounding, context=context)
