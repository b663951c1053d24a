"""Unit tests for the decimal arithmetic layer."""

import pytest
from decimal import Decimal, localcontext

from lendingrisk.core.errors import DivisionByZero, InvalidSnapshot
from lendingrisk.core.math import DecimalMath
from lendingrisk.core.parameters import RiskParameters


class TestDecimalMath:
    """Tests for DecimalMath."""

    @pytest.fixture
    def math(self):
        return DecimalMath(precision=60)

    def test_basic_operations(self, math):
        """Test add, sub, mul, div."""
        assert math.add(Decimal("1.1"), Decimal("2.2")) == Decimal("3.3")
        assert math.sub(Decimal("5"), Decimal("7.5")) == Decimal("-2.5")
        assert math.mul(Decimal("1.5"), Decimal("4")) == Decimal("6")
        assert math.div(Decimal("990"), Decimal("100")) == Decimal("9.9")

    def test_division_by_zero(self, math):
        """Test dividing by zero raises instead of returning zero."""
        with pytest.raises(DivisionByZero):
            math.div(Decimal("1"), Decimal("0"))

    def test_zero_by_zero(self, math):
        """Test 0 / 0 is also reported as division by zero."""
        with pytest.raises(DivisionByZero) as exc_info:
            math.div(Decimal("0"), Decimal("0"), "price conversion")
        assert "price conversion" in str(exc_info.value)

    def test_division_by_zero_is_arithmetic_error(self, math):
        with pytest.raises(ArithmeticError):
            math.div(Decimal("3"), Decimal("0"))

    def test_min_max(self, math):
        assert math.min(Decimal("9.801"), Decimal("5")) == Decimal("5")
        assert math.max(Decimal("-1"), Decimal("0")) == Decimal("0")
        assert math.min(Decimal("Infinity"), Decimal("2")) == Decimal("2")

    def test_compare(self, math):
        assert math.compare(Decimal("1"), Decimal("2")) == -1
        assert math.compare(Decimal("2.0"), Decimal("2")) == 0
        assert math.compare(Decimal("Infinity"), Decimal("1e50")) == 1

    def test_round_down(self, math):
        """Test truncation toward zero."""
        assert math.round_down(Decimal("1.23456"), 4) == Decimal("1.2345")
        assert math.round_down(Decimal("0.99999"), 2) == Decimal("0.99")
        assert math.round_down(Decimal("5"), 2) == Decimal("5.00")

    def test_round_half_even(self, math):
        """Test banker's rounding."""
        assert math.round_half_even(Decimal("0.125"), 2) == Decimal("0.12")
        assert math.round_half_even(Decimal("0.135"), 2) == Decimal("0.14")
        assert math.round_half_even(Decimal("2.5"), 0) == Decimal("2")

    def test_round_infinity_unchanged(self, math):
        infinity = Decimal("Infinity")
        assert math.round_down(infinity, 4) == infinity
        assert math.round_half_even(infinity, 2) == infinity

    def test_round_large_value(self, math):
        """Test rounding values whose digits exceed the working precision."""
        assert math.round_down(Decimal("1e43"), 18) == Decimal("1e43")
        assert math.round_half_even(Decimal("1e43"), 18) == Decimal("1e43")

        value = Decimal("9" * 58 + ".98765")
        assert math.round_down(value, 4) == Decimal("9" * 58 + ".9876")
        assert math.round_half_even(value, 4) == Decimal("9" * 58 + ".9876")
        assert math.round_down(value, 4).as_tuple().exponent == -4

    def test_shift(self, math):
        assert math.shift(Decimal("98010000000"), -8) == Decimal("980.1")
        assert math.shift(Decimal("1.5"), 2) == Decimal("150")

    def test_ambient_context_ignored(self, math):
        """Test results do not depend on the thread-local decimal context."""
        expected = math.div(Decimal("1"), Decimal("3"))
        with localcontext() as ctx:
            ctx.prec = 5
            assert math.div(Decimal("1"), Decimal("3")) == expected
        assert len(expected.as_tuple().digits) == 60

    def test_from_parameters(self):
        math = DecimalMath.from_parameters(RiskParameters(decimal_precision=40))
        assert math.context.prec == 40


class TestToDecimal:
    """Tests for exact input conversion."""

    def test_string(self):
        assert DecimalMath.to_decimal("1.5") == Decimal("1.5")
        assert DecimalMath.to_decimal(" 42 ") == Decimal("42")

    def test_int(self):
        assert DecimalMath.to_decimal(10 ** 18) == Decimal("1000000000000000000")

    def test_decimal_passthrough(self):
        value = Decimal("0.1")
        assert DecimalMath.to_decimal(value) is value

    def test_float_rejected(self):
        """Test binary floats are refused."""
        with pytest.raises(InvalidSnapshot):
            DecimalMath.to_decimal(0.1)

    def test_bool_rejected(self):
        with pytest.raises(InvalidSnapshot):
            DecimalMath.to_decimal(True)

    def test_invalid_string(self):
        with pytest.raises(InvalidSnapshot):
            DecimalMath.to_decimal("abc")
