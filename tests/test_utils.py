from decimal import Decimal

import pytest

from loan_compare.utils import format_amount, monthly_rate, round_currency, to_decimal


class TestMonthlyRate:
    def test_twelve_percent(self):
        assert monthly_rate(12) == Decimal("0.01")

    def test_fractional_percent(self):
        # 4.5 % / 12 = 0.375 % per month
        assert monthly_rate(4.5) == Decimal("0.00375")

    def test_zero(self):
        assert monthly_rate(0) == 0


class TestRoundCurrency:
    def test_half_up(self):
        assert round_currency(Decimal("10.5")) == Decimal("11")
        assert round_currency(Decimal("10.49")) == Decimal("10")

    def test_non_finite_becomes_zero(self):
        assert round_currency(Decimal("Infinity")) == 0
        assert round_currency(Decimal("NaN")) == 0


class TestToDecimal:
    def test_float_goes_through_str(self):
        assert to_decimal(4.5) == Decimal("4.5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_with_separators(self):
        assert to_decimal("1,200,000") == Decimal("1200000")

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid numeric value"):
            to_decimal("abc")

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(True)


def test_format_amount():
    assert format_amount(Decimal("1234567.4")) == "1,234,567"
    assert format_amount(Decimal("0")) == "0"
