from decimal import Decimal

import pytest

from loan_compare.config import EngineConfig
from loan_compare.data_models import PeriodRecord
from loan_compare.engine import generate_equal_principal
from loan_compare.validation import validate_inputs, validate_schedule


def _record(period, payment, principal, interest, balance):
    return PeriodRecord(
        period=period,
        payment=Decimal(payment),
        principal=Decimal(principal),
        interest=Decimal(interest),
        balance=Decimal(balance),
    )


class TestValidateInputs:
    def test_valid(self):
        result = validate_inputs(300_000_000, 4.5, 360, 0)
        assert result.valid
        assert result.errors == []

    def test_bounds_are_inclusive(self):
        assert validate_inputs(100_000, 0, 1, 0).valid
        assert validate_inputs(10_000_000_000, 30, 600, 120).valid

    @pytest.mark.parametrize("principal", [99_999, 10_000_000_001, 0, -5])
    def test_principal_out_of_range(self, principal):
        result = validate_inputs(principal, 5, 120)
        assert not result.valid
        assert len(result.errors) == 1
        assert "Loan amount" in result.errors[0]

    @pytest.mark.parametrize("term", [0, 601])
    def test_term_out_of_range(self, term):
        result = validate_inputs(1_000_000, 5, term)
        assert not result.valid
        assert any("Loan term" in e for e in result.errors)

    @pytest.mark.parametrize("rate", [-0.1, 30.01])
    def test_rate_out_of_range(self, rate):
        result = validate_inputs(1_000_000, rate, 120)
        assert not result.valid
        assert result.errors == ["Interest rate must be between 0 and 30%."]

    def test_grace_must_be_shorter_than_term(self):
        result = validate_inputs(1_000_000, 5, 12, 12)
        assert not result.valid
        assert result.errors == ["Grace period must be shorter than the loan term."]

    def test_grace_limit(self):
        result = validate_inputs(1_000_000, 5, 360, 121)
        assert result.errors == ["Grace period must be between 0 and 120 months."]

    def test_all_errors_reported(self):
        result = validate_inputs(50, 45, 700, 800)
        assert len(result.errors) == 5

    def test_non_numeric(self):
        result = validate_inputs("lots", 5, 120)
        assert result.errors == ["Loan amount must be a number."]

    def test_fractional_term(self):
        result = validate_inputs(1_000_000, 5, 12.5)
        assert result.errors == ["Loan term must be a whole number of months."]


class TestValidateSchedule:
    def test_generated_schedule_is_valid(self, principal, rate_per_month):
        result = validate_schedule(generate_equal_principal(principal, rate_per_month, 12), principal)
        assert result.is_valid
        assert result.errors == []
        assert result.principal_sum == principal
        assert result.final_balance == 0
        assert result.original_principal == principal

    def test_empty_schedule(self):
        result = validate_schedule([], Decimal("1000"))
        assert not result.is_valid
        assert result.errors == ["Schedule is empty."]

    def test_principal_mismatch(self):
        schedule = [_record(1, "510", "500", "10", "500"), _record(2, "410", "400", "10", "0")]
        result = validate_schedule(schedule, Decimal("1000"))
        assert not result.is_valid
        assert result.errors[0].startswith("Principal sum mismatch: 900 != 1,000")

    def test_nonzero_final_balance(self):
        schedule = [_record(1, "1010", "1000", "10", "3")]
        result = validate_schedule(schedule, Decimal("1000"))
        assert result.errors == ["Final balance is not zero: 3"]

    def test_row_errors_are_capped(self):
        schedule = [_record(i, "200", "100", "10", str(1000 - 100 * i)) for i in range(1, 11)]
        result = validate_schedule(schedule, Decimal("1000"))
        row_errors = [e for e in result.errors if e.startswith("Period ")]
        assert len(row_errors) == 3
        assert row_errors[0] == "Period 1: payment 200 != principal 100 + interest 10"
        assert "... and 7 more period mismatches" in result.errors

    def test_tolerance_is_configurable(self):
        schedule = [_record(1, "1015", "1000", "10", "0")]
        assert validate_schedule(schedule, Decimal("1000")).is_valid
        strict = EngineConfig(tolerance=Decimal("1"))
        result = validate_schedule(schedule, Decimal("1000"), strict)
        assert not result.is_valid
        assert result.errors == ["Period 1: payment 1,015 != principal 1,000 + interest 10"]

    def test_never_raises_on_garbage(self):
        schedule = [_record(1, "0", "0", "0", "0")]
        result = validate_schedule(schedule, Decimal("1000"))
        assert not result.is_valid
