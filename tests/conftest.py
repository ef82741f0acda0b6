"""Shared fixtures for the loan comparison tests.

Reference loan: 1,200,000 at 12 % a year over 12 months, i.e. a monthly
rate of exactly 1 % and a monthly principal share of exactly 100,000.
"""

from decimal import Decimal

import pytest

from loan_compare.data_models import LoanParameters, RepaymentPolicy


@pytest.fixture
def principal() -> Decimal:
    return Decimal("1200000")


@pytest.fixture
def rate_per_month() -> Decimal:
    """12 % a year as a monthly rate."""
    return Decimal("0.01")


@pytest.fixture
def reference_loan() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("1200000"),
        annual_rate_percent=Decimal("12"),
        term_months=12,
        policy=RepaymentPolicy.EQUAL_PRINCIPAL,
    )


@pytest.fixture
def mortgage() -> LoanParameters:
    """300M over 30 years at 4.5 %, repaid as a bullet loan."""
    return LoanParameters(
        principal=Decimal("300000000"),
        annual_rate_percent=Decimal("4.5"),
        term_months=360,
        policy=RepaymentPolicy.BULLET,
    )
