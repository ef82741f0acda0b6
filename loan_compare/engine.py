"""Core calculation engine for the loan comparison calculator.

This module builds month-by-month repayment schedules for the five supported
repayment policies: equal payments (annuity), equal principal, bullet
(interest only with the principal repaid at maturity) and the two grace-period
variants that start with interest-only months before amortizing.

Every generator takes a principal, a monthly rate (see
``utils.monthly_rate``) and a term in months and returns a list of
``PeriodRecord`` objects. Emitted figures are rounded to whole currency
units, while the running balance is carried unrounded between months so that
rounding errors do not compound. The last month always repays whatever
balance is left, which closes the schedule at exactly zero.

The generators never raise: a term of zero or less produces an empty
schedule and a non-positive principal is treated as zero.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from .data_models import PeriodRecord, Schedule
from .utils import ZERO, engine_context, round_currency

logger = logging.getLogger(__name__)

NOTE_INTEREST_ONLY = "interest-only"
NOTE_FINAL_BALLOON = "final balloon"
NOTE_GRACE = "grace period"


def _clean_principal(principal: Decimal) -> Decimal:
    if not principal.is_finite() or principal <= 0:
        return ZERO
    return principal


def _amortize(principal: Decimal, rate_per_month: Decimal, term: int, principal_due) -> Schedule:
    """Shared month loop for the amortizing policies.

    ``principal_due(balance, interest)`` returns the unrounded principal
    repaid in a month and is held between zero and the open balance; the last
    month always repays the remaining balance.
    The principal column is rounded on the running total, so it sums exactly
    to the rounded loan amount and each balance equals the previous balance
    minus the printed principal.
    """
    schedule: Schedule = []
    balance = _clean_principal(principal)
    opening = round_currency(balance)
    repaid = ZERO
    repaid_rounded = ZERO
    for period in range(1, term + 1):
        interest = balance * rate_per_month
        if period == term:
            principal_paid = balance
        else:
            principal_paid = min(balance, max(ZERO, principal_due(balance, interest)))
        balance = max(ZERO, balance - principal_paid)
        repaid += principal_paid
        principal_rounded = round_currency(repaid) - repaid_rounded
        repaid_rounded += principal_rounded
        schedule.append(
            PeriodRecord(
                period=period,
                payment=round_currency(principal_paid + interest),
                principal=principal_rounded,
                interest=round_currency(interest),
                balance=max(ZERO, opening - repaid_rounded),
            )
        )
    return schedule


def annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the unrounded equal (annuity) monthly payment.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``. If the compounding factor is not finite
    (an extreme rate over a very long term) the payment is reported as zero.
    """
    if term <= 0:
        return ZERO
    with engine_context():
        if rate_per_month == 0:
            return principal / Decimal(term)
        factor = (1 + rate_per_month) ** term
        if not factor.is_finite() or factor == 1:
            return ZERO
        payment = principal * (rate_per_month * factor) / (factor - 1)
    return payment if payment.is_finite() else ZERO


def generate_equal_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Schedule:
    """Build an equal-payment (annuity) schedule.

    Each month pays the same total; the interest share is computed on the
    outstanding balance and the rest reduces the principal. The final month
    repays the remaining balance exactly.
    """
    if term <= 0:
        return []
    with engine_context():
        payment = annuity_payment(_clean_principal(principal), rate_per_month, term)
        schedule = _amortize(principal, rate_per_month, term, lambda balance, interest: payment - interest)
    logger.debug("Equal-payment schedule: %d periods, raw payment %s", term, payment)
    return schedule


def generate_equal_principal(principal: Decimal, rate_per_month: Decimal, term: int) -> Schedule:
    """Build an equal-principal schedule.

    The principal share is constant (``P / n``) and interest is charged on
    the shrinking balance, so the total payment declines month by month.
    """
    if term <= 0:
        return []
    with engine_context():
        constant_principal = _clean_principal(principal) / Decimal(term)
        schedule = _amortize(principal, rate_per_month, term, lambda balance, interest: constant_principal)
    logger.debug("Equal-principal schedule: %d periods, principal %s/month", term, constant_principal)
    return schedule


def generate_bullet(principal: Decimal, rate_per_month: Decimal, term: int) -> Schedule:
    """Build a bullet (balloon) schedule.

    Interest is computed once on the full principal and paid every month; the
    principal stays outstanding until the last month, which repays it in
    full together with that month's interest.
    """
    if term <= 0:
        return []
    schedule: Schedule = []
    with engine_context():
        amount = round_currency(_clean_principal(principal))
        interest = round_currency(amount * rate_per_month)
        for period in range(1, term):
            schedule.append(
                PeriodRecord(
                    period=period,
                    payment=interest,
                    principal=ZERO,
                    interest=interest,
                    balance=amount,
                    note=NOTE_INTEREST_ONLY,
                )
            )
        schedule.append(
            PeriodRecord(
                period=term,
                payment=amount + interest,
                principal=amount,
                interest=interest,
                balance=ZERO,
                note=NOTE_FINAL_BALLOON,
            )
        )
    return schedule


def grace_payment(principal: Decimal, rate_per_month: Decimal) -> Decimal:
    """Return the flat interest-only payment charged during grace months."""
    with engine_context():
        return round_currency(_clean_principal(principal) * rate_per_month)


def _clamp_grace(term: int, grace_months: int) -> int:
    # At least one repayment month is needed to close the balance
    clamped = max(0, min(grace_months, term - 1))
    if clamped != grace_months:
        logger.warning("Grace of %d months clamped to %d for a %d-month term", grace_months, clamped, term)
    return clamped


def _generate_grace(principal: Decimal, rate_per_month: Decimal, term: int, grace_months: int, amortize) -> Schedule:
    if term <= 0:
        return []
    grace_months = _clamp_grace(term, grace_months)
    interest = grace_payment(principal, rate_per_month)
    with engine_context():
        balance = round_currency(_clean_principal(principal))
    schedule: Schedule = [
        PeriodRecord(
            period=period,
            payment=interest,
            principal=ZERO,
            interest=interest,
            balance=balance,
            is_grace_period=True,
            note=NOTE_GRACE,
        )
        for period in range(1, grace_months + 1)
    ]
    # The repayment phase restarts on the untouched principal
    for record in amortize(principal, rate_per_month, term - grace_months):
        schedule.append(replace(record, period=record.period + grace_months))
    return schedule


def generate_grace_equal_payment(
    principal: Decimal, rate_per_month: Decimal, term: int, grace_months: int
) -> Schedule:
    """Build a schedule of interest-only grace months followed by equal payments."""
    return _generate_grace(principal, rate_per_month, term, grace_months, generate_equal_payment)


def generate_grace_equal_principal(
    principal: Decimal, rate_per_month: Decimal, term: int, grace_months: int
) -> Schedule:
    """Build a schedule of interest-only grace months followed by equal principal."""
    return _generate_grace(principal, rate_per_month, term, grace_months, generate_equal_principal)
