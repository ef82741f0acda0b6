"""Calculation entry points.

``calculate`` and ``generate_schedule`` are what the CLI and the web API call.
They resolve the repayment policy, convert the annual rate, run the matching
schedule generator and, for ``calculate``, summarize and validate the result.
Input ranges are expected to have been checked with ``validate_inputs``
beforehand; the engine itself degrades to zero-valued figures rather than
raising when they were not.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, Optional, Union

from .config import CONFIG, EngineConfig
from .data_models import LoanComparison, LoanParameters, LoanResult, RepaymentPolicy, Schedule
from .engine import (
    generate_bullet,
    generate_equal_payment,
    generate_equal_principal,
    generate_grace_equal_payment,
    generate_grace_equal_principal,
    grace_payment,
)
from .summary import summarize_schedule
from .utils import Number, engine_context, format_amount, monthly_rate, round_currency, to_decimal
from .validation import validate_schedule

logger = logging.getLogger(__name__)

PolicyTag = Union[RepaymentPolicy, str, None]
Generator = Callable[[Decimal, Decimal, int, int], Schedule]

# Interest differences up to this amount count as "the same" in comparisons
COMPARISON_THRESHOLD = Decimal("100")

_GENERATORS: Dict[RepaymentPolicy, Generator] = {
    RepaymentPolicy.EQUAL_PAYMENT: lambda p, r, n, g: generate_equal_payment(p, r, n),
    RepaymentPolicy.EQUAL_PRINCIPAL: lambda p, r, n, g: generate_equal_principal(p, r, n),
    RepaymentPolicy.BULLET: lambda p, r, n, g: generate_bullet(p, r, n),
    RepaymentPolicy.GRACE_EQUAL_PAYMENT: generate_grace_equal_payment,
    RepaymentPolicy.GRACE_EQUAL_PRINCIPAL: generate_grace_equal_principal,
}


def build_parameters(
    policy: PolicyTag,
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    grace_months: int = 0,
) -> LoanParameters:
    """Normalize raw arguments into ``LoanParameters``.

    Unknown policy tags resolve to equal payments. Grace months are dropped
    for policies without a grace period. The principal is rounded to whole
    currency units, so every figure derived from it is whole as well.
    """
    resolved = RepaymentPolicy.from_tag(policy)
    with engine_context():
        amount = round_currency(to_decimal(principal))
    return LoanParameters(
        principal=amount,
        annual_rate_percent=to_decimal(annual_rate_percent),
        term_months=int(term_months),
        grace_months=int(grace_months) if resolved.is_grace else 0,
        policy=resolved,
    )


def schedule_for(params: LoanParameters) -> Schedule:
    """Run the generator matching ``params.policy``."""
    generator = _GENERATORS.get(params.policy)
    if generator is None:
        # Every policy has a generator; keep equal payments as the default arm
        generator = _GENERATORS[RepaymentPolicy.EQUAL_PAYMENT]
    rate = monthly_rate(params.annual_rate_percent)
    return generator(params.principal, rate, params.term_months, params.grace_months)


def generate_schedule(
    policy: PolicyTag,
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    grace_months: int = 0,
) -> Schedule:
    """Return the full month-by-month schedule for a loan."""
    params = build_parameters(policy, principal, annual_rate_percent, term_months, grace_months)
    return schedule_for(params)


def calculate_parameters(
    params: LoanParameters,
    include_schedule: bool = False,
    config: EngineConfig = CONFIG,
) -> LoanResult:
    """Calculate, summarize and validate a loan described by ``params``."""
    schedule = schedule_for(params)
    summary = summarize_schedule(schedule, params.principal)
    validation = validate_schedule(schedule, params.principal, config)

    result = LoanResult(
        parameters=params,
        summary=summary,
        validation=validation,
        label=params.policy.label,
        monthly_payment=summary.first_payment,
        schedule=schedule if include_schedule else None,
    )

    if params.policy.is_grace:
        rate = monthly_rate(params.annual_rate_percent)
        result.grace_payment = grace_payment(params.principal, rate)
        result.repayment_months = params.term_months - params.grace_months
        # The regular installment is the first one after the grace period
        if len(schedule) > params.grace_months:
            result.monthly_payment = schedule[params.grace_months].payment
        else:
            result.monthly_payment = Decimal("0")
    elif params.policy is RepaymentPolicy.BULLET:
        with engine_context():
            amount = round_currency(params.principal)
        result.bullet_warning = f"Principal of {format_amount(amount)} is due in full at maturity"

    logger.debug(
        "%s: principal=%s rate=%s%% term=%d total_payment=%s valid=%s",
        params.policy.value,
        params.principal,
        params.annual_rate_percent,
        params.term_months,
        summary.total_payment,
        validation.is_valid,
    )
    return result


def calculate(
    policy: PolicyTag,
    principal: Number,
    annual_rate_percent: Number,
    term_months: int,
    grace_months: int = 0,
    include_schedule: bool = False,
) -> LoanResult:
    """Calculate one loan and return its summary, validation and metadata.

    Parameters
    ----------
    policy: RepaymentPolicy or str
        Repayment policy. Unrecognized tags fall back to equal payments.
    principal: Number
        Loan amount.
    annual_rate_percent: Number
        Nominal annual rate in percent.
    term_months: int
        Loan term in months.
    grace_months: int
        Interest-only months for grace policies; ignored otherwise.
    include_schedule: bool
        Attach the generated schedule to the result.
    """
    params = build_parameters(policy, principal, annual_rate_percent, term_months, grace_months)
    return calculate_parameters(params, include_schedule=include_schedule)


def compare_results(loan_a: LoanResult, loan_b: LoanResult) -> LoanComparison:
    """Compare two calculated loans; differences are ``A - B``."""
    interest_diff = loan_a.summary.total_interest - loan_b.summary.total_interest
    higher: Optional[str] = None
    if interest_diff > COMPARISON_THRESHOLD:
        higher = "A"
    elif interest_diff < -COMPARISON_THRESHOLD:
        higher = "B"
    return LoanComparison(
        loan_a=loan_a,
        loan_b=loan_b,
        monthly_payment_diff=loan_a.monthly_payment - loan_b.monthly_payment,
        total_interest_diff=interest_diff,
        total_payment_diff=loan_a.summary.total_payment - loan_b.summary.total_payment,
        higher_interest=higher,
    )


def compare(params_a: LoanParameters, params_b: LoanParameters) -> LoanComparison:
    """Calculate two loans and compare them."""
    return compare_results(calculate_parameters(params_a), calculate_parameters(params_b))
