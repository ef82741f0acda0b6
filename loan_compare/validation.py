"""Input range checks and schedule consistency checks.

``validate_inputs`` runs before any calculation and reports every parameter
that falls outside the accepted ranges. ``validate_schedule`` runs after a
schedule has been generated and checks it against the principal it was built
from. Neither function raises; both return a report object listing
human-readable messages.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from .config import CONFIG, EngineConfig
from .data_models import InputValidation, Schedule, ValidationResult
from .summary import summarize_schedule
from .utils import Number, ZERO, engine_context, format_amount, to_decimal

logger = logging.getLogger(__name__)

# Only the first few mismatching periods are listed individually
MAX_ROW_ERRORS = 3


def _as_decimal(value: Number) -> Optional[Decimal]:
    try:
        result = to_decimal(value)
    except (TypeError, ValueError):
        return None
    return result if result.is_finite() else None


def validate_inputs(
    principal: Number,
    annual_rate_percent: Number,
    term_months: Number,
    grace_months: Number = 0,
    config: EngineConfig = CONFIG,
) -> InputValidation:
    """Range-check raw loan parameters.

    Parameters
    ----------
    principal: Number
        Loan amount.
    annual_rate_percent: Number
        Nominal annual rate in percent.
    term_months: Number
        Loan term in months.
    grace_months: Number
        Leading interest-only months; must be shorter than the term.

    Returns
    -------
    InputValidation
        ``valid`` is True when no message was produced.
    """
    limits = config.limits
    errors: List[str] = []

    amount = _as_decimal(principal)
    if amount is None:
        errors.append("Loan amount must be a number.")
    elif amount < limits.min_principal or amount > limits.max_principal:
        errors.append(
            f"Loan amount must be between {format_amount(limits.min_principal)}"
            f" and {format_amount(limits.max_principal)}."
        )

    months = _as_decimal(term_months)
    if months is None or months != months.to_integral_value():
        errors.append("Loan term must be a whole number of months.")
        months = None
    elif months < limits.min_months or months > limits.max_months:
        errors.append(f"Loan term must be between {limits.min_months} and {limits.max_months} months.")

    rate = _as_decimal(annual_rate_percent)
    if rate is None:
        errors.append("Interest rate must be a number.")
    elif rate < limits.min_rate or rate > limits.max_rate:
        errors.append(f"Interest rate must be between {limits.min_rate} and {limits.max_rate}%.")

    grace = _as_decimal(grace_months)
    if grace is None or grace != grace.to_integral_value():
        errors.append("Grace period must be a whole number of months.")
    else:
        if grace < 0 or grace > limits.max_grace_months:
            errors.append(f"Grace period must be between 0 and {limits.max_grace_months} months.")
        if months is not None and grace >= months:
            errors.append("Grace period must be shorter than the loan term.")

    return InputValidation(valid=not errors, errors=errors)


def validate_schedule(
    schedule: Schedule,
    original_principal: Decimal,
    config: EngineConfig = CONFIG,
) -> ValidationResult:
    """Check a generated schedule for internal consistency.

    The checks run in order and each failure appends one message:

    1. the principal column sums to ``original_principal`` (within tolerance);
    2. the final balance is exactly zero;
    3. each month's payment equals its principal plus interest (within
       tolerance); only the first few offending months are listed;
    4. the total payment equals principal plus total interest, within the
       tolerance multiplied by the number of months.
    """
    tolerance = config.tolerance

    if not schedule:
        return ValidationResult(
            is_valid=False,
            errors=["Schedule is empty."],
            original_principal=original_principal,
        )

    summary = summarize_schedule(schedule, original_principal)
    errors: List[str] = []

    with engine_context():
        principal_diff = abs(summary.total_principal_paid - original_principal)
        if principal_diff > tolerance:
            errors.append(
                f"Principal sum mismatch: {format_amount(summary.total_principal_paid)}"
                f" != {format_amount(original_principal)} (difference {format_amount(principal_diff)})"
            )

        if summary.final_balance != ZERO:
            errors.append(f"Final balance is not zero: {format_amount(summary.final_balance)}")

        row_errors = 0
        for record in schedule:
            expected = record.principal + record.interest
            if abs(record.payment - expected) > tolerance:
                row_errors += 1
                if row_errors <= MAX_ROW_ERRORS:
                    errors.append(
                        f"Period {record.period}: payment {format_amount(record.payment)}"
                        f" != principal {format_amount(record.principal)}"
                        f" + interest {format_amount(record.interest)}"
                    )
        if row_errors > MAX_ROW_ERRORS:
            errors.append(f"... and {row_errors - MAX_ROW_ERRORS} more period mismatches")

        expected_total = original_principal + summary.total_interest
        total_diff = abs(summary.total_payment - expected_total)
        # Rounding slack accumulates once per month
        if total_diff > tolerance * len(schedule):
            errors.append(
                f"Total payment mismatch: {format_amount(summary.total_payment)}"
                f" != {format_amount(expected_total)}"
            )

    if errors:
        logger.warning("Schedule failed %d consistency check(s): %s", len(errors), "; ".join(errors))

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        principal_sum=summary.total_principal_paid,
        interest_sum=summary.total_interest,
        payment_sum=summary.total_payment,
        final_balance=summary.final_balance,
        original_principal=original_principal,
    )
