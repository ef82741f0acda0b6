"""Loan repayment schedules under five repayment policies."""

from .calculator import calculate, compare, compare_results, generate_schedule
from .data_models import (
    InputValidation,
    LoanComparison,
    LoanParameters,
    LoanResult,
    LoanSummary,
    PeriodRecord,
    RepaymentPolicy,
    ValidationResult,
)
from .summary import summarize_schedule
from .utils import monthly_rate
from .validation import validate_inputs, validate_schedule

__all__ = [
    "InputValidation",
    "LoanComparison",
    "LoanParameters",
    "LoanResult",
    "LoanSummary",
    "PeriodRecord",
    "RepaymentPolicy",
    "ValidationResult",
    "calculate",
    "compare",
    "compare_results",
    "generate_schedule",
    "monthly_rate",
    "summarize_schedule",
    "validate_inputs",
    "validate_schedule",
]
