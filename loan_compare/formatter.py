"""Output helpers for the loan comparison calculator.

This module renders results, schedules and comparisons as plain text tables
and builds the row layout used for CSV export. Totals always come from the
``LoanSummary`` passed in; nothing here recomputes them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from .data_models import LoanComparison, LoanResult, LoanSummary, PeriodRecord
from .engine import NOTE_GRACE
from .utils import format_amount

EXPORT_HEADER = ["period", "payment", "principal", "interest", "balance", "note"]

Row = List[Union[int, str]]


def record_note(record: PeriodRecord) -> str:
    if record.is_grace_period:
        return NOTE_GRACE
    return record.note or ""


def schedule_rows(schedule: Iterable[PeriodRecord], summary: Optional[LoanSummary] = None) -> List[Row]:
    """Return export rows for a schedule, header first.

    Columns are ``period, payment, principal, interest, balance, note``. When
    ``summary`` is given a ``total`` row is appended with the summary's
    total payment, principal paid and interest.
    """
    rows: List[Row] = [list(EXPORT_HEADER)]
    for record in schedule:
        rows.append(
            [
                record.period,
                int(record.payment),
                int(record.principal),
                int(record.interest),
                int(record.balance),
                record_note(record),
            ]
        )
    if summary is not None:
        rows.append(
            [
                "total",
                int(summary.total_payment),
                int(summary.total_principal_paid),
                int(summary.total_interest),
                0,
                "",
            ]
        )
    return rows


def print_summary(result: LoanResult) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    params = result.parameters
    summary = result.summary
    print("Summary")
    print("-" * 72)
    print(f"Repayment type     : {result.label}")
    print(f"Principal          : {format_amount(params.principal)}")
    print(f"Annual rate        : {params.annual_rate_percent}%")
    print(f"Term               : {params.term_months} months")
    if result.repayment_months is not None:
        print(f"Grace period       : {params.grace_months} months")
        print(f"Grace payment      : {format_amount(result.grace_payment)}")
        print(f"Repayment months   : {result.repayment_months}")
    print(f"Monthly payment    : {format_amount(result.monthly_payment)}")
    # First and last differ for every policy except equal payments
    print(f"First payment      : {format_amount(summary.first_payment)}")
    print(f"Last payment       : {format_amount(summary.last_payment)}")
    print(f"Highest payment    : {format_amount(summary.max_payment)}")
    print(f"Average payment    : {format_amount(summary.avg_payment)}")
    print(f"Total interest     : {format_amount(summary.total_interest)}")
    print(f"Total payment      : {format_amount(summary.total_payment)}")
    if result.bullet_warning:
        print(f"Note               : {result.bullet_warning}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PeriodRecord]) -> None:
    """Print the repayment schedule as a simple tab-separated table."""
    print("\t".join(["Period", "Payment", "Principal", "Interest", "Balance", "Note"]))
    for record in schedule:
        row = [
            str(record.period),
            format_amount(record.payment),
            format_amount(record.principal),
            format_amount(record.interest),
            format_amount(record.balance),
            record_note(record),
        ]
        print("\t".join(row))


def print_comparison(comparison: LoanComparison) -> None:
    """Print two loans side by side.

    The difference column is loan A minus loan B, so a positive value means
    loan A costs more.
    """
    a, b = comparison.loan_a, comparison.loan_b
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':20s} {'Loan A':>16s} {'Loan B':>16s} {'Difference':>16s}")
    print(f"{'Repayment type':20s} {a.policy.value:>16s} {b.policy.value:>16s}")
    metrics = [
        ("Monthly payment", a.monthly_payment, b.monthly_payment, comparison.monthly_payment_diff),
        ("Total interest", a.summary.total_interest, b.summary.total_interest, comparison.total_interest_diff),
        ("Total payment", a.summary.total_payment, b.summary.total_payment, comparison.total_payment_diff),
    ]
    for name, va, vb, diff in metrics:
        print(f"{name:20s} {format_amount(va):>16s} {format_amount(vb):>16s} {format_amount(diff):>16s}")
    print("=" * 72)
    if comparison.higher_interest is None:
        print("Both loans pay the same total interest.")
    else:
        print(
            f"Loan {comparison.higher_interest} pays {format_amount(abs(comparison.total_interest_diff))}"
            " more in interest."
        )
