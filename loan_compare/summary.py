"""Schedule summaries.

All totals shown to the user are derived here from a generated schedule, so
the summary can never disagree with the per-month figures it describes.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import LoanSummary, Schedule
from .utils import ZERO, engine_context, round_currency


def summarize_schedule(schedule: Schedule, original_principal: Decimal) -> LoanSummary:
    """Reduce a schedule to its aggregate figures.

    ``total_interest`` is derived as ``total_payment - original_principal``
    rather than summed from the interest column. Per-month rounding can make
    the two differ by a few units; deriving it keeps
    ``total_payment == principal + total_interest`` exact. The summed column
    is still reported as ``raw_interest_sum``.

    An empty schedule yields a summary of zeros.
    """
    if not schedule:
        return LoanSummary()

    with engine_context():
        total_payment = sum((r.payment for r in schedule), ZERO)
        total_principal = sum((r.principal for r in schedule), ZERO)
        total_interest = sum((r.interest for r in schedule), ZERO)
        max_payment = max(r.payment for r in schedule)

        rounded_total_payment = round_currency(total_payment)
        return LoanSummary(
            first_payment=round_currency(schedule[0].payment),
            last_payment=round_currency(schedule[-1].payment),
            max_payment=round_currency(max_payment),
            avg_payment=round_currency(total_payment / Decimal(len(schedule))),
            total_interest=rounded_total_payment - original_principal,
            total_payment=rounded_total_payment,
            total_principal_paid=round_currency(total_principal),
            final_balance=round_currency(schedule[-1].balance),
            raw_interest_sum=round_currency(total_interest),
        )
