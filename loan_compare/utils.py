"""Utility functions for the loan comparison calculator.

This module provides the numeric helpers shared by the engine: converting
user-supplied numbers into ``Decimal``, turning an annual percentage rate into
a monthly rate, rounding to whole currency units and formatting amounts for
display.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Union

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")
CURRENCY_UNIT = Decimal("1")

# No traps: overflow and invalid operations produce Infinity/NaN, which the
# engine maps to zero instead of raising.
ENGINE_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP, traps=[])


def engine_context():
    """Return a local decimal context for engine arithmetic."""
    return localcontext(ENGINE_CONTEXT)


def to_decimal(value: Number) -> Decimal:
    """Convert a number or numeric string into a ``Decimal``.

    Floats go through ``str`` so that ``4.5`` becomes ``Decimal("4.5")`` rather
    than its binary expansion. Thousands separators in strings are ignored.

    Raises
    ------
    ValueError
        If the value cannot be interpreted as a number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    try:
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid numeric value: {value!r}") from exc


def monthly_rate(annual_rate_percent: Number) -> Decimal:
    """Return the monthly decimal rate for an annual percentage rate.

    ``6`` (meaning 6 % a year) becomes ``0.005``. Zero stays zero.
    """
    return to_decimal(annual_rate_percent) / Decimal(100) / Decimal(12)


def round_currency(value: Decimal, unit: Decimal = CURRENCY_UNIT) -> Decimal:
    """Round ``value`` to the smallest currency unit, half up.

    Non-finite values (infinities, NaN) round to zero so they never reach a
    schedule or a summary.
    """
    if not value.is_finite():
        return ZERO
    rounded = value.quantize(unit, rounding=ROUND_HALF_UP)
    # with traps disabled quantize returns NaN rather than raising
    return rounded if rounded.is_finite() else ZERO


def format_amount(value: Decimal) -> str:
    """Format a currency amount with thousands separators, e.g. ``1,234,567``."""
    return f"{round_currency(value):,}"
