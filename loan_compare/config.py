"""Configuration for the loan comparison calculator.

Two groups of settings live here: ``InputLimits`` describes the accepted ranges
for raw loan parameters, and ``EngineConfig`` controls rounding and the
tolerance used when checking generated schedules. Both are built once at
import time; a couple of values can be overridden from the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputLimits:
    """Accepted ranges for loan parameters (bounds are inclusive)."""

    min_principal: Decimal = Decimal("100000")
    max_principal: Decimal = Decimal("10000000000")
    min_months: int = 1
    max_months: int = 600  # 50 years
    min_rate: Decimal = Decimal("0")
    max_rate: Decimal = Decimal("30")
    max_grace_months: int = 120  # 10 years


@dataclass(frozen=True)
class EngineConfig:
    """Rounding and validation settings for the amortization engine.

    Attributes
    ----------
    currency_unit: Decimal
        Smallest currency unit every emitted figure is rounded to.
    tolerance: Decimal
        Allowed absolute difference, in currency units, when a schedule is
        checked against its principal.
    limits: InputLimits
        Ranges enforced by ``validate_inputs``.
    """

    currency_unit: Decimal = Decimal("1")
    tolerance: Decimal = Decimal("10")
    limits: InputLimits = field(default_factory=InputLimits)


def _tolerance_from_env(default: Decimal) -> Decimal:
    raw = os.environ.get("LOAN_COMPARE_TOLERANCE")
    if not raw:
        return default
    try:
        value = Decimal(raw.strip())
    except ArithmeticError:
        logger.warning("Ignoring invalid LOAN_COMPARE_TOLERANCE=%r", raw)
        return default
    if not value.is_finite() or value < 0:
        logger.warning("Ignoring invalid LOAN_COMPARE_TOLERANCE=%r", raw)
        return default
    return value


def load_config() -> EngineConfig:
    """Build the engine configuration, applying environment overrides."""
    return EngineConfig(tolerance=_tolerance_from_env(EngineConfig.tolerance))


def log_level_from_env(default: str = "WARNING") -> str:
    return os.environ.get("LOAN_COMPARE_LOG_LEVEL", default).upper()


CONFIG = load_config()
