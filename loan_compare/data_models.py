"""Data models for the loan comparison calculator.

This module defines the repayment policies and the dataclasses passed between
the engine components: the loan parameters, individual schedule records, the
summary derived from a schedule, validation reports and the combined result of
a calculation. All currency figures are ``Decimal`` values rounded to whole
currency units.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .utils import round_currency

logger = logging.getLogger(__name__)


class RepaymentPolicy(Enum):
    """The five supported repayment conventions."""

    EQUAL_PAYMENT = "equal_payment"
    EQUAL_PRINCIPAL = "equal_principal"
    BULLET = "bullet"
    GRACE_EQUAL_PAYMENT = "grace_equal_payment"
    GRACE_EQUAL_PRINCIPAL = "grace_equal_principal"

    @property
    def label(self) -> str:
        return _POLICY_LABELS[self]

    @property
    def is_grace(self) -> bool:
        return self in (RepaymentPolicy.GRACE_EQUAL_PAYMENT, RepaymentPolicy.GRACE_EQUAL_PRINCIPAL)

    @classmethod
    def from_tag(cls, tag: Union["RepaymentPolicy", str, None]) -> "RepaymentPolicy":
        """Resolve a policy tag, falling back to ``EQUAL_PAYMENT``.

        Accepts a ``RepaymentPolicy``, its value (``"equal_principal"``), its
        name in any case with ``-`` or ``_`` separators, and the camelCase tags
        used by the browser calculator (``"graceEqualPrincipalInterest"``).
        Unrecognized tags resolve to equal payments.
        """
        if isinstance(tag, cls):
            return tag
        if tag is not None:
            key = str(tag).strip()
            if key in _LEGACY_TAGS:
                return _LEGACY_TAGS[key]
            normalized = key.lower().replace("-", "_")
            for policy in cls:
                if policy.value == normalized:
                    return policy
        logger.warning("Unknown repayment policy %r; using equal payments", tag)
        return cls.EQUAL_PAYMENT


_POLICY_LABELS = {
    RepaymentPolicy.EQUAL_PAYMENT: "Equal payment (annuity)",
    RepaymentPolicy.EQUAL_PRINCIPAL: "Equal principal",
    RepaymentPolicy.BULLET: "Bullet (interest only, principal at maturity)",
    RepaymentPolicy.GRACE_EQUAL_PAYMENT: "Grace period + equal payment",
    RepaymentPolicy.GRACE_EQUAL_PRINCIPAL: "Grace period + equal principal",
}

_LEGACY_TAGS = {
    "equalPrincipalInterest": RepaymentPolicy.EQUAL_PAYMENT,
    "equalPrincipal": RepaymentPolicy.EQUAL_PRINCIPAL,
    "graceEqualPrincipalInterest": RepaymentPolicy.GRACE_EQUAL_PAYMENT,
    "graceEqualPrincipal": RepaymentPolicy.GRACE_EQUAL_PRINCIPAL,
}


@dataclass(frozen=True)
class LoanParameters:
    """Inputs to a single calculation.

    ``principal`` is the financed amount, ``annual_rate_percent`` the nominal
    annual rate in percent (6.5 means 6.5 %) and ``grace_months`` the number
    of leading interest-only months for grace policies.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    grace_months: int = 0
    policy: RepaymentPolicy = RepaymentPolicy.EQUAL_PAYMENT


@dataclass(frozen=True)
class PeriodRecord:
    """One month of a repayment schedule.

    ``payment`` equals ``principal + interest`` up to rounding, and
    ``balance`` is the outstanding principal after the payment. ``note``
    carries descriptive metadata such as ``"interest-only"`` for bullet and
    grace months.
    """

    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    is_grace_period: bool = False
    note: Optional[str] = None


Schedule = List[PeriodRecord]


@dataclass
class LoanSummary:
    """Aggregate figures derived from a schedule."""

    first_payment: Decimal = Decimal("0")
    last_payment: Decimal = Decimal("0")
    max_payment: Decimal = Decimal("0")
    avg_payment: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_payment: Decimal = Decimal("0")
    total_principal_paid: Decimal = Decimal("0")
    final_balance: Decimal = Decimal("0")
    # Sum of the per-period interest column; kept for diagnostics only.
    raw_interest_sum: Decimal = Decimal("0")


@dataclass
class ValidationResult:
    """Outcome of checking a schedule against its principal."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    principal_sum: Decimal = Decimal("0")
    interest_sum: Decimal = Decimal("0")
    payment_sum: Decimal = Decimal("0")
    final_balance: Decimal = Decimal("0")
    original_principal: Decimal = Decimal("0")


@dataclass
class InputValidation:
    """Outcome of range-checking raw loan parameters."""

    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class LoanResult:
    """Everything a caller needs to display one calculated loan.

    ``monthly_payment`` is the regular installment shown to the user: the
    first payment, or for grace policies the first payment after the grace
    period. ``grace_payment`` and ``repayment_months`` are only set for grace
    policies and ``bullet_warning`` only for bullet loans.
    """

    parameters: LoanParameters
    summary: LoanSummary
    validation: ValidationResult
    label: str
    monthly_payment: Decimal
    grace_payment: Optional[Decimal] = None
    repayment_months: Optional[int] = None
    bullet_warning: Optional[str] = None
    schedule: Optional[Schedule] = None

    @property
    def policy(self) -> RepaymentPolicy:
        return self.parameters.policy


@dataclass
class LoanComparison:
    """Side-by-side comparison of two calculated loans.

    Differences are ``A - B``. ``higher_interest`` names the loan that pays
    noticeably more interest, or is ``None`` when both are within the
    comparison threshold.
    """

    loan_a: LoanResult
    loan_b: LoanResult
    monthly_payment_diff: Decimal
    total_interest_diff: Decimal
    total_payment_diff: Decimal
    higher_interest: Optional[str]


def record_to_dict(record: PeriodRecord) -> Dict[str, Any]:
    """Convert a schedule record into JSON-serialisable values."""
    return {
        "period": record.period,
        "payment": int(record.payment),
        "principal": int(record.principal),
        "interest": int(record.interest),
        "balance": int(record.balance),
        "is_grace_period": record.is_grace_period,
        "note": record.note,
    }


def result_to_dict(result: LoanResult) -> Dict[str, Any]:
    """Convert a ``LoanResult`` into JSON-serialisable values."""
    params = result.parameters
    summary = result.summary
    validation = result.validation
    data: Dict[str, Any] = {
        "type": params.policy.value,
        "label": result.label,
        "principal": int(round_currency(params.principal)),
        "annual_rate": float(params.annual_rate_percent),
        "months": params.term_months,
        "grace_months": params.grace_months,
        "monthly_payment": int(result.monthly_payment),
        "first_payment": int(summary.first_payment),
        "last_payment": int(summary.last_payment),
        "max_payment": int(summary.max_payment),
        "avg_payment": int(summary.avg_payment),
        "total_interest": int(summary.total_interest),
        "total_payment": int(summary.total_payment),
        "validation": {
            "is_valid": validation.is_valid,
            "errors": list(validation.errors),
            "principal_sum": int(validation.principal_sum),
            "final_balance": int(validation.final_balance),
            "original_principal": int(round_currency(validation.original_principal)),
        },
    }
    if result.repayment_months is not None:
        data["repayment_months"] = result.repayment_months
        data["grace_payment"] = int(result.grace_payment or 0)
    if result.bullet_warning:
        data["bullet_warning"] = result.bullet_warning
    if result.schedule is not None:
        data["schedule"] = [record_to_dict(r) for r in result.schedule]
    return data
