"""
Income Tax Engine - two deliberately separate income tax models.

1. Payroll income tax (``calculate_payroll_income_tax``)
   Flat-rate monthly withholding used when a salary slip is assembled.
   Driven by a single configurable rate.

2. Tax-savings estimator (``calculate_tax_savings``)
   Advisory annual estimate using India old-regime progressive slabs,
   capped section 80C / 80D investment deductions and 4% cess.  Its
   output is for display only and never feeds slip generation.

The two share the standard deduction constant and nothing else.  Keep
them apart: merging them changes every payslip.

Usage:
    from decimal import Decimal
    from payroll_engines.income_tax import TaxInvestments, calculate_tax_savings

    estimate = calculate_tax_savings(
        gross_salary=Decimal("900000"),
        investments=TaxInvestments(section_80c=Decimal("150000")),
    )
    print(estimate.taxable_income)   # 700000
    print(estimate.effective_tax_rate)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal

from payroll_kernel.domain.values import HUNDRED, ZERO, round_to, round_whole, to_decimal
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.income_tax")

STANDARD_DEDUCTION = Decimal("50000")


# =============================================================================
# Payroll income tax (flat rate)
# =============================================================================


def calculate_payroll_income_tax(
    gross_earnings: Decimal,
    pf_employee: Decimal,
    esi_employee: Decimal,
    income_tax_rate: Decimal,
) -> Decimal:
    """
    Flat-rate income tax for one pay period.

    taxable = max(0, gross - PF - ESI - standard deduction)

    Preconditions:
        - All arguments are ``Decimal``; ``gross_earnings`` may be unrounded.
    Postconditions:
        - Returns a whole-unit ``Decimal`` >= 0 for a non-negative rate.
    """
    taxable = max(ZERO, gross_earnings - pf_employee - esi_employee - STANDARD_DEDUCTION)
    return round_whole(taxable * income_tax_rate)


# =============================================================================
# Tax-savings estimator (old-regime slabs)
# =============================================================================

SECTION_80C_LIMIT = Decimal("150000")
SECTION_80D_LIMIT = Decimal("25000")
HEALTH_EDUCATION_CESS = Decimal("1.04")
BASELINE_TAX_RATE = Decimal("0.20")

# (upper limit of slab, rate); None = no upper limit
OLD_REGIME_SLABS: tuple[tuple[Decimal | None, Decimal], ...] = (
    (Decimal("250000"), Decimal("0")),
    (Decimal("500000"), Decimal("0.05")),
    (Decimal("1000000"), Decimal("0.20")),
    (None, Decimal("0.30")),
)


@dataclass(frozen=True)
class TaxInvestments:
    """Annual amounts the employee can claim against taxable income."""

    pf: Decimal = ZERO
    esi: Decimal = ZERO
    section_80c: Decimal = ZERO
    section_80d: Decimal = ZERO
    hra: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("pf", "esi", "section_80c", "section_80d", "hra"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @property
    def capped_total(self) -> Decimal:
        """Claimable total with 80C / 80D limits applied (no standard deduction)."""
        return (
            self.pf
            + self.esi
            + min(self.section_80c, SECTION_80C_LIMIT)
            + min(self.section_80d, SECTION_80D_LIMIT)
            + self.hra
        )


@dataclass(frozen=True)
class TaxSavingsEstimate:
    """Advisory tax estimate.  Whole units except the 2dp percentage."""

    taxable_income: Decimal
    estimated_tax: Decimal
    tax_savings: Decimal
    effective_tax_rate: Decimal  # percent, 2 decimal places


def calculate_slab_tax(taxable_income: Decimal) -> Decimal:
    """
    Old-regime progressive tax before cess (unrounded).

    Postconditions:
        - 0 for income up to 250,000.
        - 12,500 at 500,000; 112,500 at 1,000,000.
    """
    tax = ZERO
    lower = ZERO
    for upper, rate in OLD_REGIME_SLABS:
        if taxable_income <= lower:
            break
        top = taxable_income if upper is None else min(taxable_income, upper)
        tax += (top - lower) * rate
        if upper is None:
            break
        lower = upper
    return tax


def calculate_tax_savings(
    gross_salary: Decimal,
    investments: TaxInvestments,
) -> TaxSavingsEstimate:
    """
    Estimate annual tax and the saving from declared investments.

    The baseline is a flat 20% of gross less the standard deduction, PF
    and ESI; savings are the baseline minus the slab tax with cess,
    floored at zero.

    Args:
        gross_salary: Annual gross salary.
        investments: Declared deductions.

    Returns:
        TaxSavingsEstimate
    """
    t0 = time.monotonic()
    gross_salary = to_decimal(gross_salary)
    logger.info("tax_savings_estimate_started", extra={
        "gross_salary": str(gross_salary),
        "section_80c": str(investments.section_80c),
        "section_80d": str(investments.section_80d),
    })

    total_deductions = investments.capped_total + STANDARD_DEDUCTION
    taxable_income = max(ZERO, gross_salary - total_deductions)

    tax = calculate_slab_tax(taxable_income) * HEALTH_EDUCATION_CESS

    tax_without_deductions = max(
        ZERO,
        (gross_salary - STANDARD_DEDUCTION - investments.pf - investments.esi)
        * BASELINE_TAX_RATE,
    )
    tax_savings = max(ZERO, tax_without_deductions - tax)
    if gross_salary > ZERO:
        effective_tax_rate = round_to(tax / gross_salary * HUNDRED, 2)
    else:
        effective_tax_rate = round_to(ZERO, 2)

    estimate = TaxSavingsEstimate(
        taxable_income=round_whole(taxable_income),
        estimated_tax=round_whole(tax),
        tax_savings=round_whole(tax_savings),
        effective_tax_rate=effective_tax_rate,
    )

    logger.info("tax_savings_estimate_completed", extra={
        "taxable_income": str(estimate.taxable_income),
        "estimated_tax": str(estimate.estimated_tax),
        "tax_savings": str(estimate.tax_savings),
        "effective_tax_rate": str(estimate.effective_tax_rate),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })

    return estimate
