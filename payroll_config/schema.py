"""
Payroll configuration schema (``payroll_config.schema``).

Frozen dataclasses describing company payroll defaults: the overridable
rates the salary engine falls back to, the defaults used when a slip is
generated without attendance figures, and the company header printed on
payslips.  Statutory ceilings and thresholds are NOT configuration; they
are constants of ``payroll_engines.salary``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from payroll_engines.salary import (
    DEFAULT_ESI_RATE,
    DEFAULT_INCOME_TAX_RATE,
    DEFAULT_PF_RATE,
    DEFAULT_PROFESSIONAL_TAX,
)
from payroll_kernel.domain.values import ONE, ZERO
from payroll_kernel.exceptions import PayrollConfigError

DEFAULT_WORKING_DAYS = 22
DEFAULT_OVERTIME_RATE = Decimal("500")


@dataclass(frozen=True)
class CompanyProfile:
    """Employer details shown in the payslip header."""

    name: str = ""
    registration_number: str = ""
    address_lines: tuple[str, ...] = ()
    location: str = ""


@dataclass(frozen=True)
class PayrollDefaults:
    """
    Company-level payroll defaults.

    Field defaults match the engine's built-in defaults, so an empty
    configuration file behaves exactly like no configuration.
    """

    pf_rate: Decimal = DEFAULT_PF_RATE
    esi_rate: Decimal = DEFAULT_ESI_RATE
    professional_tax: Decimal = DEFAULT_PROFESSIONAL_TAX
    income_tax_rate: Decimal = DEFAULT_INCOME_TAX_RATE
    default_working_days: int = DEFAULT_WORKING_DAYS
    default_overtime_rate: Decimal = DEFAULT_OVERTIME_RATE
    company: CompanyProfile = field(default_factory=CompanyProfile)

    def __post_init__(self) -> None:
        for name in ("pf_rate", "esi_rate", "income_tax_rate"):
            rate = getattr(self, name)
            if not rate.is_finite() or rate < ZERO or rate > ONE:
                raise PayrollConfigError(
                    f"{name} must be a fraction between 0 and 1, got {rate}",
                    field_name=name,
                )
        for name in ("professional_tax", "default_overtime_rate"):
            amount = getattr(self, name)
            if not amount.is_finite() or amount < ZERO:
                raise PayrollConfigError(
                    f"{name} cannot be negative, got {amount}",
                    field_name=name,
                )
        if not 1 <= self.default_working_days <= 31:
            raise PayrollConfigError(
                f"default_working_days must be between 1 and 31, got {self.default_working_days}",
                field_name="default_working_days",
            )
