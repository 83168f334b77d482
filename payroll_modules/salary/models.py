"""
Salary Domain Models (``payroll_modules.salary.models``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of salary
processing: salary structures, per-slip overrides, employee bank and
statutory identifiers, and salary slips.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``SalarySlipService`` and returned to callers, who persist and render
them.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields are ``Decimal`` -- numbers are coerced on
  construction, never stored as ``float``.
* ``SalaryStructure.create`` derives gross, total deductions and net so
  that ``gross = sum(earnings)`` and ``net = gross - total_deductions``.

Failure modes
-------------
* Construction with an unknown status raises ``ValueError``.
* Non-numeric amounts raise ``ValueError`` / ``TypeError``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from payroll_kernel.domain.values import ZERO, to_decimal
from payroll_kernel.logging_config import get_logger

logger = get_logger("modules.salary.models")

MONTH_NAMES = tuple(calendar.month_name)  # index 1..12


class StructureStatus(str, Enum):
    """Salary structure states."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class SalarySlipStatus(str, Enum):
    """Salary slip lifecycle states."""
    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"
    CANCELLED = "cancelled"


STRUCTURE_EARNING_FIELDS = (
    "basic_salary",
    "hra",
    "transport_allowance",
    "medical_allowance",
    "special_allowance",
    "performance_bonus",
    "overtime_amount",
    "other_allowances",
)

STRUCTURE_DEDUCTION_FIELDS = (
    "pf_employee",
    "esi_employee",
    "professional_tax",
    "income_tax",
    "medical_insurance",
    "loan_deduction",
    "other_deductions",
)


def _coerce_amounts(obj: Any, names: tuple[str, ...] | list[str]) -> None:
    for name in names:
        value = getattr(obj, name)
        if value is not None:
            object.__setattr__(obj, name, to_decimal(value))


@dataclass(frozen=True)
class SalaryStructure:
    """
    An employee's compensation as of ``effective_date``.

    Superseded by a newer structure, never overwritten.
    """
    id: str
    employee_id: str
    effective_date: date
    employee_name: str = ""
    employee_email: str = ""
    department: str = ""
    position: str = ""

    # Earnings
    basic_salary: Decimal = ZERO
    hra: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    special_allowance: Decimal = ZERO
    performance_bonus: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    other_allowances: Decimal = ZERO

    # Deductions
    pf_employee: Decimal = ZERO
    pf_employer: Decimal = ZERO
    esi_employee: Decimal = ZERO
    esi_employer: Decimal = ZERO
    professional_tax: Decimal = ZERO
    income_tax: Decimal = ZERO
    medical_insurance: Decimal = ZERO
    loan_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO

    # Derived
    gross_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO

    status: StructureStatus = StructureStatus.ACTIVE

    def __post_init__(self) -> None:
        _coerce_amounts(
            self,
            STRUCTURE_EARNING_FIELDS
            + STRUCTURE_DEDUCTION_FIELDS
            + ("pf_employer", "esi_employer", "gross_salary", "total_deductions", "net_salary"),
        )
        if isinstance(self.effective_date, str):
            object.__setattr__(self, "effective_date", date.fromisoformat(self.effective_date))
        object.__setattr__(self, "status", StructureStatus(self.status))

    @classmethod
    def create(cls, **kwargs: Any) -> SalaryStructure:
        """Build a structure with gross, total deductions and net derived."""
        for name in ("gross_salary", "total_deductions", "net_salary"):
            if name in kwargs:
                raise TypeError(f"{name} is derived and cannot be passed to create()")
        draft = cls(**kwargs)
        gross = draft.earnings_total
        deductions = draft.deductions_total
        structure = cls(
            **{f.name: getattr(draft, f.name) for f in fields(cls)
               if f.name not in ("gross_salary", "total_deductions", "net_salary")},
            gross_salary=gross,
            total_deductions=deductions,
            net_salary=gross - deductions,
        )
        logger.debug("salary_structure_created", extra={
            "structure_id": structure.id,
            "employee_id": structure.employee_id,
            "effective_date": structure.effective_date.isoformat(),
            "gross_salary": str(structure.gross_salary),
        })
        return structure

    @property
    def earnings_total(self) -> Decimal:
        return sum((getattr(self, n) for n in STRUCTURE_EARNING_FIELDS), ZERO)

    @property
    def deductions_total(self) -> Decimal:
        return sum((getattr(self, n) for n in STRUCTURE_DEDUCTION_FIELDS), ZERO)

    @property
    def is_consistent(self) -> bool:
        """True when the stored derived fields agree with the components."""
        return (
            self.gross_salary == self.earnings_total
            and self.total_deductions == self.deductions_total
            and self.net_salary == self.gross_salary - self.total_deductions
        )


@dataclass(frozen=True)
class EmployeeBankDetails:
    """Statutory and bank identifiers printed on a slip."""
    pan_number: str | None = None
    joining_date: date | None = None
    bank_name: str | None = None
    bank_account_no: str | None = None
    pf_number: str | None = None
    uan_number: str | None = None
    esi_number: str | None = None


@dataclass(frozen=True)
class SlipOverrides:
    """
    Per-slip inputs layered over the structure and company defaults.

    ``None`` means "not given": the structure value or the company
    default applies.  An explicit zero is a real value.
    """
    basic_salary: Decimal | None = None
    hra: Decimal | None = None
    transport_allowance: Decimal | None = None
    medical_allowance: Decimal | None = None
    special_allowance: Decimal | None = None
    performance_bonus: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate: Decimal | None = None
    other_allowances: Decimal | None = None
    working_days: Decimal | None = None
    present_days: Decimal | None = None
    pf_rate: Decimal | None = None
    esi_rate: Decimal | None = None
    professional_tax: Decimal | None = None
    income_tax_rate: Decimal | None = None
    loan_deduction: Decimal | None = None
    advance_deduction: Decimal | None = None
    other_deductions: Decimal | None = None

    def given(self) -> dict[str, Any]:
        """Only the fields that were supplied."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class SalarySlip:
    """
    One employee's pay for one month.

    Earnings lines carry the structure amounts; ``gross_earnings``,
    deductions and ``net_salary`` are the attendance-adjusted engine
    figures.  ``late_deduction`` is informational and is not part of
    ``total_deductions``.
    """
    employee_id: str
    month: int
    year: int
    pay_period_start: date
    pay_period_end: date
    working_days: Decimal
    present_days: Decimal

    # Identity
    employee_name: str = ""
    employee_email: str = ""
    department: str = ""
    position: str = ""
    bank_details: EmployeeBankDetails = field(default_factory=EmployeeBankDetails)

    # Earnings
    basic_salary: Decimal = ZERO
    hra: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    special_allowance: Decimal = ZERO
    performance_bonus: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_rate: Decimal = ZERO
    overtime_amount: Decimal = ZERO
    other_allowances: Decimal = ZERO
    gross_earnings: Decimal = ZERO

    # Deductions
    pf_employee: Decimal = ZERO
    esi_employee: Decimal = ZERO
    professional_tax: Decimal = ZERO
    income_tax: Decimal = ZERO
    medical_insurance: Decimal = ZERO
    loan_deduction: Decimal = ZERO
    advance_deduction: Decimal = ZERO
    late_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO
    total_deductions: Decimal = ZERO

    net_salary: Decimal = ZERO

    # Employer contributions (for reference)
    pf_employer: Decimal = ZERO
    esi_employer: Decimal = ZERO

    status: SalarySlipStatus = SalarySlipStatus.DRAFT
    generated_date: datetime | None = None
    paid_date: date | None = None
    structure_id: str | None = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")
        _coerce_amounts(self, [
            f.name for f in fields(self)
            if f.type in ("Decimal", Decimal)
        ])
        object.__setattr__(self, "status", SalarySlipStatus(self.status))

    @property
    def lop_days(self) -> Decimal:
        """Loss-of-pay days: working days not attended."""
        return max(ZERO, self.working_days - self.present_days)

    @property
    def period_label(self) -> str:
        return f"{MONTH_NAMES[self.month]} {self.year}"
