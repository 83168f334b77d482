"""
Salary Engine - Turn a salary structure and attendance into a payslip calculation.

Pipeline: validate -> prorate -> statutory deductions -> income tax -> sum -> round.
Pure functions with no I/O - every rate is a field of the input.

Usage:
    from decimal import Decimal
    from payroll_engines.salary import SalaryCalculationInput, calculate_salary, validate_salary_input

    salary_input = SalaryCalculationInput(
        basic_salary=Decimal("20000"),
        hra=Decimal("8000"),
        transport_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"),
        working_days=22,
        present_days=22,
    )

    result = validate_salary_input(salary_input)
    if result.is_valid:
        calculated = calculate_salary(salary_input)
        print(calculated.pf_employee)     # 1800
        print(calculated.gross_earnings)  # 30850

Rounding:
    Each statutory figure is rounded the moment it is computed (PF, ESI,
    income tax).  Gross earnings, total deductions and net salary are kept
    unrounded until assembly and rounded once there.  Net salary is
    round(gross - total), NOT round(gross) - round(total), so the two may
    differ by one unit.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from payroll_engines.income_tax import calculate_payroll_income_tax
from payroll_kernel.domain.values import ONE, ZERO, round_whole, to_decimal
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.salary")

# Statutory constants (not overridable per calculation)
PF_WAGE_CEILING = Decimal("15000")
ESI_GROSS_THRESHOLD = Decimal("21000")
ESI_EMPLOYER_RATE = Decimal("0.0325")

# Overridable defaults
DEFAULT_PF_RATE = Decimal("0.12")
DEFAULT_ESI_RATE = Decimal("0.0075")
DEFAULT_PROFESSIONAL_TAX = Decimal("200")
DEFAULT_INCOME_TAX_RATE = Decimal("0.10")

MAX_WORKING_DAYS = Decimal("31")


@dataclass(frozen=True)
class SalaryCalculationInput:
    """
    Everything one salary calculation needs.

    Immutable value object.  Numeric arguments are coerced to ``Decimal``
    on construction; no business validation happens here (see
    ``validate_salary_input``).
    """

    basic_salary: Decimal
    working_days: Decimal
    present_days: Decimal

    # Prorated by attendance
    hra: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    special_allowance: Decimal = ZERO

    # Paid in full regardless of attendance
    performance_bonus: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_rate: Decimal = ZERO
    other_allowances: Decimal = ZERO

    # Rates and flat deductions
    pf_rate: Decimal = DEFAULT_PF_RATE
    esi_rate: Decimal = DEFAULT_ESI_RATE
    professional_tax: Decimal = DEFAULT_PROFESSIONAL_TAX
    income_tax_rate: Decimal = DEFAULT_INCOME_TAX_RATE
    loan_deduction: Decimal = ZERO
    advance_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, to_decimal(getattr(self, f.name)))


NUMERIC_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(SalaryCalculationInput))

_FIELD_LABELS: dict[str, str] = {
    "basic_salary": "Basic salary",
    "working_days": "Working days",
    "present_days": "Present days",
    "hra": "HRA",
    "transport_allowance": "Transport allowance",
    "medical_allowance": "Medical allowance",
    "special_allowance": "Special allowance",
    "performance_bonus": "Performance bonus",
    "overtime_hours": "Overtime hours",
    "overtime_rate": "Overtime rate",
    "other_allowances": "Other allowances",
    "pf_rate": "PF rate",
    "esi_rate": "ESI rate",
    "professional_tax": "Professional tax",
    "income_tax_rate": "Income tax rate",
    "loan_deduction": "Loan deduction",
    "advance_deduction": "Advance deduction",
    "other_deductions": "Other deductions",
}

# Fields with range rules come first so messages follow rule order.
_VALIDATION_ORDER: tuple[str, ...] = (
    "basic_salary",
    "working_days",
    "present_days",
    "overtime_hours",
    "overtime_rate",
) + tuple(
    name for name in NUMERIC_FIELDS
    if name not in {"basic_salary", "working_days", "present_days", "overtime_hours", "overtime_rate"}
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of input validation: every failure, not just the first."""

    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProratedEarnings:
    """Attendance-scaled earnings components (unrounded)."""

    attendance_ratio: Decimal
    basic: Decimal
    hra: Decimal
    transport_allowance: Decimal
    medical_allowance: Decimal
    special_allowance: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.basic
            + self.hra
            + self.transport_allowance
            + self.medical_allowance
            + self.special_allowance
        )

    def rounded(self) -> dict[str, Decimal]:
        """Whole-unit components for display."""
        return {
            "basic": round_whole(self.basic),
            "hra": round_whole(self.hra),
            "transport_allowance": round_whole(self.transport_allowance),
            "medical_allowance": round_whole(self.medical_allowance),
            "special_allowance": round_whole(self.special_allowance),
        }


@dataclass(frozen=True)
class CalculatedSalary:
    """
    Output of one salary calculation.

    All monetary fields are whole currency units.  ``attendance_deduction``
    is a reporting figure: the shortfall is already reflected through
    proration and it is NOT part of ``total_deductions``.
    """

    gross_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    pf_employee: Decimal
    pf_employer: Decimal
    esi_employee: Decimal
    esi_employer: Decimal
    income_tax: Decimal
    attendance_deduction: Decimal
    overtime_amount: Decimal
    attendance_ratio: Decimal
    prorated: ProratedEarnings


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _read(data: Any, name: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(name)
    return getattr(data, name, None)


def validate_salary_input(data: SalaryCalculationInput | Mapping[str, Any]) -> ValidationResult:
    """
    Check a (possibly partial) salary input.

    Args:
        data: A ``SalaryCalculationInput`` or a mapping keyed by its field
            names.  Missing keys are treated as absent.

    Returns:
        ValidationResult with every failed rule, in rule order.
    """
    errors: list[str] = []
    values: dict[str, Decimal] = {}

    for name in _VALIDATION_ORDER:
        raw = _read(data, name)
        if raw is not None:
            try:
                value = to_decimal(raw)
            except (TypeError, ValueError):
                value = None
            if value is None or not value.is_finite():
                errors.append(f"{_FIELD_LABELS[name]} must be a finite number")
                continue
            values[name] = value

        if name == "basic_salary":
            basic = values.get("basic_salary")
            if basic is None or basic <= ZERO:
                errors.append("Basic salary must be greater than 0")
        elif name == "working_days":
            working = values.get("working_days")
            if working is None or working < ONE or working > MAX_WORKING_DAYS:
                errors.append("Working days must be between 1 and 31")
        elif name == "present_days":
            present = values.get("present_days")
            working = values.get("working_days")
            if (
                present is None
                or present < ZERO
                or (working is not None and present > working)
            ):
                errors.append("Present days must be between 0 and working days")
        elif name == "overtime_hours":
            if "overtime_hours" in values and values["overtime_hours"] < ZERO:
                errors.append("Overtime hours cannot be negative")
        elif name == "overtime_rate":
            if "overtime_rate" in values and values["overtime_rate"] < ZERO:
                errors.append("Overtime rate cannot be negative")

    if errors:
        logger.warning("salary_input_invalid", extra={
            "error_count": len(errors),
            "errors": errors,
        })

    return ValidationResult(is_valid=not errors, errors=tuple(errors))


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def prorate_earnings(salary_input: SalaryCalculationInput) -> ProratedEarnings:
    """
    Scale the attendance-linked components by present / working days.

    Preconditions:
        - ``working_days`` > 0 (guaranteed by validation).
    """
    ratio = salary_input.present_days / salary_input.working_days
    return ProratedEarnings(
        attendance_ratio=ratio,
        basic=salary_input.basic_salary * ratio,
        hra=salary_input.hra * ratio,
        transport_allowance=salary_input.transport_allowance * ratio,
        medical_allowance=salary_input.medical_allowance * ratio,
        special_allowance=salary_input.special_allowance * ratio,
    )


def calculate_overtime_amount(overtime_hours: Decimal, overtime_rate: Decimal) -> Decimal:
    """Overtime pay for hours actually worked (never prorated)."""
    return overtime_hours * overtime_rate


def calculate_gross_earnings(
    salary_input: SalaryCalculationInput,
    prorated: ProratedEarnings,
) -> Decimal:
    """Unrounded gross: prorated components plus bonus, overtime and other allowances."""
    overtime_amount = calculate_overtime_amount(
        salary_input.overtime_hours, salary_input.overtime_rate
    )
    return (
        prorated.total
        + salary_input.performance_bonus
        + overtime_amount
        + salary_input.other_allowances
    )


def calculate_attendance_deduction(
    salary_input: SalaryCalculationInput,
    attendance_ratio: Decimal,
) -> Decimal:
    """Absence shortfall on un-prorated basic + HRA (reporting figure, unrounded)."""
    return (salary_input.basic_salary + salary_input.hra) * (ONE - attendance_ratio)


def calculate_provident_fund(
    prorated_basic: Decimal,
    pf_rate: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Provident fund contributions.

    The wage base is capped at ``PF_WAGE_CEILING`` before the rate is
    applied.  The employer matches the employee contribution.

    Returns:
        (employee, employer) whole-unit amounts.
    """
    pf_base = min(prorated_basic, PF_WAGE_CEILING)
    employee = round_whole(pf_base * pf_rate)
    return employee, employee


def calculate_esi(
    gross_earnings: Decimal,
    esi_rate: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Employee State Insurance contributions.

    Applies only when period gross is at or below ``ESI_GROSS_THRESHOLD``.
    The employer share is charged only when the employee share is nonzero.

    Returns:
        (employee, employer) whole-unit amounts.
    """
    if gross_earnings > ESI_GROSS_THRESHOLD:
        return ZERO, ZERO
    employee = round_whole(gross_earnings * esi_rate)
    if employee <= ZERO:
        return employee, ZERO
    return employee, round_whole(gross_earnings * ESI_EMPLOYER_RATE)


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


class SalaryCalculator:
    """
    Calculate a payslip from validated input.

    Pure functions - no I/O, no database access.
    Total over validated input: never raises for business rules.
    """

    def calculate(self, salary_input: SalaryCalculationInput) -> CalculatedSalary:
        """
        Run the full pipeline.

        Args:
            salary_input: Input that passed ``validate_salary_input``.

        Returns:
            CalculatedSalary with every field rounded once.
        """
        t0 = time.monotonic()
        logger.info("salary_calculation_started", extra={
            "basic_salary": str(salary_input.basic_salary),
            "working_days": str(salary_input.working_days),
            "present_days": str(salary_input.present_days),
        })

        prorated = prorate_earnings(salary_input)
        overtime_amount = calculate_overtime_amount(
            salary_input.overtime_hours, salary_input.overtime_rate
        )
        gross = calculate_gross_earnings(salary_input, prorated)

        pf_employee, pf_employer = calculate_provident_fund(
            prorated.basic, salary_input.pf_rate
        )
        esi_employee, esi_employer = calculate_esi(gross, salary_input.esi_rate)
        income_tax = calculate_payroll_income_tax(
            gross_earnings=gross,
            pf_employee=pf_employee,
            esi_employee=esi_employee,
            income_tax_rate=salary_input.income_tax_rate,
        )

        attendance_deduction = calculate_attendance_deduction(
            salary_input, prorated.attendance_ratio
        )

        total_deductions = (
            pf_employee
            + esi_employee
            + salary_input.professional_tax
            + income_tax
            + salary_input.loan_deduction
            + salary_input.advance_deduction
            + salary_input.other_deductions
        )
        net_salary = round_whole(gross - total_deductions)

        result = CalculatedSalary(
            gross_earnings=round_whole(gross),
            total_deductions=round_whole(total_deductions),
            net_salary=net_salary,
            pf_employee=pf_employee,
            pf_employer=pf_employer,
            esi_employee=esi_employee,
            esi_employer=esi_employer,
            income_tax=income_tax,
            attendance_deduction=round_whole(attendance_deduction),
            overtime_amount=round_whole(overtime_amount),
            attendance_ratio=prorated.attendance_ratio,
            prorated=prorated,
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("salary_calculation_completed", extra={
            "gross_earnings": str(result.gross_earnings),
            "total_deductions": str(result.total_deductions),
            "net_salary": str(result.net_salary),
            "pf_employee": str(result.pf_employee),
            "esi_employee": str(result.esi_employee),
            "income_tax": str(result.income_tax),
            "duration_ms": duration_ms,
        })

        return result


def calculate_salary(salary_input: SalaryCalculationInput) -> CalculatedSalary:
    """Convenience wrapper around ``SalaryCalculator().calculate``."""
    return SalaryCalculator().calculate(salary_input)
