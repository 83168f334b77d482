"""
Salary Helpers (``payroll_modules.salary.helpers``).

Responsibility
--------------
Pure functions that sit between stored records and the salary engine:
pay-period bounds, effective-structure selection, layering of structure
values, company defaults and per-slip overrides into engine input, and
assembly of a ``SalarySlip`` from an engine result.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no clock.  Called
by ``SalarySlipService`` or from tests.

Invariants enforced
-------------------
* Only ``active`` structures are eligible for selection.
* A structure applies to a month when its ``effective_date`` is on or
  before the last day of that month.
* Slips are always assembled in ``draft``.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from payroll_config.schema import PayrollDefaults
from payroll_engines.salary import CalculatedSalary
from payroll_modules.salary.models import (
    EmployeeBankDetails,
    SalarySlip,
    SalarySlipStatus,
    SalaryStructure,
    SlipOverrides,
    StructureStatus,
)


def pay_period_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of the month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def select_effective_structure(
    structures: Iterable[SalaryStructure],
    employee_id: str,
    month: int,
    year: int,
) -> SalaryStructure | None:
    """
    The employee's authoritative structure for a pay period.

    Latest ``effective_date`` on or before the period end among active
    structures; on equal dates the later one in ``structures`` wins.
    Returns None when nothing qualifies.
    """
    _, period_end = pay_period_bounds(month, year)
    selected: SalaryStructure | None = None
    for structure in structures:
        if structure.employee_id != employee_id:
            continue
        if structure.status != StructureStatus.ACTIVE:
            continue
        if structure.effective_date > period_end:
            continue
        if selected is None or structure.effective_date >= selected.effective_date:
            selected = structure
    return selected


def build_calculation_values(
    structure: SalaryStructure,
    overrides: SlipOverrides,
    defaults: PayrollDefaults,
) -> dict[str, Any]:
    """
    Raw engine input: structure pay, then company defaults, then overrides.

    Bonus, overtime and other allowances come from overrides only; the
    structure supplies the five attendance-linked components.  Present
    days default to working days.  Values are returned unvalidated.
    """
    values: dict[str, Any] = {
        "basic_salary": structure.basic_salary,
        "hra": structure.hra,
        "transport_allowance": structure.transport_allowance,
        "medical_allowance": structure.medical_allowance,
        "special_allowance": structure.special_allowance,
        "overtime_rate": defaults.default_overtime_rate,
        "working_days": defaults.default_working_days,
        "pf_rate": defaults.pf_rate,
        "esi_rate": defaults.esi_rate,
        "professional_tax": defaults.professional_tax,
        "income_tax_rate": defaults.income_tax_rate,
    }
    given = overrides.given()
    values.update(given)
    if "present_days" not in given:
        values["present_days"] = values["working_days"]
    return values


def build_salary_slip(
    structure: SalaryStructure,
    month: int,
    year: int,
    values: dict[str, Any],
    calculated: CalculatedSalary,
    bank_details: EmployeeBankDetails | None = None,
    generated_at: datetime | None = None,
) -> SalarySlip:
    """
    Merge identity, pay period, input lines and engine figures into a draft slip.

    ``values`` must be the (validated) mapping the engine ran on.
    """
    period_start, period_end = pay_period_bounds(month, year)
    return SalarySlip(
        employee_id=structure.employee_id,
        month=month,
        year=year,
        pay_period_start=period_start,
        pay_period_end=period_end,
        working_days=values["working_days"],
        present_days=values["present_days"],
        employee_name=structure.employee_name,
        employee_email=structure.employee_email,
        department=structure.department,
        position=structure.position,
        bank_details=bank_details or EmployeeBankDetails(),
        basic_salary=values["basic_salary"],
        hra=values["hra"],
        transport_allowance=values["transport_allowance"],
        medical_allowance=values["medical_allowance"],
        special_allowance=values["special_allowance"],
        performance_bonus=values.get("performance_bonus", 0),
        overtime_hours=values.get("overtime_hours", 0),
        overtime_rate=values.get("overtime_rate", 0),
        overtime_amount=calculated.overtime_amount,
        other_allowances=values.get("other_allowances", 0),
        gross_earnings=calculated.gross_earnings,
        pf_employee=calculated.pf_employee,
        esi_employee=calculated.esi_employee,
        professional_tax=values["professional_tax"],
        income_tax=calculated.income_tax,
        loan_deduction=values.get("loan_deduction", 0),
        advance_deduction=values.get("advance_deduction", 0),
        late_deduction=calculated.attendance_deduction,
        other_deductions=values.get("other_deductions", 0),
        total_deductions=calculated.total_deductions,
        net_salary=calculated.net_salary,
        pf_employer=calculated.pf_employer,
        esi_employer=calculated.esi_employer,
        status=SalarySlipStatus.DRAFT,
        generated_date=generated_at,
        structure_id=structure.id,
    )
