"""
Salary Module (``payroll_modules.salary``).

Responsibility
--------------
Thin glue between stored salary records and the salary engine: salary
structures, effective-structure selection, per-slip overrides, draft slip
generation, and the slip lifecycle (draft -> processed -> paid, or
cancelled).

Architecture position
---------------------
**Modules layer** -- models, workflow, pure helpers and a service facade.
Arithmetic lives in ``payroll_engines``; persistence and rendering belong
to the caller.
"""

from payroll_modules.salary.helpers import (
    build_calculation_values,
    build_salary_slip,
    pay_period_bounds,
    select_effective_structure,
)
from payroll_modules.salary.models import (
    EmployeeBankDetails,
    SalarySlip,
    SalarySlipStatus,
    SalaryStructure,
    SlipOverrides,
    StructureStatus,
)
from payroll_modules.salary.service import BatchGenerationResult, SalarySlipService
from payroll_modules.salary.workflows import SALARY_SLIP_WORKFLOW

__all__ = [
    "BatchGenerationResult",
    "EmployeeBankDetails",
    "SALARY_SLIP_WORKFLOW",
    "SalarySlip",
    "SalarySlipService",
    "SalarySlipStatus",
    "SalaryStructure",
    "SlipOverrides",
    "StructureStatus",
    "build_calculation_values",
    "build_salary_slip",
    "pay_period_bounds",
    "select_effective_structure",
]
