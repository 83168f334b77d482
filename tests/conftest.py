"""
Pytest fixtures for the payroll test suite.

Provides:
- Logging reset between tests (handlers and LogContext)
- A deterministic clock pinned to the end of March 2026
- Sample salary structures used across engine and module tests
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from payroll_config.schema import PayrollDefaults
from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.logging_config import LogContext, reset_logging
from payroll_modules.salary import SalarySlipService, SalaryStructure


@pytest.fixture(autouse=True)
def _clean_logging():
    """Every test starts with unconfigured logging and an empty context."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2026, 3, 31, 18, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def payroll_defaults() -> PayrollDefaults:
    return PayrollDefaults()


@pytest.fixture
def service(payroll_defaults, clock) -> SalarySlipService:
    return SalarySlipService(defaults=payroll_defaults, clock=clock)


@pytest.fixture
def standard_structure() -> SalaryStructure:
    """Gross 30,850: above the ESI threshold, basic above the PF ceiling."""
    return SalaryStructure.create(
        id="ss-001",
        employee_id="emp-001",
        employee_name="Asha Rao",
        employee_email="asha.rao@example.com",
        department="Engineering",
        position="Software Engineer",
        effective_date=date(2026, 1, 1),
        basic_salary=Decimal("20000"),
        hra=Decimal("8000"),
        transport_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"),
        pf_employee=Decimal("1800"),
        pf_employer=Decimal("1800"),
        professional_tax=Decimal("200"),
    )


@pytest.fixture
def low_wage_structure() -> SalaryStructure:
    """Gross 14,500: ESI applies."""
    return SalaryStructure.create(
        id="ss-002",
        employee_id="emp-002",
        employee_name="Ravi Kumar",
        department="Operations",
        position="Associate",
        effective_date=date(2025, 6, 1),
        basic_salary=Decimal("10000"),
        hra=Decimal("3000"),
        transport_allowance=Decimal("1000"),
        medical_allowance=Decimal("500"),
    )
