"""
Salary Summary Engine - aggregate totals over a list of salary slips.

Backs the admin salary dashboard: filter slips by period, department,
employee or status, then total gross / deductions / net and report the
average, highest and lowest net pay.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from payroll_kernel.domain.values import ZERO, round_whole
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.summary")


class SlipFigures(Protocol):
    employee_id: str
    department: str
    month: int
    year: int
    status: str
    gross_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class SalaryFilter:
    """Criteria for selecting slips; ``None`` means no constraint."""

    month: int | None = None
    year: int | None = None
    department: str | None = None
    employee_id: str | None = None
    status: str | None = None

    def matches(self, slip: SlipFigures) -> bool:
        if self.month is not None and slip.month != self.month:
            return False
        if self.year is not None and slip.year != self.year:
            return False
        if self.department is not None and slip.department != self.department:
            return False
        if self.employee_id is not None and slip.employee_id != self.employee_id:
            return False
        if self.status is not None and slip.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class SalarySummary:
    total_employees: int
    total_gross_salary: Decimal
    total_deductions: Decimal
    total_net_salary: Decimal
    average_salary: Decimal
    highest_salary: Decimal
    lowest_salary: Decimal


EMPTY_SUMMARY = SalarySummary(
    total_employees=0,
    total_gross_salary=ZERO,
    total_deductions=ZERO,
    total_net_salary=ZERO,
    average_salary=ZERO,
    highest_salary=ZERO,
    lowest_salary=ZERO,
)


def filter_slips(
    slips: Iterable[SlipFigures],
    salary_filter: SalaryFilter | None = None,
) -> list[SlipFigures]:
    """Slips matching ``salary_filter``, in input order."""
    if salary_filter is None:
        return list(slips)
    return [s for s in slips if salary_filter.matches(s)]


def summarize_slips(
    slips: Sequence[SlipFigures],
    salary_filter: SalaryFilter | None = None,
) -> SalarySummary:
    """
    Totals over the selected slips.

    ``total_employees`` counts distinct employees; ``average_salary`` is the
    mean net pay per slip rounded to whole units.  Highest and lowest are
    net pay.  An empty selection yields all zeros.
    """
    selected = filter_slips(slips, salary_filter)
    if not selected:
        return EMPTY_SUMMARY

    total_gross = sum((s.gross_earnings for s in selected), ZERO)
    total_deductions = sum((s.total_deductions for s in selected), ZERO)
    total_net = sum((s.net_salary for s in selected), ZERO)
    nets = [s.net_salary for s in selected]

    summary = SalarySummary(
        total_employees=len({s.employee_id for s in selected}),
        total_gross_salary=total_gross,
        total_deductions=total_deductions,
        total_net_salary=total_net,
        average_salary=round_whole(total_net / Decimal(len(selected))),
        highest_salary=max(nets),
        lowest_salary=min(nets),
    )

    logger.debug("salary_summary_computed", extra={
        "slip_count": len(selected),
        "total_employees": summary.total_employees,
        "total_net_salary": str(total_net),
    })
    return summary
