"""
Compensation Engine - figures derived from a finalized salary structure.

Read-only transforms: annual extrapolation, increments and cost to company.
Pure functions with no I/O.  Accepts any object exposing the monthly
figures (``SalaryStructure`` satisfies the protocols below).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from payroll_kernel.domain.values import HUNDRED, round_whole, to_decimal
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.compensation")

MONTHS_PER_YEAR = Decimal("12")

# Employer-side costs as fixed fractions of monthly gross
GRATUITY_RATE = Decimal("0.0481")
ANNUAL_BONUS_RATE = Decimal("0.0833")
OTHER_BENEFITS_RATE = Decimal("0.02")


class MonthlyFigures(Protocol):
    gross_salary: Decimal
    net_salary: Decimal
    total_deductions: Decimal


class EmployerFigures(Protocol):
    gross_salary: Decimal
    pf_employer: Decimal
    esi_employer: Decimal


@dataclass(frozen=True)
class AnnualSalary:
    """Monthly figures extrapolated linearly over twelve months."""

    annual_gross: Decimal
    annual_net: Decimal
    annual_deductions: Decimal
    monthly_average: Decimal


@dataclass(frozen=True)
class SalaryIncrement:
    new_salary: Decimal
    increment_amount: Decimal


@dataclass(frozen=True)
class CTCBreakdown:
    gross_salary: Decimal
    pf_employer: Decimal
    esi_employer: Decimal
    gratuity: Decimal
    bonus: Decimal
    other: Decimal


@dataclass(frozen=True)
class CostToCompany:
    """Monthly cost to company split into employee and employer parts."""

    ctc: Decimal
    employee_components: Decimal
    employer_components: Decimal
    breakdown: CTCBreakdown


def calculate_annual_salary(structure: MonthlyFigures) -> AnnualSalary:
    """Annual breakdown; does not account for mid-year revisions."""
    return AnnualSalary(
        annual_gross=structure.gross_salary * MONTHS_PER_YEAR,
        annual_net=structure.net_salary * MONTHS_PER_YEAR,
        annual_deductions=structure.total_deductions * MONTHS_PER_YEAR,
        monthly_average=structure.net_salary,
    )


def calculate_increment(current_salary: Decimal, increment_percentage: Decimal) -> SalaryIncrement:
    """
    Apply a percentage raise.

    Postconditions:
        - ``new_salary - current_salary == increment_amount``.
    """
    current_salary = to_decimal(current_salary)
    increment_percentage = to_decimal(increment_percentage)
    increment_amount = round_whole(current_salary * (increment_percentage / HUNDRED))
    return SalaryIncrement(
        new_salary=current_salary + increment_amount,
        increment_amount=increment_amount,
    )


def calculate_ctc(structure: EmployerFigures) -> CostToCompany:
    """
    Cost to company for one month.

    Gratuity (4.81%), annual bonus provision (8.33%) and other benefits
    (2%) are fixed percentages of gross, each rounded separately.
    """
    gross = structure.gross_salary
    gratuity = round_whole(gross * GRATUITY_RATE)
    bonus = round_whole(gross * ANNUAL_BONUS_RATE)
    other = round_whole(gross * OTHER_BENEFITS_RATE)

    employer_components = (
        structure.pf_employer + structure.esi_employer + gratuity + bonus + other
    )
    result = CostToCompany(
        ctc=gross + employer_components,
        employee_components=gross,
        employer_components=employer_components,
        breakdown=CTCBreakdown(
            gross_salary=gross,
            pf_employer=structure.pf_employer,
            esi_employer=structure.esi_employer,
            gratuity=gratuity,
            bonus=bonus,
            other=other,
        ),
    )

    logger.debug("ctc_calculated", extra={
        "gross_salary": str(gross),
        "employer_components": str(employer_components),
        "ctc": str(result.ctc),
    })
    return result
