"""
Payroll Engines - pure calculation engines for salary processing.

Every engine is a pure function (or a stateless class) with no I/O: rates,
structures and attendance arrive as parameters, results are frozen
dataclasses of ``Decimal`` amounts.

Engines:
    salary:       Validate input, prorate by attendance, PF/ESI, assemble a slip calculation
    income_tax:   Flat payroll income tax; old-regime slab tax-savings estimator
    compensation: Annual breakdown, increments, cost to company
    summary:      Filter and total lists of salary slips

Usage:
    from payroll_engines import SalaryCalculationInput, calculate_salary

    calculated = calculate_salary(SalaryCalculationInput(
        basic_salary=20000, working_days=22, present_days=20,
    ))
"""

from payroll_engines.compensation import (
    AnnualSalary,
    CostToCompany,
    CTCBreakdown,
    SalaryIncrement,
    calculate_annual_salary,
    calculate_ctc,
    calculate_increment,
)
from payroll_engines.income_tax import (
    STANDARD_DEDUCTION,
    TaxInvestments,
    TaxSavingsEstimate,
    calculate_payroll_income_tax,
    calculate_slab_tax,
    calculate_tax_savings,
)
from payroll_engines.salary import (
    DEFAULT_ESI_RATE,
    DEFAULT_INCOME_TAX_RATE,
    DEFAULT_PF_RATE,
    DEFAULT_PROFESSIONAL_TAX,
    ESI_EMPLOYER_RATE,
    ESI_GROSS_THRESHOLD,
    PF_WAGE_CEILING,
    CalculatedSalary,
    ProratedEarnings,
    SalaryCalculationInput,
    SalaryCalculator,
    ValidationResult,
    calculate_esi,
    calculate_provident_fund,
    calculate_salary,
    prorate_earnings,
    validate_salary_input,
)
from payroll_engines.summary import (
    SalaryFilter,
    SalarySummary,
    filter_slips,
    summarize_slips,
)

__all__ = [
    # Salary
    "CalculatedSalary",
    "ProratedEarnings",
    "SalaryCalculationInput",
    "SalaryCalculator",
    "ValidationResult",
    "calculate_esi",
    "calculate_provident_fund",
    "calculate_salary",
    "prorate_earnings",
    "validate_salary_input",
    "DEFAULT_ESI_RATE",
    "DEFAULT_INCOME_TAX_RATE",
    "DEFAULT_PF_RATE",
    "DEFAULT_PROFESSIONAL_TAX",
    "ESI_EMPLOYER_RATE",
    "ESI_GROSS_THRESHOLD",
    "PF_WAGE_CEILING",
    # Income tax
    "STANDARD_DEDUCTION",
    "TaxInvestments",
    "TaxSavingsEstimate",
    "calculate_payroll_income_tax",
    "calculate_slab_tax",
    "calculate_tax_savings",
    # Compensation
    "AnnualSalary",
    "CostToCompany",
    "CTCBreakdown",
    "SalaryIncrement",
    "calculate_annual_salary",
    "calculate_ctc",
    "calculate_increment",
    # Summary
    "SalaryFilter",
    "SalarySummary",
    "filter_slips",
    "summarize_slips",
]
