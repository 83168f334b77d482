"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHERE EXCEPTIONS ARE RAISED
===============================================================================

The calculation engines never raise for business-rule violations: invalid
salary input is reported by ``validate_salary_input`` as a list of messages.
Exceptions belong to the layers around the engines:

  - The salary module refuses to generate a slip from invalid input and
    raises ``InvalidSalaryInputError`` carrying every validation message.
  - Structure lookup raises ``SalaryStructureNotFoundError``.
  - Slip lifecycle actions raise ``InvalidSlipTransitionError``.
  - The YAML defaults loader raises ``PayrollConfigError``.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- SalaryInputError
    |   +-- InvalidSalaryInputError
    |
    +-- SalaryStructureError
    |   +-- SalaryStructureNotFoundError
    |
    +-- SalarySlipError
    |   +-- InvalidSlipTransitionError
    |
    +-- PayrollConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_SALARY_INPUT        | Slip requested from input failing validation
----------------|-----------------------------|-----------------------------------------
Structure       | SALARY_STRUCTURE_NOT_FOUND  | No active structure effective for period
----------------|-----------------------------|-----------------------------------------
Slip            | INVALID_SLIP_TRANSITION     | Lifecycle action not allowed from status
----------------|-----------------------------|-----------------------------------------
Config          | PAYROLL_CONFIG_ERROR        | Defaults file has unknown/invalid values

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        slip = service.generate_slip(structures, employee_id, month, year)
    except InvalidSalaryInputError as e:
        return {"error": e.code, "errors": e.errors}
    except SalaryStructureNotFoundError as e:
        return {"error": e.code, "employee_id": e.employee_id}
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Salary input exceptions


class SalaryInputError(PayrollKernelError):
    """Base exception for salary calculation input errors."""

    code: str = "SALARY_INPUT_ERROR"


class InvalidSalaryInputError(SalaryInputError):
    """Salary input failed validation; carries every accumulated message."""

    code: str = "INVALID_SALARY_INPUT"

    def __init__(self, errors: list[str] | tuple[str, ...]):
        self.errors = list(errors)
        super().__init__(
            f"Invalid salary input: {'; '.join(self.errors)}"
        )


# Salary structure exceptions


class SalaryStructureError(PayrollKernelError):
    """Base exception for salary structure errors."""

    code: str = "SALARY_STRUCTURE_ERROR"


class SalaryStructureNotFoundError(SalaryStructureError):
    """No active salary structure is effective for the pay period."""

    code: str = "SALARY_STRUCTURE_NOT_FOUND"

    def __init__(self, employee_id: str, month: int, year: int):
        self.employee_id = employee_id
        self.month = month
        self.year = year
        super().__init__(
            f"No active salary structure for employee {employee_id} "
            f"effective in {year}-{month:02d}"
        )


# Salary slip exceptions


class SalarySlipError(PayrollKernelError):
    """Base exception for salary slip errors."""

    code: str = "SALARY_SLIP_ERROR"


class InvalidSlipTransitionError(SalarySlipError):
    """Lifecycle action is not permitted from the slip's current status."""

    code: str = "INVALID_SLIP_TRANSITION"

    def __init__(self, slip_status: str, action: str):
        self.slip_status = slip_status
        self.action = action
        super().__init__(
            f"Cannot '{action}' a salary slip in status '{slip_status}'"
        )


# Configuration exceptions


class PayrollConfigError(PayrollKernelError):
    """Payroll defaults file contains unknown keys or invalid values."""

    code: str = "PAYROLL_CONFIG_ERROR"

    def __init__(self, message: str, path: str | None = None, field_name: str | None = None):
        self.path = path
        self.field_name = field_name
        super().__init__(message)
