"""
Salary Slip Service (``payroll_modules.salary.service``).

Responsibility
--------------
Orchestrates slip generation: selects the effective structure, layers
company defaults and overrides, validates, runs the salary engine and
assembles a ``draft`` slip.  Also applies lifecycle actions to slips.

Architecture position
---------------------
**Modules layer** -- service facade.  Delegates arithmetic to
``payroll_engines.salary`` and record shaping to ``helpers``.  Performs
no persistence: callers store the returned slips and are responsible for
keeping at most one draft per employee and period.

Failure modes
-------------
* ``SalaryStructureNotFoundError`` -- no active structure effective for
  the period.
* ``InvalidSalaryInputError`` -- merged input fails validation; carries
  every message.  No slip is produced.
* ``InvalidSlipTransitionError`` -- lifecycle action not permitted.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date
from uuid import uuid4

from payroll_config.schema import PayrollDefaults
from payroll_engines.salary import (
    SalaryCalculationInput,
    SalaryCalculator,
    validate_salary_input,
)
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.exceptions import (
    InvalidSalaryInputError,
    InvalidSlipTransitionError,
    PayrollKernelError,
    SalaryStructureNotFoundError,
)
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_modules.salary.helpers import (
    build_calculation_values,
    build_salary_slip,
    select_effective_structure,
)
from payroll_modules.salary.models import (
    EmployeeBankDetails,
    SalarySlip,
    SalarySlipStatus,
    SalaryStructure,
    SlipOverrides,
)
from payroll_modules.salary.workflows import SALARY_SLIP_WORKFLOW

logger = get_logger("modules.salary.service")


@dataclass(frozen=True)
class BatchGenerationResult:
    """Slips generated for a batch plus the employees that failed."""
    slips: tuple[SalarySlip, ...]
    failures: Mapping[str, PayrollKernelError] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.slips)


class SalarySlipService:
    """
    Generate and advance salary slips.

    Stateless apart from injected defaults, calculator and clock; safe to
    share across concurrent callers.
    """

    def __init__(
        self,
        defaults: PayrollDefaults | None = None,
        calculator: SalaryCalculator | None = None,
        clock: Clock | None = None,
    ):
        self._defaults = defaults or PayrollDefaults()
        self._calculator = calculator or SalaryCalculator()
        self._clock = clock or SystemClock()

    @property
    def defaults(self) -> PayrollDefaults:
        return self._defaults

    def generate_slip(
        self,
        structures: Iterable[SalaryStructure],
        employee_id: str,
        month: int,
        year: int,
        overrides: SlipOverrides | None = None,
        bank_details: EmployeeBankDetails | None = None,
    ) -> SalarySlip:
        """
        Generate a draft slip using the employee's effective structure.

        Raises:
            SalaryStructureNotFoundError: no active structure for the period.
            InvalidSalaryInputError: merged input fails validation.
        """
        structure = select_effective_structure(structures, employee_id, month, year)
        if structure is None:
            logger.warning("salary_structure_not_found", extra={
                "employee_id": employee_id,
                "month": month,
                "year": year,
            })
            raise SalaryStructureNotFoundError(employee_id, month, year)
        return self.generate_slip_from_structure(
            structure, month, year, overrides=overrides, bank_details=bank_details,
        )

    def generate_slip_from_structure(
        self,
        structure: SalaryStructure,
        month: int,
        year: int,
        overrides: SlipOverrides | None = None,
        bank_details: EmployeeBankDetails | None = None,
    ) -> SalarySlip:
        """
        Generate a draft slip from a given structure.

        Raises:
            InvalidSalaryInputError: merged input fails validation.
        """
        t0 = time.monotonic()
        with LogContext.bind(
            employee_id=structure.employee_id,
            pay_period=f"{year}-{month:02d}",
        ):
            values = build_calculation_values(
                structure, overrides or SlipOverrides(), self._defaults,
            )
            validation = validate_salary_input(values)
            if not validation.is_valid:
                logger.warning("salary_slip_rejected", extra={
                    "structure_id": structure.id,
                    "errors": list(validation.errors),
                })
                raise InvalidSalaryInputError(validation.errors)

            calculated = self._calculator.calculate(SalaryCalculationInput(**values))
            slip = build_salary_slip(
                structure,
                month,
                year,
                values,
                calculated,
                bank_details=bank_details,
                generated_at=self._clock.now(),
            )

            logger.info("salary_slip_generated", extra={
                "slip_id": str(slip.id),
                "structure_id": structure.id,
                "gross_earnings": str(slip.gross_earnings),
                "net_salary": str(slip.net_salary),
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
            return slip

    def generate_batch(
        self,
        structures: Sequence[SalaryStructure],
        employee_ids: Iterable[str],
        month: int,
        year: int,
        overrides: Mapping[str, SlipOverrides] | None = None,
        bank_details: Mapping[str, EmployeeBankDetails] | None = None,
    ) -> BatchGenerationResult:
        """
        Generate one draft slip per distinct employee.

        A failure for one employee is recorded and does not stop the
        batch.  Duplicate employee ids are generated once.
        """
        overrides = overrides or {}
        bank_details = bank_details or {}
        slips: list[SalarySlip] = []
        failures: dict[str, PayrollKernelError] = {}
        seen: set[str] = set()

        # One correlation id ties every slip log line to its batch.
        with LogContext.bind(correlation_id=str(uuid4())):
            for employee_id in employee_ids:
                if employee_id in seen:
                    continue
                seen.add(employee_id)
                try:
                    slips.append(self.generate_slip(
                        structures,
                        employee_id,
                        month,
                        year,
                        overrides=overrides.get(employee_id),
                        bank_details=bank_details.get(employee_id),
                    ))
                except (SalaryStructureNotFoundError, InvalidSalaryInputError) as exc:
                    failures[employee_id] = exc

            logger.info("salary_batch_generated", extra={
                "month": month,
                "year": year,
                "succeeded": len(slips),
                "failed": len(failures),
            })
        return BatchGenerationResult(slips=tuple(slips), failures=failures)

    def transition(
        self,
        slip: SalarySlip,
        action: str,
        on_date: date | None = None,
    ) -> SalarySlip:
        """
        Apply a lifecycle action and return the updated slip.

        ``pay`` stamps ``paid_date`` (``on_date`` or today's date from the
        clock).

        Raises:
            InvalidSlipTransitionError: no such action from the slip's status.
        """
        current = slip.status.value
        t = SALARY_SLIP_WORKFLOW.find_transition(current, action)
        if t is None:
            logger.warning("salary_slip_transition_rejected", extra={
                "slip_id": str(slip.id),
                "status": current,
                "action": action,
                "allowed_actions": list(SALARY_SLIP_WORKFLOW.actions_from(current)),
            })
            raise InvalidSlipTransitionError(current, action)

        changes: dict = {"status": SalarySlipStatus(t.to_state)}
        if t.to_state == SalarySlipStatus.PAID.value:
            changes["paid_date"] = on_date or self._clock.today()

        updated = replace(slip, **changes)
        logger.info("salary_slip_transitioned", extra={
            "slip_id": str(slip.id),
            "employee_id": slip.employee_id,
            "from_status": current,
            "to_status": t.to_state,
            "action": action,
        })
        return updated
