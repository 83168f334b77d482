"""Salary Slip Workflows.

State machine for the salary slip lifecycle.  Slips are generated in
``draft``; processing and payment are external workflow actions.
"""

from payroll_kernel.domain.workflow import Transition, Workflow
from payroll_kernel.logging_config import get_logger
from payroll_modules.salary.models import SalarySlipStatus

logger = get_logger("modules.salary.workflows")

_DRAFT = SalarySlipStatus.DRAFT.value
_PROCESSED = SalarySlipStatus.PROCESSED.value
_PAID = SalarySlipStatus.PAID.value
_CANCELLED = SalarySlipStatus.CANCELLED.value

SALARY_SLIP_WORKFLOW = Workflow(
    name="salary_slip",
    description="Salary slip lifecycle",
    initial_state=_DRAFT,
    states=(_DRAFT, _PROCESSED, _PAID, _CANCELLED),
    transitions=(
        Transition(_DRAFT, _PROCESSED, action="process"),
        Transition(_PROCESSED, _PAID, action="pay"),
        Transition(_DRAFT, _CANCELLED, action="cancel"),
        Transition(_PROCESSED, _CANCELLED, action="cancel"),
    ),
    terminal_states=(_PAID, _CANCELLED),
)

logger.debug(
    "salary_slip_workflow_registered",
    extra={
        "workflow_name": SALARY_SLIP_WORKFLOW.name,
        "states": list(SALARY_SLIP_WORKFLOW.states),
        "transition_count": len(SALARY_SLIP_WORKFLOW.transitions),
    },
)
