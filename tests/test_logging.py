"""Tests for payroll log records: context fields, exception fields, typed values."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from payroll_kernel.exceptions import InvalidSalaryInputError, SalaryStructureNotFoundError
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def stream() -> StringIO:
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler)
    return buffer


def _records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestPayrollRecords:
    """Fields the formatter adds for payroll events."""

    def test_slip_context_fields(self, stream):
        with LogContext.bind(employee_id="emp-001", pay_period="2026-03"):
            get_logger("modules.salary").info("salary_slip_generated")
        get_logger("modules.salary").info("after_slip")

        inside, after = _records(stream)
        assert inside["employee_id"] == "emp-001"
        assert inside["pay_period"] == "2026-03"
        assert "correlation_id" not in inside
        assert "employee_id" not in after
        assert "pay_period" not in after

    def test_structure_not_found_fields(self, stream):
        try:
            raise SalaryStructureNotFoundError("emp-001", 3, 2026)
        except SalaryStructureNotFoundError:
            get_logger("modules.salary").error("structure_error", exc_info=True)

        (record,) = _records(stream)
        assert record["exc_code"] == "SALARY_STRUCTURE_NOT_FOUND"
        assert record["exc_employee_id"] == "emp-001"
        assert record["exc_month"] == 3
        assert record["exc_year"] == 2026

    def test_rejected_input_lists_errors(self, stream):
        try:
            raise InvalidSalaryInputError(["Basic salary is required"])
        except InvalidSalaryInputError:
            get_logger("modules.salary").warning("rejected", exc_info=True)

        (record,) = _records(stream)
        assert record["exc_code"] == "INVALID_SALARY_INPUT"
        assert record["exc_errors"] == ["Basic salary is required"]

    def test_slip_values_serialized(self, stream):
        slip_id = uuid4()
        get_logger("modules.salary").info("typed", extra={
            "slip_id": slip_id,
            "net_salary": Decimal("28850"),
            "paid_date": date(2026, 3, 31),
        })

        (record,) = _records(stream)
        assert record["slip_id"] == str(slip_id)
        assert record["net_salary"] == "28850"
        assert record["paid_date"] == "2026-03-31"

    def test_logger_namespace(self):
        assert get_logger("engines.salary").name == "payroll_kernel.engines.salary"


class TestLogContext:
    """Only the payroll context fields are accepted."""

    @pytest.mark.parametrize("field", ["actor_id", "trace_id", "employee"])
    def test_unknown_field_rejected(self, field):
        with pytest.raises(TypeError, match=field):
            LogContext.set(**{field: "x"})
        with pytest.raises(TypeError, match=field):
            with LogContext.bind(**{field: "x"}):
                pass
        assert LogContext.get_all() == {}

    def test_bind_restores_on_error(self):
        LogContext.set(correlation_id="batch-1")
        with pytest.raises(RuntimeError):
            with LogContext.bind(employee_id="emp-001", pay_period="2026-03"):
                raise RuntimeError("fail")
        assert LogContext.get_all() == {"correlation_id": "batch-1"}
