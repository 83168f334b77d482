#!/usr/bin/env python3
"""
Generate a draft salary slip from a YAML description and print it as JSON.

Input file layout:

    month: 3
    year: 2026
    structure:
      id: ss-001
      employee_id: emp-001
      employee_name: Asha Rao
      effective_date: 2026-01-01
      basic_salary: 20000
      hra: 8000
      transport_allowance: 1600
      medical_allowance: 1250
    overrides:            # optional
      present_days: 20
      overtime_hours: 4
    bank_details:         # optional
      pan_number: ABCDE1234F

Usage:
    python3 scripts/generate_slip.py --input slip.yaml
    python3 scripts/generate_slip.py --input slip.yaml --defaults company.yaml --month 4 --year 2026

Exit codes: 0 on success, 2 when the input is rejected (every error is
printed to stderr), 1 when no structure applies.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

import yaml

from payroll_config import get_active_defaults
from payroll_config.loader import load_yaml_file
from payroll_kernel.exceptions import (
    InvalidSalaryInputError,
    PayrollConfigError,
    SalaryStructureNotFoundError,
)
from payroll_kernel.logging_config import configure_logging
from payroll_modules.salary import (
    EmployeeBankDetails,
    SalarySlip,
    SalarySlipService,
    SalaryStructure,
    SlipOverrides,
)


def slip_to_dict(slip: SalarySlip) -> dict:
    """JSON-ready representation (Decimals, dates and UUIDs as strings)."""
    return json.loads(json.dumps(asdict(slip), default=str))


def _as_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def build_records(data: dict) -> tuple[SalaryStructure, SlipOverrides, EmployeeBankDetails]:
    """
    Turn the parsed input document into engine-facing records.

    Raises:
        KeyError: the ``structure`` section is missing.
        TypeError: unknown or missing fields, or a section is not a mapping.
        ValueError: a value does not parse (amount, date, status).
    """
    structure = SalaryStructure.create(**data["structure"])
    overrides = SlipOverrides(**(data.get("overrides") or {}))
    bank_details = EmployeeBankDetails(**(data.get("bank_details") or {}))
    return structure, overrides, bank_details


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a draft salary slip")
    parser.add_argument("--input", required=True, type=Path,
                        help="YAML file with structure, overrides and bank details")
    parser.add_argument("--defaults", type=Path, default=None,
                        help="Company payroll defaults YAML (packaged defaults if omitted)")
    parser.add_argument("--month", type=int, default=None, help="Pay month 1-12")
    parser.add_argument("--year", type=int, default=None, help="Pay year")
    parser.add_argument("--verbose", action="store_true", help="Log engine events to stderr")
    args = parser.parse_args(argv)

    configure_logging(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        data = load_yaml_file(args.input)
    except (OSError, yaml.YAMLError, PayrollConfigError) as exc:
        print(f"error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    month = _as_int(args.month if args.month is not None else data.get("month"))
    year = _as_int(args.year if args.year is not None else data.get("year"))
    if month is None or year is None:
        parser.error("month and year are required integers (in the file or as options)")
    if not 1 <= month <= 12:
        parser.error(f"month must be between 1 and 12, got {month}")

    try:
        structure, overrides, bank_details = build_records(data)
    except KeyError as exc:
        print(f"error: missing section {exc}", file=sys.stderr)
        return 2
    except (TypeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        defaults = get_active_defaults(args.defaults)
    except (OSError, yaml.YAMLError, PayrollConfigError) as exc:
        print(f"error: cannot load defaults: {exc}", file=sys.stderr)
        return 2

    service = SalarySlipService(defaults=defaults)
    try:
        slip = service.generate_slip(
            [structure],
            structure.employee_id,
            month,
            year,
            overrides=overrides,
            bank_details=bank_details,
        )
    except InvalidSalaryInputError as exc:
        for message in exc.errors:
            print(f"error: {message}", file=sys.stderr)
        return 2
    except SalaryStructureNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(slip_to_dict(slip), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
