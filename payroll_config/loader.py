"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a company payroll defaults YAML file and parses it into a frozen
``PayrollDefaults`` instance.

Expected layout::

    company:
      name: Example Technologies Pvt Ltd
      registration_number: U72200TG2014PTC000000
      address_lines:
        - Plot 8, Road 2
        - Hyderabad, Telangana-500088
      location: Hyderabad
    rates:
      pf_rate: 0.12
      esi_rate: 0.0075
      professional_tax: 200
      income_tax_rate: 0.10
    slip_defaults:
      working_days: 22
      overtime_rate: 500

Every section and key is optional; omitted values keep the engine
defaults.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown section/key or invalid value  -> ``PayrollConfigError`` with
  ``path`` and ``field_name`` set.

Audit relevance
---------------
``compute_checksum`` gives a deterministic SHA-256 of the parsed content
so the defaults in force for a payroll run can be pinned and compared.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import CompanyProfile, PayrollDefaults
from payroll_kernel.domain.values import to_decimal
from payroll_kernel.exceptions import PayrollConfigError
from payroll_kernel.logging_config import get_logger

logger = get_logger("config.loader")

_SECTIONS = {"company", "rates", "slip_defaults"}
_COMPANY_KEYS = {"name", "registration_number", "address_lines", "location"}
_RATE_KEYS = {"pf_rate", "esi_rate", "professional_tax", "income_tax_rate"}
_SLIP_DEFAULT_KEYS = {"working_days": "default_working_days", "overtime_rate": "default_overtime_rate"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML document is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        PayrollConfigError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayrollConfigError(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}",
            path=str(path),
        )
    return data


def _section(data: dict[str, Any], name: str, allowed: set[str] | dict[str, str]) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise PayrollConfigError(f"Section '{name}' must be a mapping", field_name=name)
    unknown = set(section) - set(allowed)
    if unknown:
        raise PayrollConfigError(
            f"Unknown key(s) in '{name}': {', '.join(sorted(unknown))}",
            field_name=f"{name}.{sorted(unknown)[0]}",
        )
    return section


def _decimal_field(section: str, key: str, value: Any):
    try:
        return to_decimal(value)
    except (TypeError, ValueError) as exc:
        raise PayrollConfigError(
            f"{section}.{key} must be a number, got {value!r}",
            field_name=f"{section}.{key}",
        ) from exc


def parse_payroll_defaults(data: dict[str, Any]) -> PayrollDefaults:
    """
    Build ``PayrollDefaults`` from a parsed YAML mapping.

    Raises:
        PayrollConfigError: unknown sections/keys or invalid values.
    """
    unknown = set(data) - _SECTIONS
    if unknown:
        raise PayrollConfigError(
            f"Unknown section(s): {', '.join(sorted(unknown))}",
            field_name=sorted(unknown)[0],
        )

    company_data = _section(data, "company", _COMPANY_KEYS)
    rates = _section(data, "rates", _RATE_KEYS)
    slip_defaults = _section(data, "slip_defaults", _SLIP_DEFAULT_KEYS)

    address_lines = company_data.get("address_lines") or ()
    if isinstance(address_lines, str):
        address_lines = (address_lines,)
    company = CompanyProfile(
        name=str(company_data.get("name", "")),
        registration_number=str(company_data.get("registration_number", "")),
        address_lines=tuple(str(line) for line in address_lines),
        location=str(company_data.get("location", "")),
    )

    kwargs: dict[str, Any] = {"company": company}
    for key, value in rates.items():
        kwargs[key] = _decimal_field("rates", key, value)
    for key, value in slip_defaults.items():
        target = _SLIP_DEFAULT_KEYS[key]
        if key == "working_days":
            if isinstance(value, bool) or not isinstance(value, int):
                raise PayrollConfigError(
                    f"slip_defaults.working_days must be an integer, got {value!r}",
                    field_name="slip_defaults.working_days",
                )
            kwargs[target] = value
        else:
            kwargs[target] = _decimal_field("slip_defaults", key, value)

    return PayrollDefaults(**kwargs)


def load_payroll_defaults(path: Path) -> PayrollDefaults:
    """
    Load and parse a payroll defaults file.

    Raises:
        FileNotFoundError, yaml.YAMLError, PayrollConfigError
    """
    path = Path(path)
    data = load_yaml_file(path)
    try:
        defaults = parse_payroll_defaults(data)
    except PayrollConfigError as exc:
        logger.error("payroll_defaults_invalid", extra={
            "path": str(path),
            "field_name": exc.field_name,
            "reason": str(exc),
        })
        raise PayrollConfigError(str(exc), path=str(path), field_name=exc.field_name) from exc

    logger.info("payroll_defaults_loaded", extra={
        "path": str(path),
        "checksum": compute_checksum(data),
        "pf_rate": str(defaults.pf_rate),
        "esi_rate": str(defaults.esi_rate),
        "income_tax_rate": str(defaults.income_tax_rate),
    })
    return defaults


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a parsed configuration mapping."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
