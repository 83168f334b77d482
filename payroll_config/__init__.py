"""
payroll_config: company payroll defaults.

``get_active_defaults()`` is the entry point: it loads the YAML file at
the given path, or the packaged ``defaults.yaml`` when no path is given,
and returns a frozen ``PayrollDefaults``.
"""

from __future__ import annotations

from pathlib import Path

from payroll_config.loader import compute_checksum, load_payroll_defaults, parse_payroll_defaults
from payroll_config.schema import CompanyProfile, PayrollDefaults

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_defaults(path: Path | str | None = None) -> PayrollDefaults:
    """Load payroll defaults from ``path`` (packaged defaults when None)."""
    return load_payroll_defaults(Path(path) if path is not None else DEFAULT_CONFIG_PATH)


__all__ = [
    "CompanyProfile",
    "DEFAULT_CONFIG_PATH",
    "PayrollDefaults",
    "compute_checksum",
    "get_active_defaults",
    "load_payroll_defaults",
    "parse_payroll_defaults",
]
