"""
Values -- Decimal coercion and whole-unit rounding for payroll amounts.

Responsibility:
    Every monetary figure in the payroll toolkit is a ``Decimal``.  This
    module is the single place where external numbers (ints, strings,
    floats from JSON/YAML) become Decimals, and where amounts are rounded
    to whole currency units.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Floats are converted through ``str`` so that 0.1 becomes
      ``Decimal("0.1")`` and not its binary expansion.
    - Rounding is half away from zero (``ROUND_HALF_UP`` in the decimal
      module) to an exponent of 0.

Failure modes:
    - ``TypeError`` for booleans and unsupported types.
    - ``ValueError`` for text that does not parse as a number.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

_WHOLE_UNIT = Decimal("1")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number-like value to ``Decimal``.

    Postconditions:
        - Returns a ``Decimal`` (possibly non-finite for "NaN"/"Infinity"
          input; rejecting those is the validator's job).
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not amounts")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def round_whole(value: Decimal) -> Decimal:
    """Round to whole currency units, half away from zero."""
    return value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)


def round_to(value: Decimal, places: int) -> Decimal:
    """Round to ``places`` decimal places, half away from zero."""
    return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)
