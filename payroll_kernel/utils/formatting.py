"""INR display formatting (en-IN digit grouping, whole rupees)."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from payroll_kernel.domain.values import round_whole, to_decimal

RUPEE_SYMBOL = "₹"


def group_indian(digits: str) -> str:
    """
    Group a string of digits the Indian way.

    The last three digits form one group, every group before that has two:
    ``"1234567"`` -> ``"12,34,567"``.
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: Any, symbol: bool = True) -> str:
    """
    Format an amount as whole rupees with en-IN grouping.

    >>> format_inr(1234567)
    '₹12,34,567'
    >>> format_inr(Decimal("-999.5"), symbol=False)
    '-1,000'
    """
    value = round_whole(to_decimal(amount))
    negative = value < 0
    digits = str(abs(value).to_integral_value())
    text = group_indian(digits)
    if symbol:
        text = RUPEE_SYMBOL + text
    return f"-{text}" if negative else text
