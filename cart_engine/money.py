"""Decimal helpers for integer-currency amounts (no minor units)."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, Decimal]


def discounted(amount: Number, rate: Decimal) -> Decimal:
    """amount * (1 - rate), unrounded."""
    return Decimal(amount) * (Decimal("1") - rate)


def round_half_up(value: Number) -> int:
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))
