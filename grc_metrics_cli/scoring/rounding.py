"""Half-up rounding shared by every score and percentage computation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence, Union

Number = Union[int, Decimal]


def round_half_up(value: Number, places: int = 0) -> Decimal:
    """Round *value* to *places* decimals, ties away from zero (3.5 -> 4)."""
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def percentage(count: int, total: int) -> int:
    """``round(100 * count / max(1, total))``; an empty population yields 0."""
    denominator = max(1, total)
    return int(round_half_up(Decimal(100 * count) / Decimal(denominator)))


def mean(values: Sequence[Decimal], places: int) -> Decimal:
    if not values:
        return round_half_up(0, places)
    return round_half_up(sum(values, Decimal(0)) / Decimal(len(values)), places)
