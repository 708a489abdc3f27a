from __future__ import annotations

from decimal import Decimal
from typing import Any

from grc_metrics_cli.exceptions import ValidationError
from grc_metrics_cli.scoring.rounding import round_half_up

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(name: str, value: Any) -> int:
    # bool is an int subclass but never a rating.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer between {MIN_RATING} and {MAX_RATING}.")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(
            f"{name} must be between {MIN_RATING} and {MAX_RATING}, got {value}."
        )
    return value


def aggregate_impact(confidentiality: int, integrity: int, availability: int) -> int:
    """Overall impact as the half-up rounded mean of the CIA ratings."""
    c = validate_rating("Confidentiality impact", confidentiality)
    i = validate_rating("Integrity impact", integrity)
    a = validate_rating("Availability impact", availability)

    impact = int(round_half_up(Decimal(c + i + a) / Decimal(3)))
    assert MIN_RATING <= impact <= MAX_RATING
    return impact
