from __future__ import annotations

from decimal import Decimal
from typing import Tuple, Union

from grc_metrics_cli.models.risks import RiskLevel

# Inclusive lower bounds, checked in descending order.
LEVEL_THRESHOLDS: Tuple[Tuple[int, RiskLevel], ...] = (
    (20, RiskLevel.CRITICAL),
    (15, RiskLevel.HIGH),
    (10, RiskLevel.MEDIUM),
    (5, RiskLevel.LOW),
)

# Strictly greater than; not a level boundary.
TOLERANCE_THRESHOLD = 8

# Dashboard "high risks" card, inclusive.
HIGH_RISK_THRESHOLD = 15

Score = Union[int, float, Decimal]


def classify_risk_level(score: Score) -> RiskLevel:
    value = Decimal(str(score))
    for lower_bound, level in LEVEL_THRESHOLDS:
        if value >= lower_bound:
            return level
    return RiskLevel.VERY_LOW


def is_above_tolerance(score: Score) -> bool:
    return Decimal(str(score)) > TOLERANCE_THRESHOLD


def is_high_risk(score: Score) -> bool:
    return Decimal(str(score)) >= HIGH_RISK_THRESHOLD
