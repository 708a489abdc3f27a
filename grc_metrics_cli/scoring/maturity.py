from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from grc_metrics_cli.models.assessments import CategoryMaturity, MaturityItem, MaturitySummary
from grc_metrics_cli.scoring.rounding import mean

MATURITY_SCORES: Dict[str, int] = {
    "0": 0,
    "1": 1,
    "2": 2,
    "3": 3,
    "4": 4,
    "5": 5,
    "NA": 0,
}

MATURITY_LABELS: Dict[str, str] = {
    "0": "0 - No",
    "1": "1 - Yes, but ad hoc",
    "2": "2 - Yes, documented but inconsistent",
    "3": "3 - Yes, consistent but no metrics",
    "4": "4 - Yes, measured & managed",
    "5": "5 - Yes, optimizing & continually improved",
    "NA": "NA - Not Applicable",
}


def maturity_score(level: Optional[str]) -> int:
    if level is None:
        return 0
    return MATURITY_SCORES.get(level.strip(), 0)


def maturity_label(level: str) -> str:
    return MATURITY_LABELS.get(level.strip(), level)


def compute_maturity_summary(items: Sequence[MaturityItem]) -> MaturitySummary:
    current = mean([Decimal(maturity_score(i.current_level)) for i in items], 2)
    target = mean([Decimal(maturity_score(i.target_level)) for i in items], 2)

    by_category: Dict[str, List[MaturityItem]] = {}
    for item in items:
        by_category.setdefault(item.category, []).append(item)

    categories = [
        CategoryMaturity(
            category=name,
            current_score=mean([Decimal(maturity_score(i.current_level)) for i in members], 2),
            target_score=mean([Decimal(maturity_score(i.target_level)) for i in members], 2),
        )
        for name, members in by_category.items()
    ]

    under_target = [
        i for i in items
        if maturity_score(i.current_level) < maturity_score(i.target_level)
    ]

    return MaturitySummary(
        current_score=current,
        target_score=target,
        gap=target - current,
        categories=categories,
        under_target=under_target,
    )
