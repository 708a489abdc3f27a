"""Organization-level risk register rollups for the dashboard.

Metrics are recomputed from the full risk list on every call; nothing is
cached between calls and the result depends only on ``risks`` and ``today``.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Sequence

from grc_metrics_cli.models.risks import (
    CategoryCount,
    LevelShare,
    RiskLevel,
    RiskMetrics,
    RiskRecord,
    TrendPoint,
)
from grc_metrics_cli.scoring.calculator import effective_score
from grc_metrics_cli.scoring.levels import classify_risk_level, is_above_tolerance
from grc_metrics_cli.scoring.lifecycle import is_accepted, is_active, is_mitigated, is_overdue
from grc_metrics_cli.scoring.rounding import mean, percentage

TREND_MONTHS = 12

CATEGORY_MAP: Dict[str, str] = {
    "Physical & Environmental Controls": "System Vulnerabilities",
    "Access Control": "Identity and Access",
    "Cryptography": "Data Breach",
    "Systems Security": "System Vulnerabilities",
    "Network Security Controls": "System Vulnerabilities",
    "Application & Interface Controls": "System Vulnerabilities",
    "Asset Management": "Supply Chain",
    "Human Resource Security": "Insider Threats",
    "Information Classification & Handling": "Data Breach",
    "Operations Security": "Non-compliance",
    "Communications Security": "System Vulnerabilities",
    "Incident Management": "Non-compliance",
    "Information Security Aspects of Business Continuity Management": "Non-compliance",
    "Compliance": "Non-compliance",
    "Supplier Relationships": "Supply Chain",
}

UNCATEGORIZED = "Other"

_LEVEL_ORDER = (
    RiskLevel.CRITICAL,
    RiskLevel.HIGH,
    RiskLevel.MEDIUM,
    RiskLevel.LOW,
    RiskLevel.VERY_LOW,
)


def compute_risk_metrics(
    risks: Sequence[RiskRecord],
    today: Optional[date] = None,
) -> RiskMetrics:
    total = len(risks)
    active_risks = [r for r in risks if is_active(r)]

    return RiskMetrics(
        active=len(active_risks),
        mitigated=percentage(sum(1 for r in risks if is_mitigated(r)), total),
        above_tolerance=percentage(
            sum(1 for r in risks if is_above_tolerance(effective_score(r))), total,
        ),
        accepted=percentage(sum(1 for r in risks if is_accepted(r)), total),
        overdue=sum(1 for r in risks if is_overdue(r)),
        average_risk_score_trend=average_score_trend(risks, today),
        risk_level_distribution=risk_level_distribution(active_risks),
        risk_category_distribution=risk_category_distribution(active_risks),
    )


def trailing_months(today: Optional[date] = None, count: int = TREND_MONTHS) -> List[date]:
    """First day of each of the last *count* months, oldest first, ending at *today*'s month."""
    anchor = today or date.today()
    index = anchor.year * 12 + anchor.month - 1
    months: List[date] = []
    for offset in range(count - 1, -1, -1):
        year, month = divmod(index - offset, 12)
        months.append(date(year, month + 1, 1))
    return months


def average_score_trend(
    risks: Sequence[RiskRecord],
    today: Optional[date] = None,
) -> List[TrendPoint]:
    trend: List[TrendPoint] = []
    for month in trailing_months(today):
        prefix = month.strftime("%Y-%m")
        scores = [effective_score(r) for r in risks if _created_in(r, prefix)]
        trend.append(TrendPoint(month=month, score=mean(scores, 1)))
    return trend


def risk_level_distribution(active_risks: Sequence[RiskRecord]) -> List[LevelShare]:
    counts = Counter(classify_risk_level(effective_score(r)) for r in active_risks)
    return [
        LevelShare(level=level, count=counts[level], percentage=percentage(counts[level], len(active_risks)))
        for level in _LEVEL_ORDER
        if counts[level] > 0
    ]


def canonical_category(asset_category: Optional[str]) -> str:
    if not asset_category:
        return UNCATEGORIZED
    return CATEGORY_MAP.get(asset_category, asset_category)


def risk_category_distribution(active_risks: Sequence[RiskRecord]) -> List[CategoryCount]:
    # Counter keeps first-seen order, so equal counts stay in input order.
    counts = Counter(canonical_category(r.asset_category) for r in active_risks)
    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return [CategoryCount(category=name, count=n) for name, n in ordered if n > 0]


def _created_in(risk: RiskRecord, month_prefix: str) -> bool:
    if not risk.created_at:
        return False
    return risk.created_at.startswith(month_prefix)
