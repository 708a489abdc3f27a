from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from grc_metrics_cli.models.risks import (
    CategoryCount,
    RiskLevel,
    RiskRecord,
    RiskResponseStrategy,
    RiskStatus,
)
from grc_metrics_cli.scoring.metrics import (
    CATEGORY_MAP,
    canonical_category,
    compute_risk_metrics,
    trailing_months,
)

_TODAY = date(2024, 6, 15)


def _risk(
    risk_id: str = "r",
    score: Optional[str] = "9",
    status: Optional[RiskStatus] = RiskStatus.IDENTIFIED,
    strategy: Optional[RiskResponseStrategy] = None,
    overdue: Optional[str] = None,
    category: Optional[str] = None,
    created_at: Optional[str] = None,
) -> RiskRecord:
    return RiskRecord(
        id=risk_id,
        confidentiality_impact=3,
        integrity_impact=3,
        availability_impact=3,
        impact=3,
        likelihood=3,
        risk_score=Decimal(score) if score is not None else None,
        status=status,
        risk_response_strategy=strategy,
        overdue=overdue,
        asset_category=category,
        created_at=created_at,
    )


class TestEmptyRegister:
    def test_all_zero(self) -> None:
        metrics = compute_risk_metrics([], today=_TODAY)

        assert metrics.active == 0
        assert metrics.mitigated == 0
        assert metrics.above_tolerance == 0
        assert metrics.accepted == 0
        assert metrics.overdue == 0
        assert metrics.risk_level_distribution == []
        assert metrics.risk_category_distribution == []

    def test_trend_has_twelve_zero_months(self) -> None:
        trend = compute_risk_metrics([], today=_TODAY).average_risk_score_trend
        assert len(trend) == 12
        assert all(point.score == 0 for point in trend)


class TestHeadlineCounts:
    def test_active_excludes_closed(self) -> None:
        risks = [_risk(status=RiskStatus.CLOSED), _risk(), _risk(status=RiskStatus.ARCHIVED)]
        assert compute_risk_metrics(risks, today=_TODAY).active == 2

    def test_mitigated_percentage_uses_all_risks(self) -> None:
        risks = [
            _risk(f"m{i}", status=RiskStatus.MONITORING, strategy=RiskResponseStrategy.MITIGATE)
            for i in range(3)
        ] + [_risk(f"o{i}") for i in range(7)]

        assert compute_risk_metrics(risks, today=_TODAY).mitigated == 30

    def test_accepted_percentage(self) -> None:
        risks = [
            _risk("a", status=RiskStatus.CLOSED, strategy=RiskResponseStrategy.ACCEPT),
            _risk("b", status=RiskStatus.IN_PROGRESS, strategy=RiskResponseStrategy.ACCEPT),
            _risk("c"),
        ]
        assert compute_risk_metrics(risks, today=_TODAY).accepted == 33

    def test_above_tolerance_is_strict(self) -> None:
        risks = [_risk(score="9"), _risk(score="8"), _risk(score="20"), _risk(score="4")]
        assert compute_risk_metrics(risks, today=_TODAY).above_tolerance == 50

    def test_overdue_is_a_count(self) -> None:
        risks = [
            _risk("a", status=RiskStatus.IN_PROGRESS, overdue="2024-01-01"),
            _risk("b", status=RiskStatus.CLOSED, overdue="2024-01-01"),
            _risk("c", overdue="Missing Risk Due Date"),
            _risk("d", overdue="  "),
        ]
        assert compute_risk_metrics(risks, today=_TODAY).overdue == 2


class TestTrend:
    def test_months_oldest_first(self) -> None:
        months = trailing_months(_TODAY)
        assert months[0] == date(2023, 7, 1)
        assert months[-1] == date(2024, 6, 1)
        assert months == sorted(months)

    def test_months_cross_year_boundary(self) -> None:
        months = trailing_months(date(2024, 1, 31))
        assert months[0] == date(2023, 2, 1)
        assert months[-2] == date(2023, 12, 1)
        assert months[-1] == date(2024, 1, 1)

    def test_monthly_average(self) -> None:
        risks = [
            _risk("a", score="20", created_at="2024-06-03T10:00:00Z"),
            _risk("b", score="9", created_at="2024-06-20T10:00:00Z"),
            _risk("c", score="12", created_at="2024-05-31T23:00:00Z"),
            _risk("d", score="25", created_at="2022-06-01T00:00:00Z"),
            _risk("e", score="25", created_at=None),
        ]
        trend = compute_risk_metrics(risks, today=_TODAY).average_risk_score_trend
        by_month = {p.month: p.score for p in trend}

        assert by_month[date(2024, 6, 1)] == Decimal("14.5")
        assert by_month[date(2024, 5, 1)] == Decimal("12.0")
        assert by_month[date(2024, 4, 1)] == 0

    def test_average_rounded_to_one_decimal(self) -> None:
        risks = [
            _risk("a", score="10", created_at="2024-03-01"),
            _risk("b", score="10", created_at="2024-03-02"),
            _risk("c", score="11", created_at="2024-03-03"),
        ]
        trend = compute_risk_metrics(risks, today=_TODAY).average_risk_score_trend
        assert [p.score for p in trend if p.month == date(2024, 3, 1)] == [Decimal("10.3")]

    def test_closed_risks_still_in_trend(self) -> None:
        risks = [_risk(score="16", status=RiskStatus.CLOSED, created_at="2024-06-01")]
        trend = compute_risk_metrics(risks, today=_TODAY).average_risk_score_trend
        assert trend[-1].score == Decimal("16.0")


class TestLevelDistribution:
    def test_active_only_and_sparse(self) -> None:
        risks = [
            _risk("a", score="20"),
            _risk("b", score="25"),
            _risk("c", score="6"),
            _risk("d", score="25", status=RiskStatus.CLOSED),
        ]
        shares = compute_risk_metrics(risks, today=_TODAY).risk_level_distribution

        assert [(s.level, s.count, s.percentage) for s in shares] == [
            (RiskLevel.CRITICAL, 2, 67),
            (RiskLevel.LOW, 1, 33),
        ]

    def test_severity_order(self) -> None:
        risks = [_risk("a", score="2"), _risk("b", score="12"), _risk("c", score="16")]
        shares = compute_risk_metrics(risks, today=_TODAY).risk_level_distribution
        assert [s.level for s in shares] == [RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.VERY_LOW]


class TestCategoryDistribution:
    def test_mapping_passthrough_and_other(self) -> None:
        risks: List[RiskRecord] = (
            [_risk(f"u{i}", category="Unknown Thing") for i in range(2)]
            + [_risk("n", category=None)]
            + [_risk(f"a{i}", category="Access Control") for i in range(3)]
        )
        dist = compute_risk_metrics(risks, today=_TODAY).risk_category_distribution

        assert dist == [
            CategoryCount(category="Identity and Access", count=3),
            CategoryCount(category="Unknown Thing", count=2),
            CategoryCount(category="Other", count=1),
        ]

    def test_categories_merge_into_buckets(self) -> None:
        risks = [
            _risk("a", category="Cryptography"),
            _risk("b", category="Information Classification & Handling"),
            _risk("c", category="Compliance"),
        ]
        dist = compute_risk_metrics(risks, today=_TODAY).risk_category_distribution
        assert dist[0] == CategoryCount(category="Data Breach", count=2)

    def test_closed_risks_excluded(self) -> None:
        risks = [_risk("a", category="Compliance", status=RiskStatus.CLOSED)]
        assert compute_risk_metrics(risks, today=_TODAY).risk_category_distribution == []

    def test_ties_keep_first_seen_order(self) -> None:
        risks = [_risk("a", category="Zeta"), _risk("b", category="Alpha")]
        dist = compute_risk_metrics(risks, today=_TODAY).risk_category_distribution
        assert [c.category for c in dist] == ["Zeta", "Alpha"]

    def test_canonical_category(self) -> None:
        assert canonical_category("") == "Other"
        assert canonical_category("Supplier Relationships") == "Supply Chain"
        assert len(CATEGORY_MAP) == 15
        assert len(set(CATEGORY_MAP.values())) == 6


class TestRobustness:
    def test_same_input_same_output(self) -> None:
        risks = [
            _risk("a", score="20", category="Access Control", created_at="2024-06-01"),
            _risk("b", score="3", status=RiskStatus.CLOSED, strategy=RiskResponseStrategy.ACCEPT),
            _risk("c", score="12", overdue="Overdue", category="Other Stuff"),
        ]
        first = compute_risk_metrics(risks, today=_TODAY)
        second = compute_risk_metrics(risks, today=_TODAY)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_malformed_record_does_not_abort(self) -> None:
        broken = RiskRecord(
            id="broken",
            confidentiality_impact=0,
            integrity_impact=0,
            availability_impact=0,
            impact=0,
            likelihood=0,
            status=None,
        )
        metrics = compute_risk_metrics([broken, _risk("ok", score="20")], today=_TODAY)

        assert metrics.active == 2
        levels = {s.level: s.count for s in metrics.risk_level_distribution}
        assert levels == {RiskLevel.CRITICAL: 1, RiskLevel.VERY_LOW: 1}

    def test_to_dict_shape(self) -> None:
        risks = [_risk("a", score="20", category="Access Control", created_at="2024-06-02")]
        data = compute_risk_metrics(risks, today=_TODAY).to_dict()

        assert list(data) == [
            "active",
            "mitigated",
            "aboveTolerance",
            "accepted",
            "overdue",
            "averageRiskScoreTrend",
            "riskLevelDistribution",
            "riskCategoryDistribution",
        ]
        assert data["averageRiskScoreTrend"][-1] == {"month": "2024-06-01", "score": 20.0}
        assert data["averageRiskScoreTrend"][0] == {"month": "2023-07-01", "score": 0.0}
        assert data["riskLevelDistribution"] == [
            {"level": "Critical", "count": 1, "percentage": 100},
        ]
        assert data["riskCategoryDistribution"] == [
            {"category": "Identity and Access", "count": 1},
        ]
