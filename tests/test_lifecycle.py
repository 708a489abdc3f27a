from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from grc_metrics_cli.models.risks import RiskRecord, RiskResponseStrategy, RiskStatus
from grc_metrics_cli.scoring.lifecycle import (
    STATUS_PHASES,
    StatusPhase,
    derive_overdue_marker,
    is_accepted,
    is_active,
    is_mitigated,
    is_overdue,
    status_phase,
)


def _risk(
    status: Optional[RiskStatus] = RiskStatus.IDENTIFIED,
    strategy: Optional[RiskResponseStrategy] = None,
    overdue: Optional[str] = None,
) -> RiskRecord:
    return RiskRecord(
        id="r1",
        confidentiality_impact=3,
        integrity_impact=3,
        availability_impact=3,
        impact=3,
        likelihood=3,
        status=status,
        risk_response_strategy=strategy,
        overdue=overdue,
    )


class TestStatusPhases:
    def test_every_status_has_a_phase(self) -> None:
        assert set(STATUS_PHASES) == set(RiskStatus)

    def test_only_closed_is_closed(self) -> None:
        closed = [s for s, phase in STATUS_PHASES.items() if phase is StatusPhase.CLOSED]
        assert closed == [RiskStatus.CLOSED]

    @pytest.mark.parametrize("status", [RiskStatus.PENDING, RiskStatus.PUBLISHED, RiskStatus.ARCHIVED])
    def test_legacy_statuses_are_open(self, status: RiskStatus) -> None:
        assert status_phase(status) is StatusPhase.OPEN

    def test_unrecognised_status_is_open(self) -> None:
        assert status_phase(None) is StatusPhase.OPEN


class TestIsActive:
    @pytest.mark.parametrize("status", [s for s in RiskStatus if s is not RiskStatus.CLOSED])
    def test_non_closed_is_active(self, status: RiskStatus) -> None:
        assert is_active(_risk(status)) is True

    def test_closed_is_inactive(self) -> None:
        assert is_active(_risk(RiskStatus.CLOSED)) is False

    def test_unknown_status_is_active(self) -> None:
        assert is_active(_risk(None)) is True


class TestMitigatedAccepted:
    @pytest.mark.parametrize("status", [RiskStatus.REMEDIATED, RiskStatus.MONITORING, RiskStatus.CLOSED])
    def test_mitigated_when_treated(self, status: RiskStatus) -> None:
        assert is_mitigated(_risk(status, RiskResponseStrategy.MITIGATE)) is True

    def test_not_mitigated_while_in_progress(self) -> None:
        assert is_mitigated(_risk(RiskStatus.IN_PROGRESS, RiskResponseStrategy.MITIGATE)) is False

    def test_not_mitigated_without_strategy(self) -> None:
        assert is_mitigated(_risk(RiskStatus.CLOSED)) is False

    def test_accepted(self) -> None:
        assert is_accepted(_risk(RiskStatus.MONITORING, RiskResponseStrategy.ACCEPT)) is True
        assert is_accepted(_risk(RiskStatus.MONITORING, RiskResponseStrategy.MITIGATE)) is False
        assert is_accepted(_risk(RiskStatus.PENDING, RiskResponseStrategy.ACCEPT)) is False


class TestIsOverdue:
    def test_open_risk_with_marker(self) -> None:
        assert is_overdue(_risk(RiskStatus.IN_PROGRESS, overdue="2024-01-01")) is True

    def test_closed_risk_excluded(self) -> None:
        assert is_overdue(_risk(RiskStatus.CLOSED, overdue="2024-01-01")) is False

    @pytest.mark.parametrize("status", [RiskStatus.REMEDIATED, RiskStatus.MONITORING])
    def test_treated_risk_excluded(self, status: RiskStatus) -> None:
        assert is_overdue(_risk(status, overdue="Overdue")) is False

    @pytest.mark.parametrize("marker", [None, "", "   "])
    def test_blank_marker(self, marker: Optional[str]) -> None:
        assert is_overdue(_risk(RiskStatus.IN_PROGRESS, overdue=marker)) is False

    def test_unknown_status_counts(self) -> None:
        assert is_overdue(_risk(None, overdue="Overdue")) is True


class TestDeriveOverdueMarker:
    _TODAY = date(2024, 6, 15)

    def test_no_strategy(self) -> None:
        assert derive_overdue_marker(None, "2020-01-01", "2020-01-01", self._TODAY) == ""

    @pytest.mark.parametrize("strategy, missing, passed", [
        (RiskResponseStrategy.MITIGATE, "Missing Risk Due Date", "Overdue"),
        (RiskResponseStrategy.TRANSFER, "Missing Risk Due Date", "Transfer Overdue"),
    ])
    def test_due_date_strategies(
        self, strategy: RiskResponseStrategy, missing: str, passed: str,
    ) -> None:
        assert derive_overdue_marker(strategy, None, "2020-01-01", self._TODAY) == missing
        assert derive_overdue_marker(strategy, "2024-06-14", None, self._TODAY) == passed
        assert derive_overdue_marker(strategy, "2024-06-15", None, self._TODAY) == ""

    @pytest.mark.parametrize("strategy, missing, passed", [
        (RiskResponseStrategy.ACCEPT, "Missing Risk Close Date", "Risk Close Date Passed"),
        (RiskResponseStrategy.AVOID, "Missing Risk Close Date", "Risk Avoidance Overdue"),
    ])
    def test_close_date_strategies(
        self, strategy: RiskResponseStrategy, missing: str, passed: str,
    ) -> None:
        assert derive_overdue_marker(strategy, "2020-01-01", " ", self._TODAY) == missing
        assert derive_overdue_marker(strategy, None, "2023-12-31", self._TODAY) == passed
        assert derive_overdue_marker(strategy, None, "2025-01-01", self._TODAY) == ""
