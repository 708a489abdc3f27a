from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from grc_metrics_cli.exporters.base import BaseExporter
from grc_metrics_cli.formatters.markdown_formatter import MarkdownFormatter
from grc_metrics_cli.models.risks import (
    RiskMetrics,
    RiskRecord,
    RiskResponseStrategy,
    RiskStatus,
    RiskType,
)
from grc_metrics_cli.scoring.calculator import effective_score
from grc_metrics_cli.scoring.levels import HIGH_RISK_THRESHOLD, TOLERANCE_THRESHOLD, is_high_risk
from grc_metrics_cli.scoring.metrics import compute_risk_metrics

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class RiskMetricsExporter(BaseExporter):
    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Computing risk metrics...")

        response = self.client.list_risks()
        raw_list: List[Any] = []
        if isinstance(response, dict):
            raw_list = response.get("risks", []) or []
        elif isinstance(response, list):
            raw_list = response

        risks = [parse_risk(raw) for raw in raw_list if isinstance(raw, dict)]
        skipped = len(raw_list) - len(risks)
        if skipped:
            logger.warning("Skipped %d risk entries that were not objects", skipped)

        metrics = compute_risk_metrics(risks, today=self.today)
        high_risks = sum(1 for r in risks if is_high_risk(effective_score(r)))

        data = metrics.to_dict()
        data["totalRisks"] = len(risks)
        data["highRiskCount"] = high_risks

        self._write_report(
            "risk-metrics",
            "Risk Metrics",
            _build_body(metrics, len(risks), high_risks),
            data,
        )
        self._log(f"Computing risk metrics... done ({len(risks)} risks)")


def parse_risk(raw: Dict[str, Any]) -> RiskRecord:
    """Build a RiskRecord from an API payload without ever rejecting it."""
    risk_id = str(raw.get("id", "") or "")

    status: Optional[RiskStatus] = RiskStatus.DRAFT
    raw_status = raw.get("status")
    if raw_status:
        status = _as_enum(RiskStatus, raw_status)
        if status is None:
            logger.warning("Risk %s has unknown status %r; treating it as open", risk_id, raw_status)

    return RiskRecord(
        id=risk_id,
        code=str(raw.get("riskId", "") or ""),
        title=str(raw.get("title", "") or "").strip(),
        confidentiality_impact=_as_int(raw.get("confidentialityImpact")),
        integrity_impact=_as_int(raw.get("integrityImpact")),
        availability_impact=_as_int(raw.get("availabilityImpact")),
        impact=_as_int(raw.get("impact")),
        likelihood=_as_int(raw.get("likelihood")),
        risk_score=_as_decimal(raw.get("riskScore")),
        status=status,
        risk_type=_as_enum(RiskType, raw.get("riskType")) or RiskType.ASSET,
        risk_response_strategy=_as_enum(RiskResponseStrategy, raw.get("riskResponseStrategy")),
        overdue=_as_optional_str(raw.get("overdue")),
        asset_category=_as_optional_str(raw.get("assetCategory")),
        asset_description=_as_optional_str(raw.get("assetDescription")),
        created_at=_as_optional_str(raw.get("createdAt")),
        updated_at=_as_optional_str(raw.get("updatedAt")),
    )


def _build_body(metrics: RiskMetrics, total: int, high_risks: int) -> str:
    parts: List[str] = []

    parts.append("## Overview")
    parts.append("")
    parts.append(MarkdownFormatter.table(
        ["Metric", "Value"],
        [
            ["Total risks", total],
            ["Active risks", metrics.active],
            [f"High risks (score >= {HIGH_RISK_THRESHOLD})", high_risks],
            ["Mitigated", f"{metrics.mitigated}%"],
            ["Accepted", f"{metrics.accepted}%"],
            [f"Above tolerance (score > {TOLERANCE_THRESHOLD})", f"{metrics.above_tolerance}%"],
            ["Overdue", metrics.overdue],
        ],
    ))
    parts.append("")

    parts.append("## Average Risk Score Trend")
    parts.append("")
    parts.append(MarkdownFormatter.table(
        ["Month", "Average score"],
        [[p.month.strftime("%Y-%m"), p.score] for p in metrics.average_risk_score_trend],
    ))
    parts.append("")

    parts.append("## Risk Level Distribution (active risks)")
    parts.append("")
    if metrics.risk_level_distribution:
        parts.append(MarkdownFormatter.table(
            ["Level", "Count", "Share"],
            [[s.level.value, s.count, f"{s.percentage}%"] for s in metrics.risk_level_distribution],
        ))
    else:
        parts.append("[//]: # (No active risks)")
    parts.append("")

    parts.append("## Risk Category Distribution (active risks)")
    parts.append("")
    if metrics.risk_category_distribution:
        parts.append(MarkdownFormatter.table(
            ["Category", "Count"],
            [[c.category, c.count] for c in metrics.risk_category_distribution],
        ))
    else:
        parts.append("[//]: # (No active risks)")

    return "\n".join(parts)


def _as_enum(enum_type: Type[E], value: Any) -> Optional[E]:
    if value is None:
        return None
    try:
        return enum_type(str(value).strip())
    except ValueError:
        return None


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0
