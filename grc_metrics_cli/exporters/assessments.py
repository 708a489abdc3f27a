from __future__ import annotations

from typing import Any, Dict, List

from grc_metrics_cli.exporters.base import BaseExporter
from grc_metrics_cli.formatters.markdown_formatter import MarkdownFormatter
from grc_metrics_cli.models.assessments import (
    AssessmentItem,
    ChecklistStatus,
    CompletionStats,
    MaturityItem,
    MaturitySummary,
    RequirementGroupStats,
)
from grc_metrics_cli.scoring.checklist import (
    compute_completion_stats,
    compute_requirement_group_stats,
)
from grc_metrics_cli.scoring.maturity import compute_maturity_summary, maturity_label


class PciDssExporter(BaseExporter):
    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Computing PCI DSS completion...")

        items = [
            parse_assessment_item(raw)
            for raw in _as_list(self.client.list_pci_dss_assessments())
        ]
        overall = compute_completion_stats(items)
        groups = compute_requirement_group_stats(items)

        data: Dict[str, Any] = {
            "overall": overall.to_dict(),
            "requirements": [
                {"requirement": g.group, "title": g.title, **g.stats.to_dict()}
                for g in groups
            ],
        }
        self._write_report(
            "pci-dss-completion",
            "PCI DSS Gap Assessment",
            _build_checklist_body(overall, groups),
            data,
        )
        self._log(
            f"Computing PCI DSS completion... done "
            f"({overall.completed}/{overall.total} completed)"
        )


class MaturityExporter(BaseExporter):
    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Computing maturity scores...")

        items = [
            parse_maturity_item(raw)
            for raw in _as_list(self.client.list_maturity_assessments())
        ]
        summary = compute_maturity_summary(items)

        data: Dict[str, Any] = {
            "currentScore": summary.current_score,
            "targetScore": summary.target_score,
            "gap": summary.gap,
            "categories": [
                {"category": c.category, "current": c.current_score, "target": c.target_score}
                for c in summary.categories
            ],
            "underTarget": [i.standard_ref for i in summary.under_target],
        }
        self._write_report(
            "maturity-assessment",
            "Maturity Assessment",
            _build_maturity_body(summary),
            data,
        )
        self._log(f"Computing maturity scores... done ({len(items)} questions)")


def parse_assessment_item(raw: Dict[str, Any]) -> AssessmentItem:
    status = None
    raw_status = str(raw.get("status", "") or "").strip()
    if raw_status:
        try:
            status = ChecklistStatus(raw_status)
        except ValueError:
            status = None

    return AssessmentItem(
        id=str(raw.get("id", "") or ""),
        requirement=str(raw.get("requirement", "") or ""),
        description=str(raw.get("description", "") or ""),
        status=status,
        is_header=bool(raw.get("isHeader", False)),
        sub_requirement=str(raw.get("subRequirement", "") or ""),
        owner=str(raw.get("owner", "") or ""),
        task=str(raw.get("task", "") or ""),
        completion_date=str(raw.get("completionDate", "") or ""),
        comments=str(raw.get("comments", "") or ""),
    )


def parse_maturity_item(raw: Dict[str, Any]) -> MaturityItem:
    return MaturityItem(
        id=str(raw.get("id", "") or ""),
        category=str(raw.get("category", "") or ""),
        section=str(raw.get("section", "") or ""),
        standard_ref=str(raw.get("standardRef", "") or ""),
        question=str(raw.get("question", "") or ""),
        current_level=str(raw.get("currentMaturityLevel", "") or ""),
        target_level=str(raw.get("targetMaturityLevel", "") or ""),
    )


def _build_checklist_body(overall: CompletionStats, groups: List[RequirementGroupStats]) -> str:
    parts: List[str] = []
    parts.append("## Overall")
    parts.append("")
    parts.append(MarkdownFormatter.table(
        ["Total", "Completed", "In progress", "Not applied", "Completion", "Progress"],
        [[
            overall.total,
            overall.completed,
            overall.in_progress,
            overall.not_applied,
            f"{overall.completion_percentage}%",
            f"{overall.progress_percentage}%",
        ]],
    ))
    parts.append("")

    parts.append("## Requirements")
    parts.append("")
    if groups:
        parts.append(MarkdownFormatter.table(
            ["Requirement", "Title", "Completed", "Completion"],
            [
                [g.group, g.title, f"{g.stats.completed}/{g.stats.total}", f"{g.stats.completion_percentage}%"]
                for g in groups
            ],
        ))
    else:
        parts.append("[//]: # (No assessment items)")
    return "\n".join(parts)


def _build_maturity_body(summary: MaturitySummary) -> str:
    parts: List[str] = []
    parts.append(f"- **Current Maturity Score:** {summary.current_score}")
    parts.append(f"- **Target Maturity Score:** {summary.target_score}")
    parts.append(f"- **Gap to Target:** {summary.gap}")
    parts.append("")

    parts.append("## Categories")
    parts.append("")
    if summary.categories:
        parts.append(MarkdownFormatter.table(
            ["Category", "Current", "Target"],
            [[c.category, c.current_score, c.target_score] for c in summary.categories],
        ))
    else:
        parts.append("[//]: # (No assessment questions)")
    parts.append("")

    parts.append("## Controls Under Target Score")
    parts.append("")
    if summary.under_target:
        for item in summary.under_target:
            parts.append(
                f"- **{item.standard_ref}** {item.question} "
                f"(current: {maturity_label(item.current_level)}, "
                f"target: {maturity_label(item.target_level)})"
            )
    else:
        parts.append("[//]: # (All controls meet their target)")
    return "\n".join(parts)


def _as_list(response: Any) -> List[Dict[str, Any]]:
    if not isinstance(response, list):
        return []
    return [raw for raw in response if isinstance(raw, dict)]
