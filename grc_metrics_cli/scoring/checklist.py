from __future__ import annotations

from typing import Dict, List, Sequence

from grc_metrics_cli.models.assessments import (
    AssessmentItem,
    ChecklistStatus,
    CompletionStats,
    RequirementGroupStats,
)
from grc_metrics_cli.scoring.rounding import percentage


def compute_completion_stats(items: Sequence[AssessmentItem]) -> CompletionStats:
    """Completion counts over checklist items; section headers are not counted."""
    rows = [item for item in items if not item.is_header]
    total = len(rows)
    completed = sum(1 for item in rows if item.status is ChecklistStatus.COMPLETED)
    in_progress = sum(1 for item in rows if item.status is ChecklistStatus.IN_PROGRESS)
    not_applied = sum(1 for item in rows if item.status is ChecklistStatus.NOT_APPLIED)

    return CompletionStats(
        total=total,
        completed=completed,
        in_progress=in_progress,
        not_applied=not_applied,
        completion_percentage=percentage(completed, total),
        progress_percentage=percentage(completed + in_progress, total),
    )


def main_requirement(requirement: str) -> str:
    return requirement.split(".")[0].strip()


def group_by_requirement(items: Sequence[AssessmentItem]) -> Dict[str, List[AssessmentItem]]:
    groups: Dict[str, List[AssessmentItem]] = {}
    for item in items:
        groups.setdefault(main_requirement(item.requirement), []).append(item)
    return groups


def compute_requirement_group_stats(
    items: Sequence[AssessmentItem],
) -> List[RequirementGroupStats]:
    results: List[RequirementGroupStats] = []
    for group, members in group_by_requirement(items).items():
        title = next(
            (m.description for m in members if m.requirement.strip() == group and m.description),
            f"Requirement {group}",
        )
        results.append(RequirementGroupStats(
            group=group,
            title=title,
            stats=compute_completion_stats(members),
        ))
    return results
