from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class ChecklistStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    NOT_APPLIED = "not-applied"


@dataclass
class AssessmentItem:
    id: str
    requirement: str
    description: str
    status: Optional[ChecklistStatus] = None
    is_header: bool = False
    sub_requirement: str = ""
    owner: str = ""
    task: str = ""
    completion_date: str = ""
    comments: str = ""


@dataclass
class CompletionStats:
    total: int
    completed: int
    in_progress: int
    not_applied: int
    completion_percentage: int
    progress_percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "inProgress": self.in_progress,
            "notApplied": self.not_applied,
            "completionPercentage": self.completion_percentage,
            "progressPercentage": self.progress_percentage,
        }


@dataclass
class RequirementGroupStats:
    group: str
    title: str
    stats: CompletionStats


@dataclass
class MaturityItem:
    id: str
    category: str
    section: str
    standard_ref: str
    question: str
    current_level: str
    target_level: str


@dataclass
class CategoryMaturity:
    category: str
    current_score: Decimal
    target_score: Decimal


@dataclass
class MaturitySummary:
    current_score: Decimal
    target_score: Decimal
    gap: Decimal
    categories: List[CategoryMaturity] = field(default_factory=list)
    under_target: List[MaturityItem] = field(default_factory=list)
