from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class RiskStatus(str, Enum):
    DRAFT = "draft"
    IDENTIFIED = "identified"
    IN_ASSESSMENT = "in_assessment"
    PENDING_TREATMENT = "pending_treatment"
    IN_PROGRESS = "in_progress"
    REMEDIATED = "remediated"
    MONITORING = "monitoring"
    CLOSED = "closed"
    # Legacy values still present in older registers.
    PENDING = "pending"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class RiskType(str, Enum):
    ASSET = "asset"
    SCENARIO = "scenario"


class RiskResponseStrategy(str, Enum):
    ACCEPT = "Accept"
    MITIGATE = "Mitigate"
    TRANSFER = "Transfer"
    AVOID = "Avoid"


class RiskLevel(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"


@dataclass
class RiskRecord:
    id: str
    confidentiality_impact: int
    integrity_impact: int
    availability_impact: int
    impact: int
    likelihood: int
    risk_score: Optional[Decimal] = None
    # None means the stored status was not recognised.
    status: Optional[RiskStatus] = RiskStatus.DRAFT
    risk_type: RiskType = RiskType.ASSET
    risk_response_strategy: Optional[RiskResponseStrategy] = None
    overdue: Optional[str] = None
    asset_category: Optional[str] = None
    asset_description: Optional[str] = None
    code: str = ""
    title: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class RiskUpdate:
    """Partial change set for a stored risk; ``None`` keeps the stored value."""

    confidentiality_impact: Optional[int] = None
    integrity_impact: Optional[int] = None
    availability_impact: Optional[int] = None
    impact: Optional[int] = None
    likelihood: Optional[int] = None
    status: Optional[RiskStatus] = None
    risk_response_strategy: Optional[RiskResponseStrategy] = None
    overdue: Optional[str] = None
    asset_category: Optional[str] = None
    title: Optional[str] = None

    def touches_cia(self) -> bool:
        return (
            self.confidentiality_impact is not None
            or self.integrity_impact is not None
            or self.availability_impact is not None
        )


@dataclass
class TrendPoint:
    month: date
    score: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month.strftime("%Y-%m-%d"), "score": float(self.score)}


@dataclass
class LevelShare:
    level: RiskLevel
    count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "count": self.count, "percentage": self.percentage}


@dataclass
class CategoryCount:
    category: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "count": self.count}


@dataclass
class RiskMetrics:
    active: int
    mitigated: int
    above_tolerance: int
    accepted: int
    overdue: int
    average_risk_score_trend: List[TrendPoint] = field(default_factory=list)
    risk_level_distribution: List[LevelShare] = field(default_factory=list)
    risk_category_distribution: List[CategoryCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Dashboard response body; key names are part of the API contract."""
        return {
            "active": self.active,
            "mitigated": self.mitigated,
            "aboveTolerance": self.above_tolerance,
            "accepted": self.accepted,
            "overdue": self.overdue,
            "averageRiskScoreTrend": [p.to_dict() for p in self.average_risk_score_trend],
            "riskLevelDistribution": [s.to_dict() for s in self.risk_level_distribution],
            "riskCategoryDistribution": [c.to_dict() for c in self.risk_category_distribution],
        }
