"""Status predicates used by the risk register metrics.

Every ``RiskStatus`` member must appear in ``STATUS_PHASES``; the module
refuses to import otherwise, so a newly added status cannot silently count as
open or closed. Statuses the register could not recognise arrive as ``None``
and are treated as open.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple

from grc_metrics_cli.models.risks import RiskRecord, RiskResponseStrategy, RiskStatus


class StatusPhase(str, Enum):
    OPEN = "open"
    TREATED = "treated"
    CLOSED = "closed"


STATUS_PHASES: Dict[RiskStatus, StatusPhase] = {
    RiskStatus.DRAFT: StatusPhase.OPEN,
    RiskStatus.IDENTIFIED: StatusPhase.OPEN,
    RiskStatus.IN_ASSESSMENT: StatusPhase.OPEN,
    RiskStatus.PENDING_TREATMENT: StatusPhase.OPEN,
    RiskStatus.IN_PROGRESS: StatusPhase.OPEN,
    RiskStatus.REMEDIATED: StatusPhase.TREATED,
    RiskStatus.MONITORING: StatusPhase.TREATED,
    RiskStatus.CLOSED: StatusPhase.CLOSED,
    RiskStatus.PENDING: StatusPhase.OPEN,
    RiskStatus.PUBLISHED: StatusPhase.OPEN,
    RiskStatus.ARCHIVED: StatusPhase.OPEN,
}

_unmapped = set(RiskStatus) - set(STATUS_PHASES)
if _unmapped:
    raise RuntimeError(
        "Risk statuses without a lifecycle phase: "
        + ", ".join(sorted(s.value for s in _unmapped))
    )


def status_phase(status: Optional[RiskStatus]) -> StatusPhase:
    if status is None:
        return StatusPhase.OPEN
    return STATUS_PHASES[status]


def is_active(risk: RiskRecord) -> bool:
    return status_phase(risk.status) is not StatusPhase.CLOSED


def is_completed(risk: RiskRecord) -> bool:
    """Remediated, monitoring or closed."""
    return status_phase(risk.status) is not StatusPhase.OPEN


def is_mitigated(risk: RiskRecord) -> bool:
    return risk.risk_response_strategy is RiskResponseStrategy.MITIGATE and is_completed(risk)


def is_accepted(risk: RiskRecord) -> bool:
    return risk.risk_response_strategy is RiskResponseStrategy.ACCEPT and is_completed(risk)


def has_overdue_info(risk: RiskRecord) -> bool:
    return bool(risk.overdue and risk.overdue.strip())


def is_overdue(risk: RiskRecord) -> bool:
    return has_overdue_info(risk) and not is_completed(risk)


_OVERDUE_RULES: Dict[RiskResponseStrategy, Tuple[str, str, str]] = {
    # strategy: (date field, missing marker, passed marker)
    RiskResponseStrategy.ACCEPT: ("close", "Missing Risk Close Date", "Risk Close Date Passed"),
    RiskResponseStrategy.MITIGATE: ("due", "Missing Risk Due Date", "Overdue"),
    RiskResponseStrategy.TRANSFER: ("due", "Missing Risk Due Date", "Transfer Overdue"),
    RiskResponseStrategy.AVOID: ("close", "Missing Risk Close Date", "Risk Avoidance Overdue"),
}


def derive_overdue_marker(
    strategy: Optional[RiskResponseStrategy],
    due_date: Optional[str],
    close_date: Optional[str],
    today: Optional[date] = None,
) -> str:
    """Text stored in the ``overdue`` field; empty when nothing is late.

    Dates are ISO ``YYYY-MM-DD`` strings and compare lexically.
    """
    if strategy is None:
        return ""
    date_field, missing, passed = _OVERDUE_RULES[strategy]
    value = due_date if date_field == "due" else close_date
    if not value or not value.strip():
        return missing
    current = (today or date.today()).strftime("%Y-%m-%d")
    if value.strip() < current:
        return passed
    return ""
