"""Keeps ``impact`` and ``risk_score`` consistent with their inputs on every write."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from grc_metrics_cli.exceptions import ValidationError
from grc_metrics_cli.models.risks import RiskRecord, RiskStatus, RiskUpdate
from grc_metrics_cli.scoring.impact import aggregate_impact, validate_rating
from grc_metrics_cli.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)


class ImpactSource(str, Enum):
    CIA = "cia"
    EXPLICIT = "explicit"
    RETAINED = "retained"


def compute_risk_score(impact: int, likelihood: int) -> Decimal:
    validate_rating("Impact", impact)
    validate_rating("Likelihood", likelihood)
    return round_half_up(impact * likelihood, 1)


def resolve_impact(existing: RiskRecord, update: RiskUpdate) -> Tuple[int, ImpactSource]:
    """Pick the impact an update ends up with.

    | CIA field supplied | ``impact`` supplied | result                         |
    |--------------------|---------------------|--------------------------------|
    | yes                | any                 | mean of merged CIA ratings     |
    | no                 | yes                 | supplied ``impact``            |
    | no                 | no                  | stored ``impact``              |
    """
    if update.touches_cia():
        c = _pick(update.confidentiality_impact, existing.confidentiality_impact)
        i = _pick(update.integrity_impact, existing.integrity_impact)
        a = _pick(update.availability_impact, existing.availability_impact)
        return aggregate_impact(c, i, a), ImpactSource.CIA
    if update.impact is not None:
        return validate_rating("Impact", update.impact), ImpactSource.EXPLICIT
    return existing.impact, ImpactSource.RETAINED


def score_new_risk(risk: RiskRecord, now: Optional[datetime] = None) -> RiskRecord:
    """Derive impact from CIA and the score from impact before a create."""
    impact = aggregate_impact(
        risk.confidentiality_impact, risk.integrity_impact, risk.availability_impact,
    )
    score = compute_risk_score(impact, risk.likelihood)
    stamp = _timestamp(now)
    return replace(
        risk,
        impact=impact,
        risk_score=score,
        status=risk.status or RiskStatus.DRAFT,
        created_at=risk.created_at or stamp,
        updated_at=stamp,
    )


def apply_risk_update(
    existing: RiskRecord,
    update: RiskUpdate,
    now: Optional[datetime] = None,
) -> RiskRecord:
    impact, source = resolve_impact(existing, update)
    likelihood = _pick(update.likelihood, existing.likelihood)
    score = compute_risk_score(impact, likelihood)
    logger.debug("Risk %s: impact %d from %s, score %s", existing.id, impact, source.value, score)

    return replace(
        existing,
        confidentiality_impact=_pick(update.confidentiality_impact, existing.confidentiality_impact),
        integrity_impact=_pick(update.integrity_impact, existing.integrity_impact),
        availability_impact=_pick(update.availability_impact, existing.availability_impact),
        impact=impact,
        likelihood=likelihood,
        risk_score=score,
        status=_pick(update.status, existing.status),
        risk_response_strategy=_pick(update.risk_response_strategy, existing.risk_response_strategy),
        overdue=_pick(update.overdue, existing.overdue),
        asset_category=_pick(update.asset_category, existing.asset_category),
        title=_pick(update.title, existing.title),
        updated_at=_timestamp(now),
    )


def effective_score(risk: RiskRecord) -> Decimal:
    """Score used for aggregation; never raises."""
    if risk.risk_score is not None:
        return risk.risk_score
    try:
        return compute_risk_score(risk.impact, risk.likelihood)
    except ValidationError as exc:
        logger.warning("Risk %s has no usable score, counting it as 0: %s", risk.id, exc)
        return Decimal(0)


def _pick(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def _timestamp(now: Optional[datetime]) -> str:
    moment = now or datetime.now(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")
