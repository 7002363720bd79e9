"""Regulatory Opportunity Scoring"""
import math
from datetime import datetime
from typing import Any, Optional

from regintel.core.models import (
    CompetitionLevel,
    MarketGap,
    OpportunityStatus,
    RevenuePotential,
)
from regintel.core.utils import clamp_score, round_half_up, to_naive_utc, utcnow

BASE_SCORE = 50

REVENUE_POTENTIAL_POINTS = {
    RevenuePotential.LOW.value: 10,
    RevenuePotential.MEDIUM.value: 20,
    RevenuePotential.HIGH.value: 30,
    RevenuePotential.VERY_HIGH.value: 40,
}

MARKET_GAP_POINTS = {
    MarketGap.LOW.value: 5,
    MarketGap.MEDIUM.value: 15,
    MarketGap.HIGH.value: 25,
    MarketGap.VERY_HIGH.value: 35,
}

# Inverse: less competition is better
COMPETITION_POINTS = {
    CompetitionLevel.NONE.value: 25,
    CompetitionLevel.LOW.value: 20,
    CompetitionLevel.MEDIUM.value: 10,
    CompetitionLevel.HIGH.value: 5,
    CompetitionLevel.SATURATED.value: 0,
}

# (min months of lead time, points)
LEAD_TIME_TIERS = [
    (18, 15),
    (12, 10),
    (6, 5),
]

CLOSED_STATUSES = (OpportunityStatus.LOST.value, OpportunityStatus.ARCHIVED.value)
CLOSED_MULTIPLIER = 0.5

DAYS_PER_MONTH = 30


def _value(field: Any) -> Optional[str]:
    """Enum members and plain strings both score."""
    if field is None:
        return None
    return getattr(field, "value", field)


def lead_time_months(implementation_date: Optional[datetime], now: Optional[datetime] = None) -> Optional[int]:
    """Whole 30-day months until the regulation takes effect."""
    if implementation_date is None:
        return None
    now = now or utcnow()
    delta = to_naive_utc(implementation_date) - now
    return math.floor(delta.total_seconds() / (DAYS_PER_MONTH * 24 * 60 * 60))


def lead_time_points(months: Optional[int]) -> int:
    if not months:
        return 0
    for min_months, points in LEAD_TIME_TIERS:
        if months >= min_months:
            return points
    return 0


def opportunity_score(opportunity: Any) -> int:
    """
    Calculate the 0-100 attractiveness score for a regulatory opportunity.

    Reads revenue_potential, market_gap, competition_level, lead_time_months
    and status. Unknown or missing ordinals contribute nothing. Lost and
    archived opportunities are halved before clamping.
    """
    score = BASE_SCORE
    score += REVENUE_POTENTIAL_POINTS.get(_value(getattr(opportunity, "revenue_potential", None)), 0)
    score += MARKET_GAP_POINTS.get(_value(getattr(opportunity, "market_gap", None)), 0)
    score += COMPETITION_POINTS.get(_value(getattr(opportunity, "competition_level", None)), 0)
    score += lead_time_points(getattr(opportunity, "lead_time_months", None))

    if _value(getattr(opportunity, "status", None)) in CLOSED_STATUSES:
        score = score * CLOSED_MULTIPLIER

    return clamp_score(round_half_up(score))
