"""Company Pressure Scoring

Estimates how much financial and organisational strain a target company is
under. Fresh money plus a missing go-to-market function is the classic
pressure pattern.
"""
import math
from datetime import datetime
from typing import Any, Iterable, Optional

from regintel.core.utils import clamp_score, days_since

# (max days since last funding, points)
FUNDING_RECENCY_TIERS = [
    (30, 30),
    (60, 25),
    (90, 20),
    (180, 10),
]

# (min round amount, points)
FUNDING_AMOUNT_TIERS = [
    (50_000_000, 20),
    (20_000_000, 15),
    (10_000_000, 10),
]

GTM_GAP_POINTS = 25
EXECUTIVE_TURNOVER_POINTS = 20
EXECUTIVE_VULNERABILITY_WEIGHT = 0.05


def funding_recency_points(last_funding_date: Optional[datetime], now: Optional[datetime] = None) -> int:
    days = days_since(last_funding_date, now)
    if days is None:
        return 0
    for max_days, points in FUNDING_RECENCY_TIERS:
        if days <= max_days:
            return points
    return 0


def funding_amount_points(amount: Optional[float]) -> int:
    if not amount:
        return 0
    for min_amount, points in FUNDING_AMOUNT_TIERS:
        if amount >= min_amount:
            return points
    return 0


def pressure_score(
    company: Any,
    executives: Iterable[Any] = (),
    now: Optional[datetime] = None,
) -> int:
    """
    Calculate the 0-100 pressure score for a company.

    Args:
        company: Anything exposing last_funding_date, last_funding_amount,
            gtm_gap_detected and executive_turnover.
        executives: The company's executives (their vulnerability_score is read).
        now: Reference time, defaults to the current UTC time.
    """
    score = 0
    score += funding_recency_points(getattr(company, "last_funding_date", None), now)
    score += funding_amount_points(getattr(company, "last_funding_amount", None))

    if getattr(company, "gtm_gap_detected", False):
        score += GTM_GAP_POINTS
    if getattr(company, "executive_turnover", False):
        score += EXECUTIVE_TURNOVER_POINTS

    max_vulnerability = max(
        (getattr(e, "vulnerability_score", 0) or 0 for e in executives),
        default=0,
    )
    score += math.floor(max_vulnerability * EXECUTIVE_VULNERABILITY_WEIGHT)

    return clamp_score(score)


def pressure_band(score: int) -> str:
    """Bucket a pressure score for list filtering."""
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"
