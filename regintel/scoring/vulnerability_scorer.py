"""Executive Vulnerability Scoring

Estimates how receptive an executive is likely to be to outside help,
combining their role, tagged risk factors, desperation signals, posting
activity and the state of their company.
"""
import re
from datetime import datetime
from typing import Any, Optional

from regintel.core.models import RiskFactor
from regintel.core.utils import clamp_score, days_since

# Case-insensitive substring matches against the job title
CHIEF_GTM_KEYWORDS = ("cmo", "chief marketing", "cro", "chief revenue")
CHIEF_GTM_POINTS = 20
VP_GTM_POINTS = 15
DIRECTOR_POINTS = 10

RISK_FACTOR_WEIGHTS = {
    RiskFactor.PIPELINE_PRESSURE.value: 15,
    RiskFactor.AD_SPEND_WASTE.value: 10,
    RiskFactor.BOARD_PRESSURE.value: 20,
    RiskFactor.NO_GTM_TEAM.value: 15,
    RiskFactor.FOUNDER_LED_SALES.value: 10,
    RiskFactor.RECENT_HIRE.value: 10,
    RiskFactor.PUBLIC_CRITICISM.value: 15,
}
UNKNOWN_RISK_FACTOR_WEIGHT = 5

DESPERATION_SIGNAL_POINTS = 5
RECENT_POST_DAYS = 7
RECENT_POST_POINTS = 5
COMPANY_GTM_GAP_POINTS = 10
COMPANY_RECENT_FUNDING_DAYS = 90
COMPANY_RECENT_FUNDING_POINTS = 10


def title_points(title: Optional[str]) -> int:
    if not title:
        return 0
    lowered = title.lower()
    if any(keyword in lowered for keyword in CHIEF_GTM_KEYWORDS):
        return CHIEF_GTM_POINTS
    if "vp" in lowered and ("sales" in lowered or "marketing" in lowered):
        return VP_GTM_POINTS
    if "director" in lowered:
        return DIRECTOR_POINTS
    return 0


def risk_factor_points(risk_factors, cap: Optional[int] = None) -> int:
    total = sum(RISK_FACTOR_WEIGHTS.get(factor, UNKNOWN_RISK_FACTOR_WEIGHT) for factor in risk_factors or [])
    if cap is not None:
        total = min(cap, total)
    return total


def desperation_points(signals, cap: Optional[int] = None) -> int:
    total = len(signals or []) * DESPERATION_SIGNAL_POINTS
    if cap is not None:
        total = min(cap, total)
    return total


def vulnerability_score(
    executive: Any,
    company: Any = None,
    now: Optional[datetime] = None,
    risk_factor_cap: Optional[int] = None,
    desperation_cap: Optional[int] = None,
) -> int:
    """
    Calculate the 0-100 vulnerability score for an executive.

    `company` is the executive's parent company snapshot; pass None when it
    is not loaded and the company-level bonuses are skipped. The two caps
    default to uncapped.
    """
    score = 0
    score += title_points(getattr(executive, "title", None))
    score += risk_factor_points(getattr(executive, "risk_factors", None), risk_factor_cap)
    score += desperation_points(getattr(executive, "desperation_signals", None), desperation_cap)

    days_since_post = days_since(getattr(executive, "last_linkedin_post", None), now)
    if days_since_post is not None and days_since_post <= RECENT_POST_DAYS:
        score += RECENT_POST_POINTS

    if company is not None:
        if getattr(company, "gtm_gap_detected", False):
            score += COMPANY_GTM_GAP_POINTS
        days_since_funding = days_since(getattr(company, "last_funding_date", None), now)
        if days_since_funding is not None and days_since_funding <= COMPANY_RECENT_FUNDING_DAYS:
            score += COMPANY_RECENT_FUNDING_POINTS

    return clamp_score(score)


def vulnerability_band(score: int) -> str:
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


def extract_role_title(title: Optional[str]) -> str:
    """Collapse a free-text job title into a role bucket."""
    # Whole words only: "DIRECTOR" must not match "CTO"
    words = set(re.findall(r"[A-Z]+", (title or "").upper()))
    for role in ("CEO", "CMO", "CRO", "CFO", "CTO", "COO"):
        if role in words:
            return role
    if "VP" in words:
        return "VP"
    if "DIRECTOR" in words:
        return "Director"
    return "Other"
