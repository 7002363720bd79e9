"""
Public service interface for the Companies module (companies and executives).

Every write recomputes the derived scores before committing:
  - company writes recompute pressure_score
  - executive writes recompute vulnerability_score, then the parent company's
    pressure_score (it depends on the highest executive vulnerability)

Alerts fire only when a score crosses its threshold from below.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from regintel.alerts.service import alert_company_pressure, alert_executive_vulnerability
from regintel.companies.database import Company, Executive
from regintel.core.config import settings
from regintel.core.utils import apply_changes, days_since, utcnow
from regintel.scoring import did_cross_threshold, pressure_score, vulnerability_score
from regintel.scoring.pressure_scorer import pressure_band
from regintel.scoring.vulnerability_scorer import extract_role_title, vulnerability_band

logger = logging.getLogger(__name__)

RECENT_FUNDING_DAYS = 90
VULNERABLE_EXECUTIVE_THRESHOLD = 70


# --- Scoring helpers ---

def score_executive(executive: Executive, company: Optional[Company], now: Optional[datetime] = None) -> int:
    return vulnerability_score(
        executive,
        company,
        now=now,
        risk_factor_cap=settings.vulnerability_risk_factor_cap,
        desperation_cap=settings.vulnerability_desperation_cap,
    )


async def _apply_pressure(
    session: AsyncSession,
    company: Company,
    previous: Optional[int],
    now: Optional[datetime] = None,
) -> int:
    """Recompute pressure from the loaded executives and alert on a crossing."""
    new_score = pressure_score(company, company.executives, now)
    company.pressure_score = new_score
    if did_cross_threshold(previous, new_score, settings.pressure_alert_threshold):
        await session.flush()
        await alert_company_pressure(session, company, days_since(company.last_funding_date, now))
    return new_score


async def _apply_vulnerability(
    session: AsyncSession,
    executive: Executive,
    company: Company,
    previous: Optional[int],
    now: Optional[datetime] = None,
) -> int:
    """Recompute vulnerability, remember the prior value and alert on a crossing."""
    new_score = score_executive(executive, company, now)
    if previous is not None and new_score != previous:
        executive.previous_vulnerability_score = previous
    executive.vulnerability_score = new_score
    if did_cross_threshold(previous, new_score, settings.vulnerability_alert_threshold):
        await session.flush()
        await alert_executive_vulnerability(session, executive, company)
    return new_score


# --- Companies ---

async def get_company(session: AsyncSession, user_id: int, company_id: int) -> Optional[Company]:
    result = await session.execute(
        select(Company)
        .options(selectinload(Company.executives))
        .where(Company.id == company_id, Company.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_companies(
    session: AsyncSession,
    user_id: int,
    pressure: Optional[str] = None,
    gtm_gap: Optional[bool] = None,
    days: Optional[int] = None,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Company]:
    """
    List companies ordered by pressure.

    Args:
        pressure: 'high' (>=70), 'medium' (40-69) or 'low' (<40).
        gtm_gap: Only companies with a detected GTM gap when True.
        days: Only companies funded within the last N days.
        search: Case-insensitive match on name or industry.
    """
    now = now or utcnow()
    stmt = (
        select(Company)
        .options(selectinload(Company.executives))
        .where(Company.user_id == user_id)
    )
    if gtm_gap:
        stmt = stmt.where(Company.gtm_gap_detected.is_(True))
    if days is not None:
        stmt = stmt.where(Company.last_funding_date >= now - timedelta(days=days))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Company.name.ilike(pattern), Company.industry.ilike(pattern)))
    stmt = stmt.order_by(Company.pressure_score.desc(), Company.id)

    result = await session.execute(stmt)
    companies = list(result.scalars().all())
    if pressure:
        companies = [c for c in companies if pressure_band(c.pressure_score) == pressure]
    return companies


def company_stats(companies: List[Company], now: Optional[datetime] = None) -> Dict[str, Any]:
    recent = 0
    for company in companies:
        days = days_since(company.last_funding_date, now)
        if days is not None and days <= RECENT_FUNDING_DAYS:
            recent += 1
    return {
        "total": len(companies),
        "with_recent_funding": recent,
        "gtm_gaps": sum(1 for c in companies if c.gtm_gap_detected),
        "executive_turnover": sum(1 for c in companies if c.executive_turnover),
        "high_pressure": sum(1 for c in companies if c.pressure_score >= 70),
        "total_funding": sum(c.total_funding or 0 for c in companies),
    }


def chaos_indicators(company: Company, alerts: List[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Headline pressure signals shown on the company detail view."""
    days = days_since(company.last_funding_date, now)
    return {
        "funding_pressure": days is not None and days <= RECENT_FUNDING_DAYS,
        "gtm_gap": bool(company.gtm_gap_detected),
        "executive_turnover": bool(company.executive_turnover),
        "vulnerable_executives": sum(
            1 for e in company.executives if e.vulnerability_score >= VULNERABLE_EXECUTIVE_THRESHOLD
        ),
        "recent_alerts": sum(1 for a in alerts if not a.is_read),
    }


async def create_company(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Company:
    company = Company(user_id=user_id)
    apply_changes(company, data)
    company.executives = []
    session.add(company)
    await session.flush()

    await _apply_pressure(session, company, previous=None, now=now)
    await session.commit()
    logger.info(f"Created company {company.id} ({company.name}) pressure={company.pressure_score}")
    return company


async def update_company(
    session: AsyncSession,
    user_id: int,
    company_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[Company]:
    company = await get_company(session, user_id, company_id)
    if company is None:
        return None

    previous = company.pressure_score
    apply_changes(company, data)
    affects_executives = any(k in data for k in ("gtm_gap_detected", "last_funding_date"))
    if affects_executives:
        # Executive vulnerability carries company-level bonuses
        for executive in company.executives:
            await _apply_vulnerability(session, executive, company, executive.vulnerability_score, now)

    await _apply_pressure(session, company, previous, now)
    await session.commit()
    return company


async def delete_company(session: AsyncSession, user_id: int, company_id: int) -> bool:
    company = await get_company(session, user_id, company_id)
    if company is None:
        return False
    await session.delete(company)
    await session.commit()
    logger.info(f"Deleted company {company_id}")
    return True


# --- Executives ---

async def get_executive(session: AsyncSession, user_id: int, executive_id: int) -> Optional[Executive]:
    result = await session.execute(
        select(Executive)
        .options(selectinload(Executive.company).selectinload(Company.executives))
        .where(Executive.id == executive_id, Executive.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_executives(
    session: AsyncSession,
    user_id: int,
    company_id: Optional[int] = None,
    vulnerability: Optional[str] = None,
    title: Optional[str] = None,
) -> List[Executive]:
    stmt = (
        select(Executive)
        .options(selectinload(Executive.company))
        .where(Executive.user_id == user_id)
    )
    if company_id is not None:
        stmt = stmt.where(Executive.company_id == company_id)
    if title:
        stmt = stmt.where(Executive.title.ilike(f"%{title}%"))
    stmt = stmt.order_by(Executive.vulnerability_score.desc(), Executive.id)

    result = await session.execute(stmt)
    executives = list(result.scalars().all())
    if vulnerability:
        executives = [e for e in executives if vulnerability_band(e.vulnerability_score) == vulnerability]
    return executives


def executive_stats(executives: List[Executive]) -> Dict[str, Any]:
    titles = Counter(extract_role_title(e.title) for e in executives)
    factors = Counter(f for e in executives for f in (e.risk_factors or []))
    return {
        "total": len(executives),
        "high_vulnerability": sum(1 for e in executives if e.vulnerability_score >= 70),
        "with_desperation_signals": sum(1 for e in executives if e.desperation_signals),
        "title_distribution": dict(titles),
        "top_risk_factors": [[factor, count] for factor, count in factors.most_common(5)],
    }


async def create_executive(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[Executive]:
    """Create an executive under one of the user's companies. None if the company is unknown."""
    company = await get_company(session, user_id, data["company_id"])
    if company is None:
        return None

    executive = Executive(user_id=user_id)
    apply_changes(executive, data)
    company.executives.append(executive)
    await session.flush()

    await _apply_vulnerability(session, executive, company, previous=None, now=now)
    await _apply_pressure(session, company, company.pressure_score, now)
    await session.commit()
    logger.info(f"Created executive {executive.id} ({executive.name}) vulnerability={executive.vulnerability_score}")
    return executive


async def update_executive(
    session: AsyncSession,
    user_id: int,
    executive_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[Executive]:
    executive = await get_executive(session, user_id, executive_id)
    if executive is None:
        return None

    company = executive.company
    previous = executive.vulnerability_score
    apply_changes(executive, data)
    await _apply_vulnerability(session, executive, company, previous, now)
    await _apply_pressure(session, company, company.pressure_score, now)
    await session.commit()
    return executive


async def delete_executive(
    session: AsyncSession,
    user_id: int,
    executive_id: int,
    now: Optional[datetime] = None,
) -> bool:
    executive = await get_executive(session, user_id, executive_id)
    if executive is None:
        return False

    company = executive.company
    company.executives.remove(executive)
    await session.delete(executive)
    await _apply_pressure(session, company, company.pressure_score, now)
    await session.commit()
    return True


# --- Rescoring ---

async def rescore_companies(session: AsyncSession, user_id: int, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Recompute every executive and company score for a user.

    Funding recency and posting recency decay with time, so scores drift even
    without writes. Returns how many rows changed.
    """
    now = now or utcnow()
    result = await session.execute(
        select(Company)
        .options(selectinload(Company.executives))
        .where(Company.user_id == user_id)
    )
    companies = list(result.scalars().all())

    changed = {"companies": 0, "executives": 0}
    for company in companies:
        for executive in company.executives:
            previous = executive.vulnerability_score
            if await _apply_vulnerability(session, executive, company, previous, now) != previous:
                changed["executives"] += 1
        previous = company.pressure_score
        if await _apply_pressure(session, company, previous, now) != previous:
            changed["companies"] += 1

    await session.commit()
    logger.info(
        f"Rescored {len(companies)} companies for user {user_id}: "
        f"{changed['companies']} companies and {changed['executives']} executives changed"
    )
    return changed
