"""Public service interface for the Alerts module.

Other modules create alerts through the helpers here; each helper is called
by a write path only after did_cross_threshold (or an intake rule) says the
alert should fire.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts.database import Alert
from regintel.core.models import AlertSeverity, AlertType, ThreatLevel

logger = logging.getLogger(__name__)

PROCUREMENT_MATCH_DAYS = 30
PROCUREMENT_URGENT_DAYS = 7


async def create_alert(
    session: AsyncSession,
    user_id: int,
    alert_type: str,
    title: str,
    message: str,
    severity: str = AlertSeverity.MEDIUM.value,
    action_required: bool = False,
    action_url: Optional[str] = None,
    company_id: Optional[int] = None,
    opportunity_id: Optional[int] = None,
    executive_id: Optional[int] = None,
) -> Alert:
    """Add an alert to the session. The caller owns the commit."""
    alert = Alert(
        user_id=user_id,
        alert_type=alert_type,
        severity=severity,
        title=title,
        message=message,
        action_required=action_required,
        action_url=action_url,
        company_id=company_id,
        opportunity_id=opportunity_id,
        executive_id=executive_id,
    )
    session.add(alert)
    await session.flush()
    logger.info(f"Alert raised for user {user_id}: [{alert_type}/{severity}] {title}")
    return alert


async def alert_company_pressure(session: AsyncSession, company, days_since_funding: Optional[int]) -> Alert:
    parts = [f"{company.name}"]
    if company.last_funding_round and days_since_funding is not None:
        parts.append(f"raised {company.last_funding_round} {days_since_funding} days ago.")
    else:
        parts.append("is under elevated pressure.")
    if company.gtm_gap_detected:
        parts.append("GTM gap detected.")
    if company.executive_turnover:
        parts.append("Executive turnover detected.")
    parts.append(f"Pressure score: {company.pressure_score}")

    return await create_alert(
        session,
        user_id=company.user_id,
        alert_type=AlertType.FUNDING_ROUND.value,
        severity=AlertSeverity.HIGH.value,
        title=f"High pressure company: {company.name}",
        message=" ".join(parts),
        action_required=True,
        action_url=f"/companies/{company.id}",
        company_id=company.id,
    )


async def alert_executive_vulnerability(session: AsyncSession, executive, company) -> Alert:
    message = f"{executive.title} showing high vulnerability (score: {executive.vulnerability_score})."
    if executive.risk_factors:
        message += f" Risk factors: {', '.join(executive.risk_factors)}."
    if executive.opportunity_type:
        message += f" Opportunity: {executive.opportunity_type}"

    return await create_alert(
        session,
        user_id=executive.user_id,
        alert_type=AlertType.EXECUTIVE_VULNERABILITY.value,
        severity=AlertSeverity.HIGH.value,
        title=f"Vulnerable executive: {executive.name} at {company.name}",
        message=message,
        action_required=True,
        action_url=f"/executives/{executive.id}",
        company_id=company.id,
        executive_id=executive.id,
    )


async def alert_competitor_activity(session: AsyncSession, activity, opportunity) -> Alert:
    severity = (
        AlertSeverity.CRITICAL.value
        if activity.threat_level == ThreatLevel.CRITICAL.value
        else AlertSeverity.HIGH.value
    )
    return await create_alert(
        session,
        user_id=opportunity.user_id,
        alert_type=AlertType.COMPETITOR_ACTIVITY.value,
        severity=severity,
        title=f"High threat competitor activity: {activity.competitor_name}",
        message=(
            f"{activity.competitor_name} has been detected with {activity.activity_type} activity "
            f'for opportunity "{opportunity.title}". Threat level: {activity.threat_level}'
        ),
        action_required=True,
        action_url=f"/opportunities/{opportunity.id}",
        opportunity_id=opportunity.id,
    )


async def alert_procurement_deadline(session: AsyncSession, procurement, days_left: int) -> Alert:
    severity = AlertSeverity.HIGH.value if days_left <= PROCUREMENT_URGENT_DAYS else AlertSeverity.MEDIUM.value
    deadline = procurement.submission_deadline.date().isoformat()
    return await create_alert(
        session,
        user_id=procurement.user_id,
        alert_type=AlertType.PROCUREMENT_MATCH.value,
        severity=severity,
        title=f"Upcoming tender deadline: {procurement.title}",
        message=(
            f"Submission deadline for {procurement.title} is {deadline}. "
            f"Region: {procurement.region}, Authority: {procurement.issuing_authority}"
        ),
        action_required=True,
        action_url=f"/procurement/{procurement.id}",
    )


async def alert_market_signal(session: AsyncSession, procurement) -> Alert:
    label = "Service Gap" if procurement.service_gap else "Bottleneck"
    return await create_alert(
        session,
        user_id=procurement.user_id,
        alert_type=AlertType.MARKET_SIGNAL.value,
        severity=AlertSeverity.HIGH.value,
        title=f"{label} Identified: {procurement.title}",
        message=(
            f"A {label.lower()} has been identified in {procurement.region}. "
            "This represents a high-leverage opportunity."
        ),
        action_required=True,
        action_url=f"/procurement/{procurement.id}",
    )


async def list_alerts(
    session: AsyncSession,
    user_id: int,
    unread_only: bool = False,
    alert_type: Optional[str] = None,
    severity: Optional[str] = None,
    since: Optional[datetime] = None,
    limit: int = 50,
) -> List[Alert]:
    stmt = select(Alert).where(Alert.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Alert.is_read.is_(False))
    if alert_type:
        stmt = stmt.where(Alert.alert_type == alert_type)
    if severity:
        stmt = stmt.where(Alert.severity == severity)
    if since:
        stmt = stmt.where(Alert.created_at >= since)
    stmt = stmt.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_alerts_for(session: AsyncSession, user_id: int, limit: int = 10, **filters) -> List[Alert]:
    """Alerts attached to a company, opportunity or executive (pass one of the *_id filters)."""
    stmt = select(Alert).where(Alert.user_id == user_id)
    for column in ("company_id", "opportunity_id", "executive_id"):
        if filters.get(column) is not None:
            stmt = stmt.where(getattr(Alert, column) == filters[column])
    if filters.get("unread_only"):
        stmt = stmt.where(Alert.is_read.is_(False))
    stmt = stmt.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def unread_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(Alert.id)).where(Alert.user_id == user_id, Alert.is_read.is_(False))
    )
    return result.scalar() or 0


async def mark_read(session: AsyncSession, user_id: int, alert_id: int, is_read: bool = True) -> Optional[Alert]:
    result = await session.execute(
        select(Alert).where(Alert.id == alert_id, Alert.user_id == user_id)
    )
    alert = result.scalar_one_or_none()
    if alert is None:
        return None
    alert.is_read = is_read
    await session.commit()
    return alert


async def mark_all_read(session: AsyncSession, user_id: int) -> int:
    """Mark every unread alert for the user as read; returns how many changed."""
    result = await session.execute(
        update(Alert)
        .where(Alert.user_id == user_id, Alert.is_read.is_(False))
        .values(is_read=True)
    )
    await session.commit()
    return result.rowcount or 0
