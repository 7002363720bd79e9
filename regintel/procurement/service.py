"""
Public service interface for the Procurement module.

Procurement intake raises alerts: a submission deadline within 30 days gives a
PROCUREMENT_MATCH alert, a flagged service gap or bottleneck gives a
MARKET_SIGNAL alert.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import case, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from regintel.alerts.service import (
    PROCUREMENT_MATCH_DAYS,
    alert_market_signal,
    alert_procurement_deadline,
)
from regintel.core.models import Influence, ProcurementStatus
from regintel.core.utils import apply_changes, days_until, utcnow
from regintel.opportunities.service import get_opportunity
from regintel.procurement.database import GovernmentContact, Procurement

logger = logging.getLogger(__name__)

UPCOMING_DEADLINE_DAYS = 7

INFLUENCE_RANK = case(
    (GovernmentContact.influence == Influence.KEY_DECISION_MAKER.value, 3),
    (GovernmentContact.influence == Influence.HIGH.value, 2),
    (GovernmentContact.influence == Influence.MEDIUM.value, 1),
    else_=0,
)


# --- Procurements ---

async def get_procurement(session: AsyncSession, user_id: int, procurement_id: int) -> Optional[Procurement]:
    result = await session.execute(
        select(Procurement)
        .options(selectinload(Procurement.contacts), selectinload(Procurement.documents))
        .where(Procurement.id == procurement_id, Procurement.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_procurements(
    session: AsyncSession,
    user_id: int,
    region: Optional[str] = None,
    status: Optional[str] = None,
    service_gap: Optional[bool] = None,
    bottleneck: Optional[bool] = None,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Procurement]:
    stmt = (
        select(Procurement)
        .options(selectinload(Procurement.contacts), selectinload(Procurement.documents))
        .where(Procurement.user_id == user_id)
    )
    if region:
        stmt = stmt.where(Procurement.region == region)
    if status:
        stmt = stmt.where(Procurement.status == status)
    if service_gap:
        stmt = stmt.where(Procurement.service_gap.is_(True))
    if bottleneck:
        stmt = stmt.where(Procurement.bottleneck.is_(True))
    if days is not None:
        stmt = stmt.where(Procurement.publish_date >= (now or utcnow()) - timedelta(days=days))
    stmt = stmt.order_by(
        Procurement.submission_deadline.is_(None),
        Procurement.submission_deadline,
        Procurement.id,
    )

    result = await session.execute(stmt)
    return list(result.scalars().all())


def procurement_stats(procurements: List[Procurement], now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    week_ahead = now + timedelta(days=UPCOMING_DEADLINE_DAYS)
    return {
        "total": len(procurements),
        "open": sum(1 for p in procurements if p.status == ProcurementStatus.OPEN.value),
        "total_value": sum(p.estimated_value or 0 for p in procurements),
        "service_gaps": sum(1 for p in procurements if p.service_gap),
        "bottlenecks": sum(1 for p in procurements if p.bottleneck),
        "upcoming_deadlines": sum(
            1 for p in procurements
            if p.submission_deadline and now <= p.submission_deadline <= week_ahead
        ),
    }


def region_summary(procurements: List[Procurement]) -> List[Dict[str, Any]]:
    summary: Dict[str, Dict[str, Any]] = {}
    for p in procurements:
        entry = summary.setdefault(p.region, {
            "region": p.region, "count": 0, "value": 0, "open": 0, "service_gaps": 0,
        })
        entry["count"] += 1
        entry["value"] += p.estimated_value or 0
        if p.status == ProcurementStatus.OPEN.value:
            entry["open"] += 1
        if p.service_gap:
            entry["service_gaps"] += 1
    return list(summary.values())


async def _load_contacts(session: AsyncSession, user_id: int, contact_ids: List[int]) -> List[GovernmentContact]:
    if not contact_ids:
        return []
    result = await session.execute(
        select(GovernmentContact).where(
            GovernmentContact.id.in_(contact_ids), GovernmentContact.user_id == user_id
        )
    )
    return list(result.scalars().all())


async def create_procurement(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Procurement:
    data = dict(data)
    contact_ids = data.pop("contact_ids", None) or []

    procurement = Procurement(user_id=user_id)
    apply_changes(procurement, data)
    procurement.contacts = await _load_contacts(session, user_id, contact_ids)
    procurement.documents = []
    session.add(procurement)
    await session.flush()

    days_left = days_until(procurement.submission_deadline, now)
    if days_left is not None and 0 < days_left <= PROCUREMENT_MATCH_DAYS:
        await alert_procurement_deadline(session, procurement, days_left)
    if procurement.service_gap or procurement.bottleneck:
        await alert_market_signal(session, procurement)

    await session.commit()
    logger.info(f"Created procurement {procurement.id} ({procurement.region})")
    return procurement


async def update_procurement(
    session: AsyncSession,
    user_id: int,
    procurement_id: int,
    data: Dict[str, Any],
) -> Optional[Procurement]:
    procurement = await get_procurement(session, user_id, procurement_id)
    if procurement is None:
        return None
    data = dict(data)
    if "contact_ids" in data:
        procurement.contacts = await _load_contacts(session, user_id, data.pop("contact_ids") or [])
    apply_changes(procurement, data)
    await session.commit()
    return procurement


async def delete_procurement(session: AsyncSession, user_id: int, procurement_id: int) -> bool:
    procurement = await get_procurement(session, user_id, procurement_id)
    if procurement is None:
        return False
    await session.delete(procurement)
    await session.commit()
    return True


# --- Government contacts ---

async def get_contact(session: AsyncSession, user_id: int, contact_id: int) -> Optional[GovernmentContact]:
    result = await session.execute(
        select(GovernmentContact)
        .options(selectinload(GovernmentContact.opportunity), selectinload(GovernmentContact.procurements))
        .where(GovernmentContact.id == contact_id, GovernmentContact.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_contacts(
    session: AsyncSession,
    user_id: int,
    opportunity_id: Optional[int] = None,
    influence: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
) -> List[GovernmentContact]:
    stmt = (
        select(GovernmentContact)
        .options(selectinload(GovernmentContact.opportunity), selectinload(GovernmentContact.procurements))
        .where(GovernmentContact.user_id == user_id)
    )
    if opportunity_id is not None:
        stmt = stmt.where(GovernmentContact.opportunity_id == opportunity_id)
    if influence:
        stmt = stmt.where(GovernmentContact.influence == influence)
    if department:
        stmt = stmt.where(GovernmentContact.department.ilike(f"%{department}%"))
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(
            GovernmentContact.name.ilike(pattern),
            GovernmentContact.title.ilike(pattern),
            GovernmentContact.department.ilike(pattern),
        ))
    stmt = stmt.order_by(INFLUENCE_RANK.desc(), GovernmentContact.name)

    result = await session.execute(stmt)
    return list(result.scalars().all())


def department_summary(contacts: List[GovernmentContact]) -> List[Dict[str, Any]]:
    summary: Dict[str, Dict[str, Any]] = {}
    for c in contacts:
        entry = summary.setdefault(c.department, {
            "department": c.department, "count": 0, "key_decision_makers": 0, "with_contact": 0,
        })
        entry["count"] += 1
        if c.influence == Influence.KEY_DECISION_MAKER.value:
            entry["key_decision_makers"] += 1
        if c.email or c.phone:
            entry["with_contact"] += 1
    return list(summary.values())


def influence_distribution(contacts: List[GovernmentContact]) -> Dict[str, int]:
    counts = Counter(c.influence for c in contacts)
    return {level.value: counts.get(level.value, 0) for level in Influence}


async def create_contact(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
) -> Optional[GovernmentContact]:
    """Create a contact. None when the linked opportunity is not one of the user's."""
    if data.get("opportunity_id") is not None:
        if await get_opportunity(session, user_id, data["opportunity_id"]) is None:
            return None
    contact = GovernmentContact(user_id=user_id)
    apply_changes(contact, data)
    session.add(contact)
    await session.commit()
    return await get_contact(session, user_id, contact.id)


async def update_contact(
    session: AsyncSession,
    user_id: int,
    contact_id: int,
    data: Dict[str, Any],
) -> Optional[GovernmentContact]:
    contact = await get_contact(session, user_id, contact_id)
    if contact is None:
        return None
    if data.get("opportunity_id") is not None:
        if await get_opportunity(session, user_id, data["opportunity_id"]) is None:
            return None
    apply_changes(contact, data)
    await session.commit()
    return await get_contact(session, user_id, contact_id)


async def delete_contact(session: AsyncSession, user_id: int, contact_id: int) -> bool:
    contact = await get_contact(session, user_id, contact_id)
    if contact is None:
        return False
    await session.delete(contact)
    await session.commit()
    return True
