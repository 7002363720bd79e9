"""
Public service interface for the Opportunities module.

Covers opportunities and what hangs off them: notes, competitor activity and
research tasks. Writes to an opportunity recompute lead_time_months and
opportunity_score; competitor activity that reaches HIGH or CRITICAL raises a
COMPETITOR_ACTIVITY alert.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from regintel.alerts.service import alert_competitor_activity
from regintel.core.models import TaskStatus, ThreatLevel
from regintel.core.utils import apply_changes, utcnow
from regintel.opportunities.database import (
    CompetitorActivity,
    Opportunity,
    OpportunityNote,
    ResearchTask,
)
from regintel.scoring import lead_time_months, opportunity_score

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at": Opportunity.created_at,
    "updated_at": Opportunity.updated_at,
    "opportunity_score": Opportunity.opportunity_score,
    "implementation_date": Opportunity.implementation_date,
    "deadline_date": Opportunity.deadline_date,
    "title": Opportunity.title,
    "priority": Opportunity.priority,
}

ALERTING_THREAT_LEVELS = (ThreatLevel.HIGH, ThreatLevel.CRITICAL)


def _rescore(opportunity: Opportunity, now: Optional[datetime] = None) -> int:
    opportunity.lead_time_months = lead_time_months(opportunity.implementation_date, now)
    opportunity.opportunity_score = opportunity_score(opportunity)
    return opportunity.opportunity_score


# --- Opportunities ---

async def get_opportunity(
    session: AsyncSession,
    user_id: int,
    opportunity_id: int,
    detail: bool = False,
) -> Optional[Opportunity]:
    stmt = select(Opportunity).where(Opportunity.id == opportunity_id, Opportunity.user_id == user_id)
    if detail:
        stmt = stmt.options(
            selectinload(Opportunity.competitors),
            selectinload(Opportunity.notes),
            selectinload(Opportunity.documents),
            selectinload(Opportunity.government_contacts),
            selectinload(Opportunity.research_tasks),
        )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_opportunities(
    session: AsyncSession,
    user_id: int,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    sort_by: str = "created_at",
    order: str = "desc",
) -> List[Opportunity]:
    column = SORTABLE_FIELDS.get(sort_by, Opportunity.created_at)
    stmt = (
        select(Opportunity)
        .options(
            selectinload(Opportunity.competitors),
            selectinload(Opportunity.notes),
            selectinload(Opportunity.documents),
            selectinload(Opportunity.research_tasks),
        )
        .where(Opportunity.user_id == user_id)
    )
    if status:
        stmt = stmt.where(Opportunity.status == status)
    if priority:
        stmt = stmt.where(Opportunity.priority == priority)
    stmt = stmt.order_by(column.asc() if order == "asc" else column.desc(), Opportunity.id)

    result = await session.execute(stmt)
    return list(result.scalars().all())


def opportunity_counts(opportunity: Opportunity) -> Dict[str, int]:
    """Child record counts for list views. Expects the collections to be loaded."""
    return {
        "competitors": len(opportunity.competitors),
        "notes": len(opportunity.notes),
        "documents": len(opportunity.documents),
        "pending_tasks": sum(
            1 for t in opportunity.research_tasks if t.status == TaskStatus.PENDING.value
        ),
    }


async def create_opportunity(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Opportunity:
    opportunity = Opportunity(user_id=user_id)
    apply_changes(opportunity, data)
    _rescore(opportunity, now)
    session.add(opportunity)
    await session.commit()
    logger.info(f"Created opportunity {opportunity.id} score={opportunity.opportunity_score}")
    return opportunity


async def update_opportunity(
    session: AsyncSession,
    user_id: int,
    opportunity_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[Opportunity]:
    opportunity = await get_opportunity(session, user_id, opportunity_id)
    if opportunity is None:
        return None
    apply_changes(opportunity, data)
    _rescore(opportunity, now)
    await session.commit()
    return opportunity


async def delete_opportunity(session: AsyncSession, user_id: int, opportunity_id: int) -> bool:
    opportunity = await get_opportunity(session, user_id, opportunity_id)
    if opportunity is None:
        return False
    await session.delete(opportunity)
    await session.commit()
    logger.info(f"Deleted opportunity {opportunity_id}")
    return True


async def add_note(
    session: AsyncSession,
    user_id: int,
    opportunity_id: int,
    content: str,
) -> Optional[OpportunityNote]:
    opportunity = await get_opportunity(session, user_id, opportunity_id)
    if opportunity is None:
        return None
    note = OpportunityNote(opportunity_id=opportunity.id, content=content)
    session.add(note)
    await session.commit()
    return note


async def rescore_opportunities(
    session: AsyncSession,
    user_id: int,
    now: Optional[datetime] = None,
) -> int:
    """Recompute lead time and score for every opportunity; returns how many changed."""
    result = await session.execute(select(Opportunity).where(Opportunity.user_id == user_id))
    changed = 0
    for opportunity in result.scalars().all():
        before = (opportunity.lead_time_months, opportunity.opportunity_score)
        _rescore(opportunity, now)
        if (opportunity.lead_time_months, opportunity.opportunity_score) != before:
            changed += 1
    await session.commit()
    logger.info(f"Rescored opportunities for user {user_id}: {changed} changed")
    return changed


# --- Competitor activity ---

def _is_alerting(threat_level: Optional[str]) -> bool:
    return threat_level in {level.value for level in ALERTING_THREAT_LEVELS}


def threat_escalated(old_level: Optional[str], new_level: str) -> bool:
    """True when an update moves the threat level from below HIGH to HIGH or above."""
    if not _is_alerting(new_level):
        return False
    if old_level is None:
        return True
    return ThreatLevel(old_level).rank < ThreatLevel.HIGH.rank


async def get_competitor_activity(
    session: AsyncSession,
    user_id: int,
    activity_id: int,
) -> Optional[CompetitorActivity]:
    result = await session.execute(
        select(CompetitorActivity)
        .join(Opportunity, CompetitorActivity.opportunity_id == Opportunity.id)
        .options(selectinload(CompetitorActivity.opportunity))
        .where(CompetitorActivity.id == activity_id, Opportunity.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_competitor_activities(
    session: AsyncSession,
    user_id: int,
    opportunity_id: Optional[int] = None,
    threat_level: Optional[str] = None,
    competitor_name: Optional[str] = None,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[CompetitorActivity]:
    stmt = (
        select(CompetitorActivity)
        .join(Opportunity, CompetitorActivity.opportunity_id == Opportunity.id)
        .options(selectinload(CompetitorActivity.opportunity))
        .where(Opportunity.user_id == user_id)
    )
    if opportunity_id is not None:
        stmt = stmt.where(CompetitorActivity.opportunity_id == opportunity_id)
    if threat_level:
        stmt = stmt.where(CompetitorActivity.threat_level == threat_level)
    if competitor_name:
        stmt = stmt.where(CompetitorActivity.competitor_name.ilike(f"%{competitor_name}%"))
    if days is not None:
        stmt = stmt.where(CompetitorActivity.activity_date >= (now or utcnow()) - timedelta(days=days))
    stmt = stmt.order_by(CompetitorActivity.activity_date.desc(), CompetitorActivity.id.desc())

    result = await session.execute(stmt)
    return list(result.scalars().all())


def competitor_summary(activities: List[CompetitorActivity]) -> List[Dict[str, Any]]:
    """Group activities per competitor: counts, opportunities touched, latest date, threat mix."""
    summary: Dict[str, Dict[str, Any]] = {}
    for activity in activities:
        entry = summary.setdefault(activity.competitor_name, {
            "name": activity.competitor_name,
            "total_activities": 0,
            "opportunities": [],
            "latest_activity": None,
            "threat_levels": Counter({level.value: 0 for level in ThreatLevel}),
        })
        entry["total_activities"] += 1
        title = activity.opportunity.title
        if title not in entry["opportunities"]:
            entry["opportunities"].append(title)
        entry["threat_levels"][activity.threat_level] += 1
        if entry["latest_activity"] is None or activity.activity_date > entry["latest_activity"]:
            entry["latest_activity"] = activity.activity_date

    for entry in summary.values():
        entry["threat_levels"] = dict(entry["threat_levels"])
        entry["latest_activity"] = entry["latest_activity"].isoformat() if entry["latest_activity"] else None
    return list(summary.values())


async def create_competitor_activity(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
) -> Optional[CompetitorActivity]:
    """Record competitor activity on one of the user's opportunities. None if the opportunity is unknown."""
    opportunity = await get_opportunity(session, user_id, data["opportunity_id"])
    if opportunity is None:
        return None

    activity = CompetitorActivity()
    apply_changes(activity, data)
    activity.opportunity = opportunity
    session.add(activity)
    await session.flush()

    if threat_escalated(None, activity.threat_level):
        await alert_competitor_activity(session, activity, opportunity)
    await session.commit()
    return activity


async def update_competitor_activity(
    session: AsyncSession,
    user_id: int,
    activity_id: int,
    data: Dict[str, Any],
) -> Optional[CompetitorActivity]:
    activity = await get_competitor_activity(session, user_id, activity_id)
    if activity is None:
        return None

    old_level = activity.threat_level
    apply_changes(activity, data)
    if threat_escalated(old_level, activity.threat_level):
        await alert_competitor_activity(session, activity, activity.opportunity)
    await session.commit()
    return activity


async def delete_competitor_activity(session: AsyncSession, user_id: int, activity_id: int) -> bool:
    activity = await get_competitor_activity(session, user_id, activity_id)
    if activity is None:
        return False
    await session.delete(activity)
    await session.commit()
    return True


# --- Research tasks ---

async def get_research_task(session: AsyncSession, user_id: int, task_id: int) -> Optional[ResearchTask]:
    result = await session.execute(
        select(ResearchTask).where(ResearchTask.id == task_id, ResearchTask.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_research_tasks(
    session: AsyncSession,
    user_id: int,
    opportunity_id: Optional[int] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
) -> List[ResearchTask]:
    stmt = select(ResearchTask).where(ResearchTask.user_id == user_id)
    if opportunity_id is not None:
        stmt = stmt.where(ResearchTask.opportunity_id == opportunity_id)
    if status:
        stmt = stmt.where(ResearchTask.status == status)
    if priority:
        stmt = stmt.where(ResearchTask.priority == priority)
    # Open work first, soonest due first
    stmt = stmt.order_by(ResearchTask.due_date.is_(None), ResearchTask.due_date, ResearchTask.created_at.desc())

    result = await session.execute(stmt)
    return list(result.scalars().all())


def _stamp_completion(task: ResearchTask, now: Optional[datetime] = None) -> None:
    if task.status == TaskStatus.COMPLETED.value:
        if task.completed_at is None:
            task.completed_at = now or utcnow()
    else:
        task.completed_at = None


async def create_research_task(
    session: AsyncSession,
    user_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[ResearchTask]:
    """Create a task, optionally linked to one of the user's opportunities. None if that link is unknown."""
    if data.get("opportunity_id") is not None:
        if await get_opportunity(session, user_id, data["opportunity_id"]) is None:
            return None
    task = ResearchTask(user_id=user_id)
    apply_changes(task, data)
    _stamp_completion(task, now)
    session.add(task)
    await session.commit()
    return task


async def update_research_task(
    session: AsyncSession,
    user_id: int,
    task_id: int,
    data: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Optional[ResearchTask]:
    task = await get_research_task(session, user_id, task_id)
    if task is None:
        return None
    if data.get("opportunity_id") is not None:
        if await get_opportunity(session, user_id, data["opportunity_id"]) is None:
            return None
    apply_changes(task, data)
    _stamp_completion(task, now)
    await session.commit()
    return task


async def delete_research_task(session: AsyncSession, user_id: int, task_id: int) -> bool:
    task = await get_research_task(session, user_id, task_id)
    if task is None:
        return False
    await session.delete(task)
    await session.commit()
    return True
