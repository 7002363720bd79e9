"""Dashboard router: headline counters across the CRM."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts.database import Alert
from regintel.auth.database import User
from regintel.companies.database import Company, Executive
from regintel.core.database import get_db
from regintel.core.models import ACTIVE_PROCUREMENT_STATUSES, OpportunityStatus, TaskStatus
from regintel.core.schemas import StandardResponse
from regintel.core.utils import utcnow
from regintel.opportunities.database import Opportunity, ResearchTask
from regintel.procurement.database import Procurement
from regintel.web.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"]
)

CLOSED_OPPORTUNITY_STATUSES = (
    OpportunityStatus.WON.value,
    OpportunityStatus.LOST.value,
    OpportunityStatus.ARCHIVED.value,
)
DEADLINE_WINDOW_DAYS = 14
HIGH_SCORE = 70


async def _count(session: AsyncSession, model, *criteria) -> int:
    result = await session.execute(select(func.count(model.id)).where(*criteria))
    return result.scalar() or 0


@router.get("/stats", response_model=StandardResponse[dict], summary="Dashboard Stats")
async def get_dashboard_stats(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Get summary statistics for the dashboard."""
    now = utcnow()

    return StandardResponse(data={
        "total_opportunities": await _count(session, Opportunity, Opportunity.user_id == user.id),
        "active_opportunities": await _count(
            session, Opportunity,
            Opportunity.user_id == user.id,
            Opportunity.status.notin_(CLOSED_OPPORTUNITY_STATUSES),
        ),
        "high_score_opportunities": await _count(
            session, Opportunity,
            Opportunity.user_id == user.id,
            Opportunity.opportunity_score >= HIGH_SCORE,
        ),
        "tracked_companies": await _count(session, Company, Company.user_id == user.id),
        "high_pressure_companies": await _count(
            session, Company,
            Company.user_id == user.id,
            Company.pressure_score >= HIGH_SCORE,
        ),
        "vulnerable_executives": await _count(
            session, Executive,
            Executive.user_id == user.id,
            Executive.vulnerability_score >= HIGH_SCORE,
        ),
        "open_procurements": await _count(
            session, Procurement,
            Procurement.user_id == user.id,
            Procurement.status.in_(ACTIVE_PROCUREMENT_STATUSES),
        ),
        "upcoming_deadlines": await _count(
            session, Procurement,
            Procurement.user_id == user.id,
            Procurement.status.in_(ACTIVE_PROCUREMENT_STATUSES),
            Procurement.submission_deadline >= now,
            Procurement.submission_deadline <= now + timedelta(days=DEADLINE_WINDOW_DAYS),
        ),
        "pending_research_tasks": await _count(
            session, ResearchTask,
            ResearchTask.user_id == user.id,
            ResearchTask.status != TaskStatus.COMPLETED.value,
        ),
        "unread_alerts": await _count(
            session, Alert,
            Alert.user_id == user.id,
            Alert.is_read.is_(False),
        ),
    })
