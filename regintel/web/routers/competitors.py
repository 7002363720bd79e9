"""Competitors router: competitor activity against tracked opportunities."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import ThreatLevel
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.opportunities import service
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import activity_with_opportunity

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/competitors",
    tags=["Competitors"]
)


# --- Schemas ---

class CompetitorActivityCreate(RequestModel):
    opportunity_id: int
    competitor_name: str = Field(min_length=1)
    activity_type: str = Field(min_length=1)
    activity_date: datetime
    description: str = Field(min_length=1)
    source_url: Optional[str] = None
    threat_level: ThreatLevel = ThreatLevel.LOW


class CompetitorActivityUpdate(UpdateModel):
    not_nullable = ("competitor_name", "activity_type", "activity_date", "description", "threat_level")

    competitor_name: Optional[str] = Field(default=None, min_length=1)
    activity_type: Optional[str] = Field(default=None, min_length=1)
    activity_date: Optional[datetime] = None
    description: Optional[str] = Field(default=None, min_length=1)
    source_url: Optional[str] = None
    threat_level: Optional[ThreatLevel] = None


# --- Endpoints ---

@router.get("", response_model=StandardResponse[dict], summary="List Competitor Activity")
async def list_competitor_activity(
    opportunity_id: Optional[int] = None,
    threat_level: Optional[ThreatLevel] = None,
    competitor_name: Optional[str] = None,
    days: Optional[int] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Activity newest first, plus a per-competitor summary."""
    try:
        activities = await service.list_competitor_activities(
            session,
            user.id,
            opportunity_id=opportunity_id,
            threat_level=threat_level.value if threat_level else None,
            competitor_name=competitor_name,
            days=days,
        )
    except Exception:
        logger.exception("Failed to list competitor activity")
        raise HTTPException(status_code=500, detail="Internal server error")

    return StandardResponse(data={
        "activities": [activity_with_opportunity(a) for a in activities],
        "summary": service.competitor_summary(activities),
        "total": len(activities),
    })


@router.post("", response_model=StandardResponse[dict], summary="Record Competitor Activity")
async def create_competitor_activity(
    request: CompetitorActivityCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        activity = await service.create_competitor_activity(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create competitor activity")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not activity:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data=activity_with_opportunity(activity), message="Competitor activity recorded")


@router.get("/{activity_id}", response_model=StandardResponse[dict], summary="Competitor Activity Detail")
async def get_competitor_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    activity = await service.get_competitor_activity(session, user.id, activity_id)
    if not activity:
        raise HTTPException(status_code=404, detail="Competitor activity not found")
    return StandardResponse(data=activity_with_opportunity(activity))


@router.patch("/{activity_id}", response_model=StandardResponse[dict], summary="Update Competitor Activity")
async def update_competitor_activity(
    activity_id: int,
    request: CompetitorActivityUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        activity = await service.update_competitor_activity(
            session, user.id, activity_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update competitor activity {activity_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not activity:
        raise HTTPException(status_code=404, detail="Competitor activity not found")
    return StandardResponse(data=activity_with_opportunity(activity))


@router.delete("/{activity_id}", response_model=StandardResponse[dict], summary="Delete Competitor Activity")
async def delete_competitor_activity(
    activity_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_competitor_activity(session, user.id, activity_id):
        raise HTTPException(status_code=404, detail="Competitor activity not found")
    return StandardResponse(data={"id": activity_id}, message="Competitor activity deleted")
