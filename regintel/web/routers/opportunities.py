"""Opportunities router: regulatory opportunity pipeline and notes."""

import logging
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts.service import list_alerts_for
from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import (
    CompetitionLevel,
    MarketGap,
    OpportunityStatus,
    Priority,
    RevenuePotential,
)
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.opportunities import service
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import opportunity_detail, serialize

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/opportunities",
    tags=["Opportunities"]
)


# --- Schemas ---

class OpportunityCreate(RequestModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    regulation_type: str = Field(min_length=1)
    regulation_reference: Optional[str] = None
    implementation_date: Optional[datetime] = None
    deadline_date: Optional[datetime] = None
    legislative_stage: Optional[str] = None
    last_legislative_update: Optional[datetime] = None
    target_industries: List[str] = []
    affected_countries: List[str] = []
    estimated_market_size: Optional[float] = Field(default=None, ge=0)
    compliance_requirements: Optional[str] = None
    status: OpportunityStatus = OpportunityStatus.IDENTIFIED
    priority: Priority = Priority.MEDIUM
    revenue_potential: Optional[RevenuePotential] = None
    market_gap: Optional[MarketGap] = None
    competition_level: Optional[CompetitionLevel] = None


class OpportunityUpdate(UpdateModel):
    not_nullable = (
        "title", "description", "regulation_type", "target_industries", "affected_countries", "status", "priority",
    )

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    regulation_type: Optional[str] = Field(default=None, min_length=1)
    regulation_reference: Optional[str] = None
    implementation_date: Optional[datetime] = None
    deadline_date: Optional[datetime] = None
    legislative_stage: Optional[str] = None
    last_legislative_update: Optional[datetime] = None
    target_industries: Optional[List[str]] = None
    affected_countries: Optional[List[str]] = None
    estimated_market_size: Optional[float] = Field(default=None, ge=0)
    compliance_requirements: Optional[str] = None
    status: Optional[OpportunityStatus] = None
    priority: Optional[Priority] = None
    revenue_potential: Optional[RevenuePotential] = None
    market_gap: Optional[MarketGap] = None
    competition_level: Optional[CompetitionLevel] = None


class NoteCreate(RequestModel):
    content: str = Field(min_length=1)


# --- Endpoints ---

@router.get("", response_model=StandardResponse[list], summary="List Opportunities")
async def list_opportunities(
    status: Optional[OpportunityStatus] = None,
    priority: Optional[Priority] = None,
    sort_by: str = "created_at",
    order: Literal["asc", "desc"] = "desc",
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        opportunities = await service.list_opportunities(
            session,
            user.id,
            status=status.value if status else None,
            priority=priority.value if priority else None,
            sort_by=sort_by,
            order=order,
        )
    except Exception:
        logger.exception("Failed to list opportunities")
        raise HTTPException(status_code=500, detail="Internal server error")

    data = [
        serialize(o, extra={"counts": service.opportunity_counts(o)})
        for o in opportunities
    ]
    return StandardResponse(data=data)


@router.post("", response_model=StandardResponse[dict], summary="Create Opportunity")
async def create_opportunity(
    request: OpportunityCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        opportunity = await service.create_opportunity(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create opportunity")
        raise HTTPException(status_code=500, detail="Internal server error")
    return StandardResponse(data=serialize(opportunity), message="Opportunity created")


@router.get("/{opportunity_id}", response_model=StandardResponse[dict], summary="Opportunity Detail")
async def get_opportunity(
    opportunity_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Opportunity with competitors, notes, documents, contacts, research tasks and unread alerts."""
    opportunity = await service.get_opportunity(session, user.id, opportunity_id, detail=True)
    if not opportunity:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    alerts = await list_alerts_for(
        session, user.id, limit=50, opportunity_id=opportunity.id, unread_only=True
    )
    return StandardResponse(data=opportunity_detail(opportunity, alerts))


@router.patch("/{opportunity_id}", response_model=StandardResponse[dict], summary="Update Opportunity")
async def update_opportunity(
    opportunity_id: int,
    request: OpportunityUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        opportunity = await service.update_opportunity(
            session, user.id, opportunity_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update opportunity {opportunity_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not opportunity:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data=serialize(opportunity))


@router.delete("/{opportunity_id}", response_model=StandardResponse[dict], summary="Delete Opportunity")
async def delete_opportunity(
    opportunity_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_opportunity(session, user.id, opportunity_id):
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data={"id": opportunity_id}, message="Opportunity deleted")


@router.post("/{opportunity_id}/notes", response_model=StandardResponse[dict], summary="Add Note")
async def add_note(
    opportunity_id: int,
    request: NoteCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        note = await service.add_note(session, user.id, opportunity_id, request.content)
    except Exception:
        logger.exception(f"Failed to add note to opportunity {opportunity_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not note:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data=serialize(note), message="Note added")
