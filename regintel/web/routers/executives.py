"""Executives router: executive profiles and vulnerability scores."""

import logging
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts.service import list_alerts_for
from regintel.auth.database import User
from regintel.companies import service
from regintel.core.database import get_db
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import executive_with_company, serialize_list

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/executives",
    tags=["Executives"]
)


# --- Schemas ---

class ExecutiveCreate(RequestModel):
    company_id: int
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    linkedin_url: Optional[str] = None
    email: Optional[str] = None
    risk_factors: List[str] = []
    desperation_signals: List[str] = []
    last_linkedin_post: Optional[datetime] = None
    notes: Optional[str] = None
    opportunity_type: Optional[str] = None


class ExecutiveUpdate(UpdateModel):
    not_nullable = ("name", "title", "risk_factors", "desperation_signals")

    name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    linkedin_url: Optional[str] = None
    email: Optional[str] = None
    risk_factors: Optional[List[str]] = None
    desperation_signals: Optional[List[str]] = None
    last_linkedin_post: Optional[datetime] = None
    notes: Optional[str] = None
    opportunity_type: Optional[str] = None


# --- Endpoints ---

@router.get("", response_model=StandardResponse[dict], summary="List Executives")
async def list_executives(
    company_id: Optional[int] = None,
    vulnerability: Optional[Literal["high", "medium", "low"]] = None,
    title: Optional[str] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Executives ordered by vulnerability, with title and risk factor distributions."""
    try:
        executives = await service.list_executives(
            session, user.id, company_id=company_id, vulnerability=vulnerability, title=title
        )
    except Exception:
        logger.exception("Failed to list executives")
        raise HTTPException(status_code=500, detail="Internal server error")

    return StandardResponse(data={
        "executives": [executive_with_company(e) for e in executives],
        "stats": service.executive_stats(executives),
    })


@router.post("", response_model=StandardResponse[dict], summary="Create Executive")
async def create_executive(
    request: ExecutiveCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        executive = await service.create_executive(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create executive")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not executive:
        raise HTTPException(status_code=404, detail="Company not found")
    return StandardResponse(data=executive_with_company(executive), message="Executive created")


@router.get("/{executive_id}", response_model=StandardResponse[dict], summary="Executive Detail")
async def get_executive(
    executive_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    executive = await service.get_executive(session, user.id, executive_id)
    if not executive:
        raise HTTPException(status_code=404, detail="Executive not found")
    alerts = await list_alerts_for(session, user.id, limit=10, executive_id=executive.id)
    data = executive_with_company(executive)
    data["alerts"] = serialize_list(alerts)
    return StandardResponse(data=data)


@router.patch("/{executive_id}", response_model=StandardResponse[dict], summary="Update Executive")
async def update_executive(
    executive_id: int,
    request: ExecutiveUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        executive = await service.update_executive(
            session, user.id, executive_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update executive {executive_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not executive:
        raise HTTPException(status_code=404, detail="Executive not found")
    return StandardResponse(data=executive_with_company(executive))


@router.delete("/{executive_id}", response_model=StandardResponse[dict], summary="Delete Executive")
async def delete_executive(
    executive_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_executive(session, user.id, executive_id):
        raise HTTPException(status_code=404, detail="Executive not found")
    return StandardResponse(data={"id": executive_id}, message="Executive deleted")
