"""Procurement router: public tenders, deadlines and service-gap signals."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import ProcurementStatus
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.procurement import service
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import procurement_with_contacts

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/procurement",
    tags=["Procurement"]
)


# --- Schemas ---

class ProcurementCreate(RequestModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    procurement_number: Optional[str] = None
    region: str = Field(min_length=1)
    issuing_authority: str = Field(min_length=1)
    publish_date: datetime
    submission_deadline: Optional[datetime] = None
    estimated_value: Optional[float] = Field(default=None, ge=0)
    currency: str = "EUR"
    status: ProcurementStatus = ProcurementStatus.OPEN
    service_gap: bool = False
    bottleneck: bool = False
    gap_analysis: Optional[str] = None
    proposal_draft: Optional[str] = None
    win_probability: Optional[int] = Field(default=None, ge=0, le=100)
    contact_ids: List[int] = []


class ProcurementUpdate(UpdateModel):
    not_nullable = (
        "title", "description", "region", "issuing_authority", "publish_date",
        "currency", "status", "service_gap", "bottleneck", "contact_ids",
    )

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    procurement_number: Optional[str] = None
    region: Optional[str] = Field(default=None, min_length=1)
    issuing_authority: Optional[str] = Field(default=None, min_length=1)
    publish_date: Optional[datetime] = None
    submission_deadline: Optional[datetime] = None
    estimated_value: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    status: Optional[ProcurementStatus] = None
    service_gap: Optional[bool] = None
    bottleneck: Optional[bool] = None
    gap_analysis: Optional[str] = None
    proposal_draft: Optional[str] = None
    win_probability: Optional[int] = Field(default=None, ge=0, le=100)
    contact_ids: Optional[List[int]] = None


# --- Endpoints ---

@router.get("", response_model=StandardResponse[dict], summary="List Procurements")
async def list_procurements(
    region: Optional[str] = None,
    status: Optional[ProcurementStatus] = None,
    service_gap: Optional[bool] = None,
    bottleneck: Optional[bool] = None,
    days: Optional[int] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Tenders ordered by deadline (undated last), with stats and a per-region summary."""
    try:
        procurements = await service.list_procurements(
            session,
            user.id,
            region=region,
            status=status.value if status else None,
            service_gap=service_gap,
            bottleneck=bottleneck,
            days=days,
        )
    except Exception:
        logger.exception("Failed to list procurements")
        raise HTTPException(status_code=500, detail="Internal server error")

    return StandardResponse(data={
        "procurements": [procurement_with_contacts(p) for p in procurements],
        "stats": service.procurement_stats(procurements),
        "region_summary": service.region_summary(procurements),
    })


@router.post("", response_model=StandardResponse[dict], summary="Create Procurement")
async def create_procurement(
    request: ProcurementCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        procurement = await service.create_procurement(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create procurement")
        raise HTTPException(status_code=500, detail="Internal server error")
    return StandardResponse(data=procurement_with_contacts(procurement), message="Procurement created")


@router.get("/{procurement_id}", response_model=StandardResponse[dict], summary="Procurement Detail")
async def get_procurement(
    procurement_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    procurement = await service.get_procurement(session, user.id, procurement_id)
    if not procurement:
        raise HTTPException(status_code=404, detail="Procurement not found")
    return StandardResponse(data=procurement_with_contacts(procurement))


@router.patch("/{procurement_id}", response_model=StandardResponse[dict], summary="Update Procurement")
async def update_procurement(
    procurement_id: int,
    request: ProcurementUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        procurement = await service.update_procurement(
            session, user.id, procurement_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update procurement {procurement_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not procurement:
        raise HTTPException(status_code=404, detail="Procurement not found")
    return StandardResponse(data=procurement_with_contacts(procurement))


@router.delete("/{procurement_id}", response_model=StandardResponse[dict], summary="Delete Procurement")
async def delete_procurement(
    procurement_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_procurement(session, user.id, procurement_id):
        raise HTTPException(status_code=404, detail="Procurement not found")
    return StandardResponse(data={"id": procurement_id}, message="Procurement deleted")
