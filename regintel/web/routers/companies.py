"""Companies router: target companies, pressure scores and chaos indicators."""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts.service import list_alerts_for
from regintel.auth.database import User
from regintel.companies import service
from regintel.core.database import get_db
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import company_with_executives, serialize_list

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/companies",
    tags=["Companies"]
)


# --- Schemas ---

class CompanyCreate(RequestModel):
    name: str = Field(min_length=1)
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    industry: str = Field(min_length=1)
    last_funding_round: Optional[str] = None
    last_funding_amount: Optional[float] = Field(default=None, ge=0)
    last_funding_date: Optional[datetime] = None
    total_funding: Optional[float] = Field(default=None, ge=0)
    gtm_gap_detected: bool = False
    executive_turnover: bool = False
    analysis_notes: Optional[str] = None


class CompanyUpdate(UpdateModel):
    not_nullable = ("name", "industry", "gtm_gap_detected", "executive_turnover")

    name: Optional[str] = Field(default=None, min_length=1)
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    industry: Optional[str] = Field(default=None, min_length=1)
    last_funding_round: Optional[str] = None
    last_funding_amount: Optional[float] = Field(default=None, ge=0)
    last_funding_date: Optional[datetime] = None
    total_funding: Optional[float] = Field(default=None, ge=0)
    gtm_gap_detected: Optional[bool] = None
    executive_turnover: Optional[bool] = None
    analysis_notes: Optional[str] = None


# --- Endpoints ---

@router.get("", response_model=StandardResponse[dict], summary="List Companies")
async def list_companies(
    pressure: Optional[Literal["high", "medium", "low"]] = None,
    gtm_gap: Optional[bool] = None,
    days: Optional[int] = None,
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Companies ordered by pressure score, with portfolio statistics."""
    try:
        companies = await service.list_companies(
            session, user.id, pressure=pressure, gtm_gap=gtm_gap, days=days, search=search
        )
    except Exception:
        logger.exception("Failed to list companies")
        raise HTTPException(status_code=500, detail="Internal server error")

    return StandardResponse(data={
        "companies": [company_with_executives(c) for c in companies],
        "stats": service.company_stats(companies),
    })


@router.post("", response_model=StandardResponse[dict], summary="Create Company")
async def create_company(
    request: CompanyCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        company = await service.create_company(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create company")
        raise HTTPException(status_code=500, detail="Internal server error")
    return StandardResponse(data=company_with_executives(company), message="Company created")


@router.get("/{company_id}", response_model=StandardResponse[dict], summary="Company Detail")
async def get_company(
    company_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Company with executives, last 10 alerts and chaos indicators."""
    company = await service.get_company(session, user.id, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    alerts = await list_alerts_for(session, user.id, limit=10, company_id=company.id)
    return StandardResponse(data=company_with_executives(
        company,
        alerts=serialize_list(alerts),
        chaos_indicators=service.chaos_indicators(company, alerts),
    ))


@router.patch("/{company_id}", response_model=StandardResponse[dict], summary="Update Company")
async def update_company(
    company_id: int,
    request: CompanyUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        company = await service.update_company(
            session, user.id, company_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update company {company_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return StandardResponse(data=company_with_executives(company))


@router.delete("/{company_id}", response_model=StandardResponse[dict], summary="Delete Company")
async def delete_company(
    company_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_company(session, user.id, company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    return StandardResponse(data={"id": company_id}, message="Company deleted")
