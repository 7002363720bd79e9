"""Briefings router: daily digest generation, retrieval and history."""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import async_sessionmaker

from regintel.auth.database import User
from regintel.briefings import render_markdown, service
from regintel.core.schemas import StandardResponse
from regintel.core.utils import utcnow
from regintel.web.dependencies import get_current_user, get_session_factory

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/briefings",
    tags=["Briefings"]
)


# --- Schemas ---

class BriefingRequest(BaseModel):
    date: Optional[datetime.date] = None


# --- Endpoints ---

@router.get("", response_model=StandardResponse[dict], summary="Get Briefing")
async def get_briefing(
    briefing_date: Optional[datetime.date] = Query(None, alias="date"),
    user: User = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    """The stored digest for a day (default today). `data` is null if none was generated."""
    target_date = briefing_date or utcnow().date()
    briefing = await service.get_briefing(session_factory, user.id, target_date)
    return StandardResponse(data=briefing)


@router.get("/history", response_model=StandardResponse[list], summary="Briefing History")
async def briefing_history(
    limit: int = Query(30, ge=1, le=365),
    user: User = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    return StandardResponse(data=await service.list_briefings(session_factory, user.id, limit=limit))


@router.post("/generate", response_model=StandardResponse[dict], summary="Generate Briefing")
async def generate_briefing(
    request: Optional[BriefingRequest] = None,
    user: User = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    """Generate (or regenerate) the digest for a day and store it."""
    target_date = (request.date if request else None) or utcnow().date()
    try:
        briefing = await service.generate_briefing(session_factory, user.id, target_date)
    except Exception:
        logger.exception(f"Failed to generate briefing for {target_date}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return StandardResponse(data=briefing, message="Briefing generated")


@router.get("/{briefing_date}/markdown", response_class=PlainTextResponse, summary="Briefing as Markdown")
async def briefing_markdown(
    briefing_date: datetime.date,
    user: User = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    briefing = await service.get_briefing(session_factory, user.id, briefing_date)
    if briefing is None:
        raise HTTPException(status_code=404, detail="Briefing not found")
    return PlainTextResponse(render_markdown(briefing), media_type="text/markdown")
