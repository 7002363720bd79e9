"""Alerts router: listing and read-state management."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.alerts import service
from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import AlertSeverity, AlertType
from regintel.core.schemas import StandardResponse
from regintel.core.utils import to_naive_utc
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import serialize, serialize_list

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/alerts",
    tags=["Alerts"]
)


class AlertReadUpdate(BaseModel):
    is_read: bool = True


@router.get("", response_model=StandardResponse[list], summary="List Alerts")
async def list_alerts(
    unread_only: bool = False,
    alert_type: Optional[AlertType] = None,
    severity: Optional[AlertSeverity] = None,
    since: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=500),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    alerts = await service.list_alerts(
        session,
        user.id,
        unread_only=unread_only,
        alert_type=alert_type.value if alert_type else None,
        severity=severity.value if severity else None,
        since=to_naive_utc(since) if since else None,
        limit=limit,
    )
    return StandardResponse(data=serialize_list(alerts))


@router.get("/unread-count", response_model=StandardResponse[dict], summary="Unread Alert Count")
async def get_unread_count(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    return StandardResponse(data={"unread": await service.unread_count(session, user.id)})


@router.post("/mark-all-read", response_model=StandardResponse[dict], summary="Mark All Alerts Read")
async def mark_all_read(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        updated = await service.mark_all_read(session, user.id)
    except Exception:
        logger.exception("Failed to mark alerts read")
        raise HTTPException(status_code=500, detail="Internal server error")
    return StandardResponse(data={"updated": updated})


@router.patch("/{alert_id}", response_model=StandardResponse[dict], summary="Mark Alert Read")
async def update_alert(
    alert_id: int,
    request: AlertReadUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    alert = await service.mark_read(session, user.id, alert_id, is_read=request.is_read)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")
    return StandardResponse(data=serialize(alert))
