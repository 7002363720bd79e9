"""Research router: research tasks, optionally tied to an opportunity."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import TaskPriority, TaskStatus
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.opportunities import service
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import serialize, serialize_list

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/research-tasks",
    tags=["Research"]
)


class ResearchTaskCreate(RequestModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    opportunity_id: Optional[int] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None


class ResearchTaskUpdate(UpdateModel):
    not_nullable = ("title", "priority", "status")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    opportunity_id: Optional[int] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None


@router.get("", response_model=StandardResponse[list], summary="List Research Tasks")
async def list_research_tasks(
    opportunity_id: Optional[int] = None,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    tasks = await service.list_research_tasks(
        session,
        user.id,
        opportunity_id=opportunity_id,
        status=status.value if status else None,
        priority=priority.value if priority else None,
    )
    return StandardResponse(data=serialize_list(tasks))


@router.post("", response_model=StandardResponse[dict], summary="Create Research Task")
async def create_research_task(
    request: ResearchTaskCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        task = await service.create_research_task(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create research task")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not task:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data=serialize(task), message="Research task created")


@router.get("/{task_id}", response_model=StandardResponse[dict], summary="Research Task Detail")
async def get_research_task(
    task_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    task = await service.get_research_task(session, user.id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Research task not found")
    return StandardResponse(data=serialize(task))


@router.patch("/{task_id}", response_model=StandardResponse[dict], summary="Update Research Task")
async def update_research_task(
    task_id: int,
    request: ResearchTaskUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Moving a task to completed stamps completed_at; moving it back clears it."""
    try:
        task = await service.update_research_task(
            session, user.id, task_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update research task {task_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not task:
        raise HTTPException(status_code=404, detail="Research task not found")
    return StandardResponse(data=serialize(task))


@router.delete("/{task_id}", response_model=StandardResponse[dict], summary="Delete Research Task")
async def delete_research_task(
    task_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_research_task(session, user.id, task_id):
        raise HTTPException(status_code=404, detail="Research task not found")
    return StandardResponse(data={"id": task_id}, message="Research task deleted")
