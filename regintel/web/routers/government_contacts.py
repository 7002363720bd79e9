"""Government contacts router."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.auth.database import User
from regintel.core.database import get_db
from regintel.core.models import Influence
from regintel.core.schemas import RequestModel, StandardResponse, UpdateModel
from regintel.procurement import service
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import contact_with_links

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/government-contacts",
    tags=["Government Contacts"]
)


class ContactCreate(RequestModel):
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    department: str = Field(min_length=1)
    role: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    influence: Influence = Influence.MEDIUM
    notes: Optional[str] = None
    opportunity_id: Optional[int] = None


class ContactUpdate(UpdateModel):
    not_nullable = ("name", "title", "department", "role", "influence")

    name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    department: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    influence: Optional[Influence] = None
    notes: Optional[str] = None
    opportunity_id: Optional[int] = None


@router.get("", response_model=StandardResponse[dict], summary="List Government Contacts")
async def list_contacts(
    opportunity_id: Optional[int] = None,
    influence: Optional[Influence] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """Contacts ordered by influence, with department and influence breakdowns."""
    try:
        contacts = await service.list_contacts(
            session,
            user.id,
            opportunity_id=opportunity_id,
            influence=influence.value if influence else None,
            department=department,
            search=search,
        )
    except Exception:
        logger.exception("Failed to list government contacts")
        raise HTTPException(status_code=500, detail="Internal server error")

    return StandardResponse(data={
        "contacts": [contact_with_links(c) for c in contacts],
        "department_summary": service.department_summary(contacts),
        "influence_distribution": service.influence_distribution(contacts),
        "total": len(contacts),
    })


@router.post("", response_model=StandardResponse[dict], summary="Create Government Contact")
async def create_contact(
    request: ContactCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        contact = await service.create_contact(session, user.id, request.model_dump())
    except Exception:
        logger.exception("Failed to create government contact")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not contact:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return StandardResponse(data=contact_with_links(contact), message="Contact created")


@router.get("/{contact_id}", response_model=StandardResponse[dict], summary="Government Contact Detail")
async def get_contact(
    contact_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    contact = await service.get_contact(session, user.id, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return StandardResponse(data=contact_with_links(contact))


@router.patch("/{contact_id}", response_model=StandardResponse[dict], summary="Update Government Contact")
async def update_contact(
    contact_id: int,
    request: ContactUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    try:
        contact = await service.update_contact(
            session, user.id, contact_id, request.model_dump(exclude_unset=True)
        )
    except Exception:
        logger.exception(f"Failed to update government contact {contact_id}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return StandardResponse(data=contact_with_links(contact))


@router.delete("/{contact_id}", response_model=StandardResponse[dict], summary="Delete Government Contact")
async def delete_contact(
    contact_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    if not await service.delete_contact(session, user.id, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return StandardResponse(data={"id": contact_id}, message="Contact deleted")
