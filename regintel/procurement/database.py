"""Database models for public procurement tenders and government contacts."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from regintel.core.database import Base
from regintel.core.models import Influence, ProcurementStatus
from regintel.core.utils import utcnow


procurement_contacts = Table(
    "procurement_contacts",
    Base.metadata,
    Column("procurement_id", ForeignKey("procurements.id", ondelete="CASCADE"), primary_key=True),
    Column("contact_id", ForeignKey("government_contacts.id", ondelete="CASCADE"), primary_key=True),
)


class Procurement(Base):
    __tablename__ = "procurements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    procurement_number: Mapped[Optional[str]] = mapped_column(String(100))
    region: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    issuing_authority: Mapped[str] = mapped_column(String(255), nullable=False)

    publish_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    submission_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    estimated_value: Mapped[Optional[float]] = mapped_column(Float)
    currency: Mapped[str] = mapped_column(String(10), default="EUR")
    status: Mapped[str] = mapped_column(String(20), default=ProcurementStatus.OPEN.value, index=True)

    service_gap: Mapped[bool] = mapped_column(Boolean, default=False)
    bottleneck: Mapped[bool] = mapped_column(Boolean, default=False)
    gap_analysis: Mapped[Optional[str]] = mapped_column(Text)
    proposal_draft: Mapped[Optional[str]] = mapped_column(Text)
    win_probability: Mapped[Optional[int]] = mapped_column(Integer)  # 0-100

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    contacts: Mapped[List["GovernmentContact"]] = relationship(
        "GovernmentContact", secondary=procurement_contacts, back_populates="procurements"
    )
    documents: Mapped[List["Document"]] = relationship(
        "Document", back_populates="procurement", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Procurement(id={self.id}, title='{self.title[:30]}', status='{self.status}')>"


class GovernmentContact(Base):
    __tablename__ = "government_contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    opportunity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("opportunities.id", ondelete="SET NULL"), index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500))
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    influence: Mapped[str] = mapped_column(String(30), default=Influence.MEDIUM.value, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    opportunity: Mapped[Optional["Opportunity"]] = relationship("Opportunity", back_populates="government_contacts")
    procurements: Mapped[List["Procurement"]] = relationship(
        "Procurement", secondary=procurement_contacts, back_populates="contacts"
    )
