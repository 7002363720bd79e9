"""
Database models for regulatory opportunities and the records hanging off them:
competitor activity, notes, documents and research tasks.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from regintel.core.database import Base
from regintel.core.models import (
    OpportunityStatus,
    Priority,
    TaskPriority,
    TaskStatus,
    ThreatLevel,
)
from regintel.core.utils import utcnow


class Opportunity(Base):
    __tablename__ = "opportunities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Regulatory metadata
    regulation_type: Mapped[str] = mapped_column(String(255), nullable=False)
    regulation_reference: Mapped[Optional[str]] = mapped_column(String(255))
    implementation_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    deadline_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    legislative_stage: Mapped[Optional[str]] = mapped_column(String(100))
    last_legislative_update: Mapped[Optional[datetime]] = mapped_column(DateTime)
    target_industries: Mapped[List[str]] = mapped_column(JSON, default=list)
    affected_countries: Mapped[List[str]] = mapped_column(JSON, default=list)
    estimated_market_size: Mapped[Optional[float]] = mapped_column(Float)
    compliance_requirements: Mapped[Optional[str]] = mapped_column(Text)

    # Pipeline state and ordinal assessments
    status: Mapped[str] = mapped_column(String(20), default=OpportunityStatus.IDENTIFIED.value, index=True)
    priority: Mapped[str] = mapped_column(String(10), default=Priority.MEDIUM.value, index=True)
    revenue_potential: Mapped[Optional[str]] = mapped_column(String(20))
    market_gap: Mapped[Optional[str]] = mapped_column(String(20))
    competition_level: Mapped[Optional[str]] = mapped_column(String(20))

    lead_time_months: Mapped[Optional[int]] = mapped_column(Integer)
    opportunity_score: Mapped[int] = mapped_column(Integer, default=0, index=True)  # 0-100

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    competitors: Mapped[List["CompetitorActivity"]] = relationship(
        "CompetitorActivity", back_populates="opportunity", cascade="all, delete-orphan"
    )
    notes: Mapped[List["OpportunityNote"]] = relationship(
        "OpportunityNote", back_populates="opportunity", cascade="all, delete-orphan"
    )
    documents: Mapped[List["Document"]] = relationship(
        "Document", back_populates="opportunity", cascade="all, delete-orphan"
    )
    research_tasks: Mapped[List["ResearchTask"]] = relationship(
        "ResearchTask", back_populates="opportunity", cascade="all, delete-orphan"
    )
    government_contacts: Mapped[List["GovernmentContact"]] = relationship(
        "GovernmentContact", back_populates="opportunity"
    )
    alerts: Mapped[List["Alert"]] = relationship("Alert", back_populates="opportunity")

    __table_args__ = (
        Index('idx_opportunity_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Opportunity(id={self.id}, title='{self.title[:30]}', score={self.opportunity_score})>"


class CompetitorActivity(Base):
    __tablename__ = "competitor_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    opportunity_id: Mapped[int] = mapped_column(ForeignKey("opportunities.id", ondelete="CASCADE"), index=True)

    competitor_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    activity_type: Mapped[str] = mapped_column(String(100), nullable=False)
    activity_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[Optional[str]] = mapped_column(String(500))
    threat_level: Mapped[str] = mapped_column(String(20), default=ThreatLevel.LOW.value, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    opportunity: Mapped["Opportunity"] = relationship("Opportunity", back_populates="competitors")


class OpportunityNote(Base):
    __tablename__ = "opportunity_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    opportunity_id: Mapped[int] = mapped_column(ForeignKey("opportunities.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    opportunity: Mapped["Opportunity"] = relationship("Opportunity", back_populates="notes")


class Document(Base):
    """A document attached to an opportunity or a procurement."""
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    opportunity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("opportunities.id", ondelete="CASCADE"), index=True)
    procurement_id: Mapped[Optional[int]] = mapped_column(ForeignKey("procurements.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    doc_type: Mapped[Optional[str]] = mapped_column(String(50))  # 'regulation', 'tender', 'proposal', 'analysis'
    url: Mapped[Optional[str]] = mapped_column(String(1000))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    opportunity: Mapped[Optional["Opportunity"]] = relationship("Opportunity", back_populates="documents")
    procurement: Mapped[Optional["Procurement"]] = relationship("Procurement", back_populates="documents")


class ResearchTask(Base):
    __tablename__ = "research_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    opportunity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("opportunities.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    priority: Mapped[str] = mapped_column(String(10), default=TaskPriority.MEDIUM.value)
    status: Mapped[str] = mapped_column(String(20), default=TaskStatus.PENDING.value, index=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    opportunity: Mapped[Optional["Opportunity"]] = relationship("Opportunity", back_populates="research_tasks")
