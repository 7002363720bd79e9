"""
Database models for target companies and their executives.

Pressure and vulnerability scores are derived values; they are recomputed by
regintel.companies.service on every write and by the daily rescoring job.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from regintel.core.database import Base
from regintel.core.utils import utcnow


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    website: Mapped[Optional[str]] = mapped_column(String(500))
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500))
    industry: Mapped[str] = mapped_column(String(255), nullable=False)

    # Funding history
    last_funding_round: Mapped[Optional[str]] = mapped_column(String(100))
    last_funding_amount: Mapped[Optional[float]] = mapped_column(Float)
    last_funding_date: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    total_funding: Mapped[Optional[float]] = mapped_column(Float)

    # Pressure flags
    gtm_gap_detected: Mapped[bool] = mapped_column(Boolean, default=False)
    executive_turnover: Mapped[bool] = mapped_column(Boolean, default=False)

    pressure_score: Mapped[int] = mapped_column(Integer, default=0, index=True)  # 0-100
    analysis_notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    executives: Mapped[List["Executive"]] = relationship(
        "Executive",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="Executive.vulnerability_score.desc()",
    )
    alerts: Mapped[List["Alert"]] = relationship("Alert", back_populates="company")

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', pressure={self.pressure_score})>"


class Executive(Base):
    __tablename__ = "executives"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500))
    email: Mapped[Optional[str]] = mapped_column(String(255))

    risk_factors: Mapped[List[str]] = mapped_column(JSON, default=list)
    desperation_signals: Mapped[List[str]] = mapped_column(JSON, default=list)
    last_linkedin_post: Mapped[Optional[datetime]] = mapped_column(DateTime)

    vulnerability_score: Mapped[int] = mapped_column(Integer, default=0, index=True)  # 0-100
    # Score before the most recent change, for briefing deltas
    previous_vulnerability_score: Mapped[Optional[int]] = mapped_column(Integer)

    notes: Mapped[Optional[str]] = mapped_column(Text)
    opportunity_type: Mapped[Optional[str]] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, index=True)

    company: Mapped["Company"] = relationship("Company", back_populates="executives")
    alerts: Mapped[List["Alert"]] = relationship("Alert", back_populates="executive")

    def __repr__(self):
        return f"<Executive(id={self.id}, name='{self.name}', vulnerability={self.vulnerability_score})>"
