"""
Database model for alerts.

Alerts are raised by the write paths in the domain services when a score or
threat level crosses its threshold, and by procurement intake.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from regintel.core.database import Base
from regintel.core.models import AlertSeverity
from regintel.core.utils import utcnow


class Alert(Base):
    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    alert_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(20), default=AlertSeverity.MEDIUM.value, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    action_required: Mapped[bool] = mapped_column(Boolean, default=False)
    action_url: Mapped[Optional[str]] = mapped_column(String(500))

    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("companies.id", ondelete="SET NULL"), index=True)
    opportunity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("opportunities.id", ondelete="SET NULL"), index=True)
    executive_id: Mapped[Optional[int]] = mapped_column(ForeignKey("executives.id", ondelete="SET NULL"), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    company: Mapped[Optional["Company"]] = relationship("Company", back_populates="alerts")
    opportunity: Mapped[Optional["Opportunity"]] = relationship("Opportunity", back_populates="alerts")
    executive: Mapped[Optional["Executive"]] = relationship("Executive", back_populates="alerts")

    __table_args__ = (
        Index('idx_alert_user_read_created', 'user_id', 'is_read', 'created_at'),
    )

    def __repr__(self):
        return f"<Alert(id={self.id}, type='{self.alert_type}', severity='{self.severity}')>"
