"""Database model for generated reports (daily briefings)."""
from datetime import date, datetime
from typing import Any, Dict

from sqlalchemy import Date, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from regintel.core.database import Base
from regintel.core.models import ReportType
from regintel.core.utils import utcnow


class Report(Base):
    """One stored digest per (user, report type, day)."""
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    report_type: Mapped[str] = mapped_column(String(50), default=ReportType.DAILY_BRIEFING.value)
    report_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="completed")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('user_id', 'report_type', 'report_date', name='uq_report_user_type_date'),
    )

    def __repr__(self):
        return f"<Report(id={self.id}, type='{self.report_type}', date={self.report_date})>"
