"""
Persistence adapter for the briefing generator.

BriefingRepository is constructed from an explicit session factory. Each fetch
opens its own session so the generator can run them concurrently with
asyncio.gather; an AsyncSession must never be shared between concurrent tasks.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload, with_loader_criteria

from regintel.alerts.database import Alert
from regintel.briefings.database import Report
from regintel.companies.database import Company, Executive
from regintel.core.models import ACTIVE_PROCUREMENT_STATUSES, ReportType
from regintel.opportunities.database import CompetitorActivity, Opportunity
from regintel.procurement.database import Procurement

logger = logging.getLogger(__name__)


class BriefingRepository:
    """Time-windowed reads and report storage, scoped to one user per call."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def new_opportunities(self, user_id: int, since: datetime, until: datetime, limit: int = 5) -> List[Opportunity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Opportunity)
                .where(
                    Opportunity.user_id == user_id,
                    Opportunity.created_at >= since,
                    Opportunity.created_at <= until,
                )
                .order_by(Opportunity.opportunity_score.desc(), Opportunity.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def competitor_activities(
        self, user_id: int, since: datetime, until: datetime, limit: int = 10
    ) -> List[CompetitorActivity]:
        # Ownership runs through the parent opportunity
        async with self.session_factory() as session:
            result = await session.execute(
                select(CompetitorActivity)
                .join(Opportunity, CompetitorActivity.opportunity_id == Opportunity.id)
                .where(
                    Opportunity.user_id == user_id,
                    CompetitorActivity.activity_date >= since,
                    CompetitorActivity.activity_date <= until,
                )
                .order_by(CompetitorActivity.activity_date.desc(), CompetitorActivity.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def upcoming_procurements(
        self, user_id: int, since: datetime, until: datetime, limit: int = 5
    ) -> List[Procurement]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Procurement)
                .where(
                    Procurement.user_id == user_id,
                    Procurement.status.in_(ACTIVE_PROCUREMENT_STATUSES),
                    Procurement.submission_deadline >= since,
                    Procurement.submission_deadline <= until,
                )
                .order_by(Procurement.submission_deadline.asc(), Procurement.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def vulnerable_executives(
        self, user_id: int, since: datetime, until: datetime, min_score: int = 60, limit: int = 10
    ) -> List[Executive]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Executive)
                .options(selectinload(Executive.company))
                .where(
                    Executive.user_id == user_id,
                    Executive.updated_at >= since,
                    Executive.updated_at <= until,
                    Executive.vulnerability_score >= min_score,
                )
                .order_by(Executive.vulnerability_score.desc(), Executive.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def unread_alerts(self, user_id: int, since: datetime, until: datetime) -> List[Alert]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Alert)
                .where(
                    Alert.user_id == user_id,
                    Alert.is_read.is_(False),
                    Alert.created_at >= since,
                    Alert.created_at <= until,
                )
                .order_by(Alert.created_at.desc(), Alert.id.desc())
            )
            return list(result.scalars().all())

    async def pressured_companies(
        self, user_id: int, min_pressure: int = 70, min_vulnerability: int = 60, limit: int = 5
    ) -> List[Company]:
        """Companies under pressure, each with only its vulnerable executives loaded."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Company)
                .options(
                    selectinload(Company.executives),
                    with_loader_criteria(Executive, Executive.vulnerability_score >= min_vulnerability),
                )
                .where(Company.user_id == user_id, Company.pressure_score >= min_pressure)
                .order_by(Company.pressure_score.desc(), Company.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    # --- Reports ---

    async def save_report(
        self,
        user_id: int,
        report_date: date,
        title: str,
        content: Dict[str, Any],
        report_type: str = ReportType.DAILY_BRIEFING.value,
    ) -> Report:
        """Store the digest for (user, type, day), replacing an earlier one for the same day."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Report).where(
                    Report.user_id == user_id,
                    Report.report_type == report_type,
                    Report.report_date == report_date,
                )
            )
            report = result.scalar_one_or_none()
            if report is None:
                report = Report(user_id=user_id, report_type=report_type, report_date=report_date)
                session.add(report)
            report.title = title
            report.content = content
            report.status = "completed"
            await session.commit()
            logger.info(f"Saved {report_type} for user {user_id} on {report_date}")
            return report

    async def get_report(
        self,
        user_id: int,
        report_date: date,
        report_type: str = ReportType.DAILY_BRIEFING.value,
    ) -> Optional[Report]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Report).where(
                    Report.user_id == user_id,
                    Report.report_type == report_type,
                    Report.report_date == report_date,
                )
            )
            return result.scalar_one_or_none()

    async def list_reports(
        self,
        user_id: int,
        limit: int = 30,
        report_type: str = ReportType.DAILY_BRIEFING.value,
    ) -> List[Report]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Report)
                .where(Report.user_id == user_id, Report.report_type == report_type)
                .order_by(Report.report_date.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
