"""Public service interface for the Briefings module.

Other modules (routers, scheduler, scripts) should go through these functions
rather than building BriefingGenerator themselves.
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from regintel.auth.service import list_user_ids
from regintel.briefings.generator import BriefingGenerator
from regintel.briefings.repository import BriefingRepository
from regintel.core.utils import utcnow

logger = logging.getLogger(__name__)


async def generate_briefing(
    session_factory: async_sessionmaker,
    user_id: int,
    target_date: date,
    clock: Callable[[], datetime] = utcnow,
) -> Dict[str, Any]:
    generator = BriefingGenerator(BriefingRepository(session_factory), clock=clock)
    return await generator.generate(user_id, target_date)


async def get_briefing(session_factory: async_sessionmaker, user_id: int, target_date: date) -> Optional[Dict[str, Any]]:
    """The stored digest for that day, or None if it was never generated."""
    report = await BriefingRepository(session_factory).get_report(user_id, target_date)
    return report.content if report else None


async def list_briefings(session_factory: async_sessionmaker, user_id: int, limit: int = 30) -> List[Dict[str, Any]]:
    reports = await BriefingRepository(session_factory).list_reports(user_id, limit=limit)
    return [
        {
            "id": r.id,
            "date": r.report_date.isoformat(),
            "title": r.title,
            "status": r.status,
            "action_items": len(r.content.get("action_items", [])),
            "created_at": r.created_at.isoformat() if r.created_at else None,
            "updated_at": r.updated_at.isoformat() if r.updated_at else None,
        }
        for r in reports
    ]


async def generate_for_all_users(session_factory: async_sessionmaker, target_date: date) -> Dict[str, int]:
    """Generate the day's briefing for every user. A failure for one user does not stop the rest."""
    async with session_factory() as session:
        user_ids = await list_user_ids(session)

    generated = failed = 0
    for user_id in user_ids:
        try:
            await generate_briefing(session_factory, user_id, target_date)
            generated += 1
        except Exception:
            logger.exception(f"Briefing generation failed for user {user_id}")
            failed += 1
    logger.info(f"Daily briefings for {target_date}: {generated} generated, {failed} failed")
    return {"generated": generated, "failed": failed}
