import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import async_sessionmaker

from regintel.core.config import Settings
from regintel.core.utils import utcnow

logger = logging.getLogger(__name__)


async def run_daily_briefings(session_factory: async_sessionmaker):
    """Job function: generate today's briefing for every user."""
    logger.info("Running scheduled job: Daily Briefings")
    try:
        from regintel.briefings.service import generate_for_all_users
        await generate_for_all_users(session_factory, utcnow().date())
    except Exception as e:
        logger.error(f"Daily briefing job failed: {e}", exc_info=True)


async def run_daily_rescore(session_factory: async_sessionmaker):
    """
    Job function: recompute every derived score.

    Funding recency and posting recency decay with time, so stored scores go
    stale without any writes.
    """
    logger.info("Running scheduled job: Daily Rescore")
    try:
        from regintel.scoring.rescoring import rescore_all_users
        await rescore_all_users(session_factory)
    except Exception as e:
        logger.error(f"Daily rescore job failed: {e}", exc_info=True)


def start_scheduler(session_factory: async_sessionmaker, settings: Settings) -> AsyncIOScheduler:
    """Build, configure and start the scheduler for this app instance."""
    scheduler = AsyncIOScheduler()

    # Rescore first so the briefing reads fresh scores
    scheduler.add_job(
        run_daily_rescore,
        CronTrigger(hour=settings.rescore_hour, minute=0, timezone="UTC"),
        args=[session_factory],
        id='daily_rescore',
        replace_existing=True
    )

    scheduler.add_job(
        run_daily_briefings,
        CronTrigger(hour=settings.briefing_hour, minute=0, timezone="UTC"),
        args=[session_factory],
        id='daily_briefings',
        replace_existing=True
    )

    scheduler.start()
    logger.info(
        f"APScheduler started. Rescore {settings.rescore_hour}:00, "
        f"daily briefings {settings.briefing_hour}:00 (UTC)."
    )
    return scheduler


def stop_scheduler(scheduler: AsyncIOScheduler):
    logger.info("Stopping APScheduler...")
    scheduler.shutdown(wait=False)
