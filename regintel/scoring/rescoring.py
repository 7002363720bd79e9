"""Batch rescoring of stored scores, for the scheduler and operator scripts."""
import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from regintel.auth.service import list_user_ids
from regintel.companies.service import rescore_companies
from regintel.core.utils import utcnow
from regintel.opportunities.service import rescore_opportunities

logger = logging.getLogger(__name__)


async def rescore_user(
    session_factory: async_sessionmaker,
    user_id: int,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Rescore one user's executives, companies and opportunities. Returns changed-row counts."""
    now = now or utcnow()
    async with session_factory() as session:
        changed = await rescore_companies(session, user_id, now)
    async with session_factory() as session:
        changed["opportunities"] = await rescore_opportunities(session, user_id, now)
    return changed


async def rescore_all_users(session_factory: async_sessionmaker, now: Optional[datetime] = None) -> Dict[int, Dict[str, int]]:
    async with session_factory() as session:
        user_ids = await list_user_ids(session)

    results = {}
    for user_id in user_ids:
        results[user_id] = await rescore_user(session_factory, user_id, now)
    logger.info(f"Rescore pass complete for {len(user_ids)} users")
    return results
