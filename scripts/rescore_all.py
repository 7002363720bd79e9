"""
Recompute every stored score (pressure, vulnerability, opportunity).

Scores that depend on elapsed time drift without any write; the scheduler
runs this pass daily, and this script runs it on demand.

Usage:
  python scripts/rescore_all.py
"""
import argparse
import asyncio
import logging

from rich.console import Console
from rich.table import Table

from regintel.core.config import settings
from regintel.core.database import create_engine_from_url, create_session_factory
from regintel.scoring.rescoring import rescore_all_users

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("regintel.rescore_all")


async def main():
    engine = create_engine_from_url(settings.database_url)
    try:
        results = await rescore_all_users(create_session_factory(engine))
    finally:
        await engine.dispose()

    table = Table(title="Rescore Pass")
    table.add_column("User", justify="right", style="cyan")
    table.add_column("Companies", justify="right")
    table.add_column("Executives", justify="right")
    table.add_column("Opportunities", justify="right")
    for user_id, changed in results.items():
        table.add_row(
            str(user_id),
            str(changed["companies"]),
            str(changed["executives"]),
            str(changed["opportunities"]),
        )
    Console().print(table)


if __name__ == "__main__":
    argparse.ArgumentParser(description="Recompute all RegIntel scores").parse_args()
    asyncio.run(main())
