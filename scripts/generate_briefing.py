"""
Generate daily briefings from the command line.

Usage:
  python scripts/generate_briefing.py                       # every user, today
  python scripts/generate_briefing.py --date 2026-03-02
  python scripts/generate_briefing.py --email analyst@example.com --markdown
"""
import argparse
import asyncio
import logging
import sys
from datetime import date

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from regintel.auth.service import get_user_by_email
from regintel.briefings import render_markdown
from regintel.briefings.service import generate_briefing, generate_for_all_users
from regintel.core.config import settings
from regintel.core.database import create_engine_from_url, create_session_factory
from regintel.core.utils import utcnow

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("regintel.generate_briefing")

console = Console()


def print_briefing(briefing: dict, as_markdown: bool):
    if as_markdown:
        console.print(Markdown(render_markdown(briefing)))
        return

    table = Table(title=f"Daily Briefing {briefing['date']}")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    for key, value in briefing["stats"].items():
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)
    console.print(f"\n[bold]Summary:[/bold] {briefing['executive_summary']}")

    if briefing["action_items"]:
        actions = Table(title="Action Items")
        actions.add_column("Priority")
        actions.add_column("Title")
        actions.add_column("Description")
        for item in briefing["action_items"]:
            actions.add_row(item["priority"].upper(), item["title"], item["description"])
        console.print(actions)


async def main(args) -> int:
    target_date = date.fromisoformat(args.date) if args.date else utcnow().date()
    engine = create_engine_from_url(settings.database_url)
    session_factory = create_session_factory(engine)

    try:
        if args.email is None:
            result = await generate_for_all_users(session_factory, target_date)
            console.print(
                f"[green]{result['generated']} briefings generated[/green], "
                f"[red]{result['failed']} failed[/red] for {target_date}"
            )
            return 1 if result["failed"] else 0

        async with session_factory() as session:
            user = await get_user_by_email(session, args.email)
        if user is None:
            console.print(f"[red]No user with email {args.email}[/red]")
            return 1

        briefing = await generate_briefing(session_factory, user.id, target_date)
        print_briefing(briefing, args.markdown)
        return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate RegIntel daily briefings")
    parser.add_argument("--date", help="Briefing date (YYYY-MM-DD, default today UTC)")
    parser.add_argument("--email", help="Only generate for this user")
    parser.add_argument("--markdown", action="store_true", help="Print the briefing as Markdown")
    sys.exit(asyncio.run(main(parser.parse_args())))
