"""
Create a RegIntel user account.

Usage:
  python scripts/create_user.py analyst@example.com --name "Jo Analyst"
"""
import argparse
import asyncio
import getpass
import logging
import sys

from rich.console import Console

from regintel.auth.service import create_user, get_user_by_email
from regintel.core.config import settings
from regintel.core.database import create_all, create_engine_from_url, create_session_factory

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("regintel.create_user")

console = Console()


async def main(args) -> int:
    password = args.password or getpass.getpass("Password: ")
    if not password:
        console.print("[red]Password must not be empty[/red]")
        return 1

    engine = create_engine_from_url(settings.database_url)
    try:
        await create_all(engine)
        session_factory = create_session_factory(engine)
        async with session_factory() as session:
            if await get_user_by_email(session, args.email):
                console.print(f"[yellow]User {args.email} already exists[/yellow]")
                return 1
            user = await create_user(session, args.email, password, args.name)
            await session.commit()
    finally:
        await engine.dispose()

    console.print(f"[green]Created user {user.email} (id {user.id})[/green]")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a RegIntel user")
    parser.add_argument("email")
    parser.add_argument("--name")
    parser.add_argument("--password", help="Prompted for when omitted")
    sys.exit(asyncio.run(main(parser.parse_args())))
