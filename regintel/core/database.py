# ──── Usage Guide ────
# The engine and session factory are built explicitly and handed to whoever
# needs them. The web app builds them in its lifespan and keeps them on
# app.state; scripts build their own.
#
#   engine = create_engine_from_url(settings.database_url)
#   session_factory = create_session_factory(engine)
#   async with session_scope(session_factory) as session:
#       result = await session.execute(select(Model).where(...))
#
# Routers receive a session through the get_db dependency.

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class ToDictMixin:
    """Mixin to add dictionary serialization to models."""
    def to_dict(self):
        """Convert model instance to dictionary."""
        from sqlalchemy import inspect
        import datetime
        from decimal import Decimal
        from enum import Enum

        result = {}
        for key in inspect(self).mapper.column_attrs.keys():
            value = getattr(self, key)
            if isinstance(value, datetime.datetime):
                result[key] = value.isoformat()
            elif isinstance(value, datetime.date):
                result[key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[key] = float(value)
            elif isinstance(value, Enum):
                result[key] = value.value
            else:
                result[key] = value
        return result


class Base(ToDictMixin, DeclarativeBase):
    metadata = MetaData()


def to_async_url(url: str) -> str:
    """Swap a plain database URL for its async driver variant."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def create_engine_from_url(url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(to_async_url(url), echo=echo, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def create_all(engine: AsyncEngine) -> None:
    """Create every table registered on Base.metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ──── Session Providers (FastAPI Dependencies) ────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


# ──── Context Managers ────
@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
