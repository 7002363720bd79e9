"""Shared dependencies for RegIntel API routers."""

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from regintel.auth.database import User
from regintel.auth.service import authenticate
from regintel.core.database import get_db

logger = logging.getLogger(__name__)

security = HTTPBasic()


# --- Auth ---

async def get_current_user(
    credentials: HTTPBasicCredentials = Depends(security),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Authenticate the request via HTTP Basic Auth against the users table."""
    user = await authenticate(session, credentials.username, credentials.password)
    if user is None:
        logger.warning(f"Rejected credentials for {credentials.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return user


# --- Persistence ---

def get_session_factory(request: Request) -> async_sessionmaker:
    """The app-wide session factory, for callers that open their own sessions."""
    return request.app.state.session_factory
