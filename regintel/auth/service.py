"""Public service interface for the Auth module."""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from regintel.auth.database import User
from regintel.auth.security import hash_password, verify_password

logger = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def authenticate(session: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, otherwise None."""
    user = await get_user_by_email(session, email)
    if user is None:
        # Burn the same hashing cost so unknown emails are not distinguishable by timing
        verify_password(password, hash_password("dummy"))
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def create_user(session: AsyncSession, email: str, password: str, name: Optional[str] = None) -> User:
    user = User(email=email.lower(), name=name, password_hash=hash_password(password))
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def ensure_admin_user(session: AsyncSession, email: str, password: str, name: Optional[str] = None) -> User:
    """Create the bootstrap admin account if it does not exist yet."""
    user = await get_user_by_email(session, email)
    if user is not None:
        return user
    user = await create_user(session, email, password, name)
    await session.commit()
    logger.info(f"Created bootstrap user {user.email}")
    return user


async def list_user_ids(session: AsyncSession) -> List[int]:
    result = await session.execute(select(User.id).order_by(User.id))
    return list(result.scalars().all())
