"""
Core Module - Shared Infrastructure.
"""

from regintel.core.config import settings, Settings
from regintel.core.database import Base, get_db, session_scope
from regintel.core.schemas import StandardResponse

__all__ = [
    "settings",
    "Settings",
    "Base",
    "get_db",
    "session_scope",
    "StandardResponse",
]
