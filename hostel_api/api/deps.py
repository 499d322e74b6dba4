# hostel_api/api/deps.py

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from hostel_api.core.config import settings
from hostel_api.core.database import get_session
from hostel_api.services.roster_service import RosterClient


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Roster (Redis)
# ------------------------------------------------------------
@lru_cache
def _roster_client(url: str) -> RosterClient:
    return RosterClient.from_url(url)


async def get_roster() -> RosterClient | None:
    """
    The roster is only needed for roster-gated signup. Returns None when it
    is not in use or not configured; signup reports the latter as a 500.
    """
    if settings.SIGNUP_MODE != "roster" or not settings.REDIS_URL:
        return None
    return _roster_client(settings.REDIS_URL)
