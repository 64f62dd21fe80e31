"""FastAPI dependencies for the acting user and service wiring."""
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from archledger.core.database import get_session_factory
from archledger.services.activity_service import ActivityService

ANONYMOUS_ACTOR = "anonymous"


async def get_current_actor(
    x_user_id: str | None = Header(default=None, alias="X-User-ID"),
) -> str:
    """Identify the acting user from the ``X-User-ID`` header.

    Authentication happens upstream; the header value is trusted as-is and
    recorded in ``created_by`` fields.

    Returns:
        The stripped header value, or ``"anonymous"`` when absent or blank
    """
    if x_user_id is None:
        return ANONYMOUS_ACTOR
    actor = x_user_id.strip()
    return actor[:255] if actor else ANONYMOUS_ACTOR


def get_activity_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ActivityService:
    """Activity writer bound to its own sessions, outside the request transaction."""
    return ActivityService(session_factory)
