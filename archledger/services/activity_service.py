"""Activity service for the project activity feed."""
import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from archledger.core.structured_logging import log_json
from archledger.models.activity import Activity
from archledger.models.enums import ActivityType

logger = logging.getLogger(__name__)


class ActivityService:
    """Best-effort writer for activity feed entries.

    Entries are written in a session of their own after the mutation they
    describe has committed, so a failed write never rolls back or fails the
    mutation. Failures are logged and dropped.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize activity service.

        Args:
            session_factory: Factory for the session each entry is written in
        """
        self.session_factory = session_factory

    async def log(
        self,
        project_id: UUID,
        type: ActivityType,
        data: Optional[dict[str, Any]] = None,
    ) -> Optional[Activity]:
        """Record an activity entry.

        Args:
            project_id: Project the activity belongs to
            type: Kind of activity
            data: JSON payload (ids, titles, commit details)

        Returns:
            Created Activity, or None if the write failed
        """
        try:
            async with self.session_factory() as session:
                activity = Activity(project_id=project_id, type=type, data=data or {})
                session.add(activity)
                await session.commit()
                return activity
        except Exception as exc:
            log_json(
                logger,
                logging.ERROR,
                "activity_log_failed",
                project_id=str(project_id),
                activity_type=type.value,
                error=str(exc),
            )
            return None

    async def list_for_project(
        self,
        project_id: UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Activity], int]:
        """Page through a project's activity feed, newest first.

        Returns:
            The requested page and the total number of entries
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(Activity)
                .where(Activity.project_id == project_id)
                .order_by(Activity.created_at.desc(), Activity.id.desc())
                .limit(limit)
                .offset(offset)
            )
            total = await session.scalar(
                select(func.count()).select_from(Activity).where(Activity.project_id == project_id)
            )
            return list(result.scalars().all()), total or 0
