"""GitHub commit sync for connected repositories."""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from archledger.core.config import Settings, get_settings
from archledger.core.database import insert_ignore_duplicates
from archledger.core.encryption import decrypt
from archledger.core.metrics import GITHUB_SYNC_TOTAL
from archledger.core.structured_logging import log_json
from archledger.models.base import utcnow
from archledger.models.enums import ActivityType
from archledger.models.git_repository import GitCommit, GitRepository
from archledger.services.activity_service import ActivityService
from archledger.services.github_client import GitHubClient, GitHubCommit, GitHubRateLimitError

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    repository_id: UUID
    success: bool
    new_commits: int = 0
    error: Optional[str] = None


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


class GitHubSyncService:
    """Pulls new commits for connected repositories into the commit store.

    Holds no global state; the schedule belongs to Celery beat.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        client_factory: Callable[[str], GitHubClient] = GitHubClient,
        settings: Optional[Settings] = None,
    ):
        """Initialize sync service.

        Args:
            session_factory: Factory for per-repository sessions
            client_factory: Builds a GitHub client from a decrypted access token
            settings: Application settings
        """
        self.session_factory = session_factory
        self.client_factory = client_factory
        self.settings = settings or get_settings()
        self.activity = ActivityService(session_factory)

    async def _store(self, session: AsyncSession, repository: GitRepository) -> list[GitHubCommit]:
        token = decrypt(repository.access_token)

        since = await session.scalar(
            select(func.max(GitCommit.committed_at)).where(GitCommit.repository_id == repository.id)
        )
        since = _as_utc(since or repository.created_at)

        async with self.client_factory(token) as client:
            commits = await client.get_commits(
                repository.owner,
                repository.name,
                since=since,
                per_page=self.settings.github_max_commits_per_sync,
            )

        stored = []
        for commit in commits:
            inserted = await insert_ignore_duplicates(
                session,
                GitCommit,
                {
                    "repository_id": repository.id,
                    "sha": commit.sha,
                    "message": commit.message,
                    "author": commit.author,
                    "author_email": commit.author_email,
                    "committed_at": commit.committed_at,
                    "url": commit.url,
                },
                ["repository_id", "sha"],
            )
            if inserted:
                stored.append(commit)

        repository.last_synced_at = utcnow()
        return stored

    async def sync_repository(self, repository_id: UUID) -> SyncResult:
        """Fetch and store the commits a repository gained since its last sync.

        Failures are logged and reported in the result, never raised.
        """
        try:
            async with self.session_factory() as session:
                repository = await session.get(GitRepository, repository_id)
                if repository is None:
                    log_json(logger, logging.WARNING, "github_sync_repository_missing",
                             repository_id=str(repository_id))
                    GITHUB_SYNC_TOTAL.labels(outcome="failed").inc()
                    return SyncResult(repository_id, success=False, error="Repository not found")

                project_id = repository.project_id
                full_name = repository.full_name
                stored = await self._store(session, repository)
                await session.commit()
        except Exception as exc:
            GITHUB_SYNC_TOTAL.labels(outcome="failed").inc()
            log_json(
                logger,
                logging.ERROR,
                "github_sync_failed",
                repository_id=str(repository_id),
                rate_limited=isinstance(exc, GitHubRateLimitError),
                error=str(exc),
                exception=exc.__class__.__name__,
            )
            return SyncResult(repository_id, success=False, error=str(exc))

        for commit in stored:
            await self.activity.log(
                project_id,
                ActivityType.GIT_COMMIT,
                {
                    "sha": commit.sha,
                    "message": commit.message,
                    "author": commit.author,
                    "url": commit.url,
                },
            )

        GITHUB_SYNC_TOTAL.labels(outcome="success").inc()
        log_json(
            logger,
            logging.INFO,
            "github_sync_done",
            repository=full_name,
            new_commits=len(stored),
        )
        return SyncResult(repository_id, success=True, new_commits=len(stored))

    async def due_repository_ids(self) -> list[UUID]:
        """Repositories never synced or last synced longer than the interval ago."""
        cutoff = utcnow() - timedelta(seconds=self.settings.github_sync_interval_seconds)
        async with self.session_factory() as session:
            result = await session.execute(
                select(GitRepository.id)
                .where(
                    or_(
                        GitRepository.last_synced_at.is_(None),
                        GitRepository.last_synced_at < cutoff,
                    )
                )
                .order_by(GitRepository.created_at.asc())
            )
            return list(result.scalars().all())

    async def sync_all_repositories(self) -> dict[str, int]:
        """Sync every due repository.

        Returns:
            ``{"successful": n, "failed": m}``
        """
        repository_ids = await self.due_repository_ids()
        log_json(logger, logging.INFO, "github_sync_start", repositories=len(repository_ids))

        results = [await self.sync_repository(repository_id) for repository_id in repository_ids]
        successful = sum(1 for result in results if result.success)
        return {"successful": successful, "failed": len(results) - successful}
