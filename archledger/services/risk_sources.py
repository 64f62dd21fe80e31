"""Signal providers for the risk engine.

Each source answers one batched question for a set of components, so a whole
canvas is scored with one query per signal. Components a source knows nothing
about count as 0.
"""
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.config import Settings
from archledger.models.component_commit import ComponentCommit
from archledger.models.git_repository import GitCommit


class ChurnSource(Protocol):
    async def count_for(self, component_ids: list[UUID], since: datetime) -> dict[UUID, int]:
        """Commits touching each component committed at or after ``since``."""
        ...


class CouplingSource(Protocol):
    async def count_for(self, component_ids: list[UUID]) -> dict[UUID, int]:
        """Structural dependencies to or from each component."""
        ...


class NullChurnSource:
    """Churn provider for deployments without commit tracking."""

    async def count_for(self, component_ids: list[UUID], since: datetime) -> dict[UUID, int]:
        return {component_id: 0 for component_id in component_ids}


class NullCouplingSource:
    # No dependency graph is stored yet, so every component scores 0.
    async def count_for(self, component_ids: list[UUID]) -> dict[UUID, int]:
        return {component_id: 0 for component_id in component_ids}


class CommitChurnSource:
    """Counts tagged commits per component, inside a trailing window when ``since`` is given."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_for(
        self,
        component_ids: list[UUID],
        since: datetime | None = None,
    ) -> dict[UUID, int]:
        counts = {component_id: 0 for component_id in component_ids}
        if not component_ids:
            return counts

        query = (
            select(ComponentCommit.component_id, func.count(func.distinct(GitCommit.id)))
            .join(GitCommit, GitCommit.id == ComponentCommit.commit_id)
            .where(ComponentCommit.component_id.in_(component_ids))
            .group_by(ComponentCommit.component_id)
        )
        if since is not None:
            query = query.where(GitCommit.committed_at >= since)

        result = await self.db.execute(query)
        for component_id, count in result:
            counts[component_id] = count
        return counts


def build_churn_source(db: AsyncSession, settings: Settings) -> ChurnSource:
    """Pick the churn provider named by ``settings.churn_source``."""
    if settings.churn_source == "null":
        return NullChurnSource()
    return CommitChurnSource(db)
