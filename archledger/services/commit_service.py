"""Commit service: tagging synced commits with the components they touch."""
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.database import insert_ignore_duplicates
from archledger.core.exceptions import NotFound, ValidationError
from archledger.models.component import Component
from archledger.models.component_commit import ComponentCommit
from archledger.models.git_repository import GitCommit, GitRepository
from archledger.services.component_service import ComponentService


class CommitService:
    """Service for component/commit tags, the churn signal's raw data."""

    def __init__(self, db: AsyncSession):
        """Initialize commit service.

        Args:
            db: Database session
        """
        self.db = db
        self.components = ComponentService(db)

    async def _resolve(self, sha: str, component_id: UUID) -> tuple[GitCommit, Component]:
        """Find the commit with ``sha`` in the component's project.

        Raises:
            NotFound: unknown component, or no synced commit has this sha
            ValidationError: the commit only exists in other projects
        """
        component = await self.components.get_by_id(component_id)
        project_id = await self.components.get_project_id(component)

        result = await self.db.execute(
            select(GitCommit, GitRepository.project_id)
            .join(GitRepository, GitRepository.id == GitCommit.repository_id)
            .where(GitCommit.sha == sha)
        )
        rows = result.all()
        if not rows:
            raise NotFound("Commit", sha)

        for commit, commit_project_id in rows:
            if commit_project_id == project_id:
                return commit, component

        raise ValidationError(
            ["component_id"],
            message=f"Commit {sha} does not belong to the component's project",
        )

    async def tag_commit(self, sha: str, component_id: UUID) -> ComponentCommit:
        """Tag a commit with a component. Tagging twice is a no-op.

        Returns:
            The stored tag
        """
        commit, component = await self._resolve(sha, component_id)
        await insert_ignore_duplicates(
            self.db,
            ComponentCommit,
            {"component_id": component.id, "commit_id": commit.id},
            ["component_id", "commit_id"],
        )
        result = await self.db.execute(
            select(ComponentCommit).where(
                ComponentCommit.component_id == component.id,
                ComponentCommit.commit_id == commit.id,
            )
        )
        return result.scalar_one()

    async def untag_commit(self, sha: str, component_id: UUID) -> bool:
        """Remove a tag. Removing a tag that does not exist is a no-op.

        Returns:
            True if a tag was removed
        """
        commit, component = await self._resolve(sha, component_id)
        result = await self.db.execute(
            delete(ComponentCommit).where(
                ComponentCommit.component_id == component.id,
                ComponentCommit.commit_id == commit.id,
            )
        )
        return bool(result.rowcount)
