"""Project service: projects and their architecture canvas."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.exceptions import NotFound
from archledger.models.project import Canvas, Project
from archledger.schemas.project import CreateProjectRequest


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, request: CreateProjectRequest, created_by: str) -> tuple[Project, Canvas]:
        """Create a project together with its (single) canvas."""
        project = Project(
            name=request.name,
            description=request.description,
            created_by=created_by,
        )
        self.db.add(project)
        await self.db.flush()

        canvas = Canvas(project_id=project.id, name=f"{request.name} architecture")
        self.db.add(canvas)
        await self.db.flush()
        return project, canvas

    async def get_by_id(self, project_id: UUID) -> Project:
        """Get a project.

        Raises:
            NotFound: unknown project
        """
        project = await self.db.get(Project, project_id)
        if project is None:
            raise NotFound("Project", project_id)
        return project

    async def get_canvas(self, project_id: UUID) -> Canvas | None:
        """Get the project's canvas, or None when it has none."""
        result = await self.db.execute(select(Canvas).where(Canvas.project_id == project_id))
        return result.scalar_one_or_none()
