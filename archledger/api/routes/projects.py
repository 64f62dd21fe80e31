"""API routes for projects and their canvas components."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.api.deps import get_activity_service, get_current_actor
from archledger.core.database import get_db
from archledger.core.exceptions import NotFound
from archledger.models.enums import ActivityType
from archledger.schemas.activity import ActivityFeedResponse, ActivityResponse, Pagination
from archledger.schemas.commit import CommitCountsResponse, ComponentCommitCount
from archledger.schemas.component import ComponentResponse, CreateComponentRequest
from archledger.schemas.project import CreateProjectRequest, ProjectResponse
from archledger.services.activity_service import ActivityService
from archledger.services.component_service import ComponentService
from archledger.services.project_service import ProjectService
from archledger.services.risk_sources import CommitChurnSource

router = APIRouter()


def _project_to_response(project, canvas) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        created_by=project.created_by,
        canvas_id=canvas.id if canvas else None,
        created_at=project.created_at,
    )


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(
    request: CreateProjectRequest,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_current_actor),
) -> ProjectResponse:
    """Create a project together with its architecture canvas."""
    project, canvas = await ProjectService(db).create(request, actor)
    await db.commit()
    return _project_to_response(project, canvas)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get project",
)
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    service = ProjectService(db)
    project = await service.get_by_id(project_id)
    return _project_to_response(project, await service.get_canvas(project_id))


@router.post(
    "/{project_id}/components",
    response_model=ComponentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create component",
)
async def create_component(
    project_id: UUID,
    request: CreateComponentRequest,
    db: AsyncSession = Depends(get_db),
    activity: ActivityService = Depends(get_activity_service),
) -> ComponentResponse:
    """Place a new component on the project's canvas."""
    projects = ProjectService(db)
    await projects.get_by_id(project_id)
    canvas = await projects.get_canvas(project_id)
    if canvas is None:
        raise NotFound("Canvas", project_id)

    component = await ComponentService(db).create(canvas.id, request)
    await db.commit()

    await activity.log(
        project_id,
        ActivityType.COMPONENT_CREATED,
        {"component_id": component.component_id, "name": component.name},
    )
    return ComponentResponse.from_model(component)


@router.get(
    "/{project_id}/components",
    response_model=list[ComponentResponse],
    summary="List components",
)
async def list_components(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[ComponentResponse]:
    """List the components on the project's canvas, oldest first."""
    projects = ProjectService(db)
    await projects.get_by_id(project_id)
    canvas = await projects.get_canvas(project_id)
    if canvas is None:
        return []
    components = await ComponentService(db).list_by_canvas(canvas.id)
    return [ComponentResponse.from_model(c) for c in components]


@router.get(
    "/{project_id}/components/commit-counts",
    response_model=CommitCountsResponse,
    summary="Commit counts per component",
)
async def component_commit_counts(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CommitCountsResponse:
    """All-time tagged commit counts for the canvas overlay, zero included."""
    projects = ProjectService(db)
    await projects.get_by_id(project_id)
    canvas = await projects.get_canvas(project_id)
    if canvas is None:
        raise NotFound("Canvas", project_id)

    components = await ComponentService(db).list_by_canvas(canvas.id)
    counts = await CommitChurnSource(db).count_for([c.id for c in components])
    return CommitCountsResponse(
        commit_counts=[
            ComponentCommitCount(component_id=c.component_id, commit_count=counts[c.id])
            for c in components
        ]
    )


@router.get(
    "/{project_id}/activities",
    response_model=ActivityFeedResponse,
    summary="List project activity",
)
async def list_activities(
    project_id: UUID,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    activity: ActivityService = Depends(get_activity_service),
) -> ActivityFeedResponse:
    await ProjectService(db).get_by_id(project_id)
    entries, total = await activity.list_for_project(project_id, limit=limit, offset=offset)
    return ActivityFeedResponse(
        activities=[ActivityResponse.model_validate(e) for e in entries],
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(entries) < total,
        ),
    )
