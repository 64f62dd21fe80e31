"""API routes for the decision ledger."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.api.deps import get_activity_service, get_current_actor
from archledger.core.database import get_db
from archledger.models.enums import ActivityType
from archledger.schemas.decision import (
    CreateDecisionRequest,
    DecisionResponse,
    LinkComponentRequest,
    SupersedeRequest,
    SupersessionResponse,
    UpdateDecisionRequest,
)
from archledger.services.activity_service import ActivityService
from archledger.services.decision_service import DecisionService

router = APIRouter()


@router.post(
    "/projects/{project_id}/decisions",
    response_model=DecisionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create decision",
)
async def create_decision(
    project_id: UUID,
    request: CreateDecisionRequest,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_current_actor),
    activity: ActivityService = Depends(get_activity_service),
) -> DecisionResponse:
    """Record a new decision, optionally linked to components.

    Status defaults to PROPOSED. Every missing required field is reported at once.
    """
    decision = await DecisionService(db).create(project_id, request, actor)
    await db.commit()

    await activity.log(
        project_id,
        ActivityType.DECISION_CREATED,
        {"decision_id": str(decision.id), "title": decision.title, "created_by": actor},
    )
    return decision


@router.get(
    "/projects/{project_id}/decisions",
    response_model=list[DecisionResponse],
    summary="List decisions",
)
async def list_decisions(
    project_id: UUID,
    decision_status: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> list[DecisionResponse]:
    """List a project's decisions, newest first, optionally filtered by status."""
    return await DecisionService(db).list_by_project(project_id, decision_status)


@router.get(
    "/decisions/{decision_id}",
    response_model=DecisionResponse,
    summary="Get decision",
)
async def get_decision(
    decision_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DecisionResponse:
    return await DecisionService(db).get_by_id(decision_id)


@router.patch(
    "/decisions/{decision_id}",
    response_model=DecisionResponse,
    summary="Update decision",
)
async def update_decision(
    decision_id: UUID,
    request: UpdateDecisionRequest,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_current_actor),
    activity: ActivityService = Depends(get_activity_service),
) -> DecisionResponse:
    """Apply a partial update. Superseded decisions cannot be changed."""
    decision = await DecisionService(db).update(decision_id, request)
    await db.commit()

    await activity.log(
        decision.project_id,
        ActivityType.DECISION_UPDATED,
        {
            "decision_id": str(decision.id),
            "title": decision.title,
            "fields": sorted(request.model_dump(exclude_unset=True)),
            "updated_by": actor,
        },
    )
    return decision


@router.delete(
    "/decisions/{decision_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete decision",
)
async def delete_decision(
    decision_id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_current_actor),
    activity: ActivityService = Depends(get_activity_service),
) -> None:
    """Delete a decision. Decisions superseded by another record cannot be deleted."""
    record = await DecisionService(db).delete(decision_id)
    await db.commit()

    await activity.log(
        record.project_id,
        ActivityType.DECISION_DELETED,
        {"decision_id": str(decision_id), "title": record.title, "deleted_by": actor},
    )


@router.post(
    "/decisions/{decision_id}/supersede",
    response_model=SupersessionResponse,
    summary="Supersede decision",
)
async def supersede_decision(
    decision_id: UUID,
    request: SupersedeRequest,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_current_actor),
    activity: ActivityService = Depends(get_activity_service),
) -> SupersessionResponse:
    """Replace this decision with ``new_decision_id``.

    The old decision becomes SUPERSEDED and both records point at each other.
    """
    result = await DecisionService(db).supersede(decision_id, request.new_decision_id)
    await db.commit()

    await activity.log(
        result.old_decision.project_id,
        ActivityType.DECISION_SUPERSEDED,
        {
            "old_decision_id": str(result.old_decision.id),
            "new_decision_id": str(result.new_decision.id),
            "title": result.new_decision.title,
            "superseded_by": actor,
        },
    )
    return result


@router.get(
    "/decisions/{decision_id}/chain",
    response_model=list[DecisionResponse],
    summary="Get supersession chain",
)
async def get_supersession_chain(
    decision_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DecisionResponse]:
    """Return the decisions this one replaced, oldest first, ending with itself."""
    return await DecisionService(db).get_supersession_chain(decision_id)


@router.post(
    "/decisions/{decision_id}/link",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Link decision to component",
)
async def link_component(
    decision_id: UUID,
    request: LinkComponentRequest,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Link a component. Linking an already linked component is a no-op."""
    await DecisionService(db).link_to_component(decision_id, request.component_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/decisions/{decision_id}/link",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlink decision from component",
)
async def unlink_component(
    decision_id: UUID,
    request: LinkComponentRequest,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Remove a link. Unlinking a pair that is not linked is a no-op."""
    await DecisionService(db).unlink_from_component(decision_id, request.component_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
