"""API routes for individual architecture components."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.api.deps import get_activity_service
from archledger.core.database import get_db
from archledger.models.enums import ActivityType
from archledger.schemas.component import ComponentResponse, UpdateComponentRequest
from archledger.schemas.decision import DecisionResponse
from archledger.schemas.risk import ComponentRiskMetrics
from archledger.services.activity_service import ActivityService
from archledger.services.component_service import ComponentService
from archledger.services.decision_service import DecisionService
from archledger.services.risk_service import RiskService

router = APIRouter()


@router.get(
    "/{component_id}",
    response_model=ComponentResponse,
    summary="Get component",
)
async def get_component(
    component_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ComponentResponse:
    component = await ComponentService(db).get_by_id(component_id)
    return ComponentResponse.from_model(component)


@router.patch(
    "/{component_id}",
    response_model=ComponentResponse,
    summary="Update component",
)
async def update_component(
    component_id: UUID,
    request: UpdateComponentRequest,
    db: AsyncSession = Depends(get_db),
) -> ComponentResponse:
    component = await ComponentService(db).update(component_id, request)
    await db.commit()
    return ComponentResponse.from_model(component)


@router.delete(
    "/{component_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete component",
)
async def delete_component(
    component_id: UUID,
    db: AsyncSession = Depends(get_db),
    activity: ActivityService = Depends(get_activity_service),
) -> None:
    """Delete a component along with its decision links and commit tags."""
    service = ComponentService(db)
    component = await service.get_by_id(component_id)
    project_id = await service.get_project_id(component)
    await service.delete(component_id)
    await db.commit()

    await activity.log(
        project_id,
        ActivityType.COMPONENT_DELETED,
        {"component_id": component.component_id, "name": component.name},
    )


@router.get(
    "/{component_id}/decisions",
    response_model=list[DecisionResponse],
    summary="List decisions linked to a component",
)
async def list_component_decisions(
    component_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DecisionResponse]:
    return await DecisionService(db).list_by_component(component_id)


@router.get(
    "/{component_id}/risk",
    response_model=ComponentRiskMetrics,
    summary="Get component risk",
)
async def get_component_risk(
    component_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ComponentRiskMetrics:
    """Compute the component's current risk from churn, coverage and coupling."""
    return await RiskService(db).calculate_component_risk(component_id)
