"""API routes for project risk analysis."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.database import get_db
from archledger.models.enums import RiskSeverity
from archledger.schemas.risk import ProjectRisksResponse
from archledger.services.risk_service import RiskService

router = APIRouter()


@router.get(
    "/{project_id}/risks",
    response_model=ProjectRisksResponse,
    summary="Get project risks",
)
async def get_project_risks(
    project_id: UUID,
    high_risk_only: bool = Query(False),
    min_severity: RiskSeverity = Query(RiskSeverity.MEDIUM),
    db: AsyncSession = Depends(get_db),
) -> ProjectRisksResponse:
    """Risk metrics for every component on the project's canvas.

    With ``high_risk_only`` the list keeps components at or above
    ``min_severity``. The summary always covers the returned list.
    """
    service = RiskService(db)
    if high_risk_only:
        risks = await service.get_high_risk_components(project_id, min_severity)
    else:
        risks = await service.calculate_project_risks(project_id)
    return ProjectRisksResponse(risks=risks, summary=service.summarize(risks))
