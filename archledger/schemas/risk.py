"""Pydantic schemas for component risk endpoints."""

from pydantic import BaseModel, Field

from archledger.models.enums import RiskFactorType, RiskSeverity


class RiskFactorResponse(BaseModel):
    """A triggered risk factor."""

    type: RiskFactorType
    description: str
    metric: float
    severity: RiskSeverity


class ComponentRiskMetrics(BaseModel):
    """Risk metrics for one component, recomputed on every request."""

    component_id: str = Field(..., description="Stable external component identifier")
    component_name: str | None = None
    churn_rate: float
    decision_count: int
    coupling_score: float
    risk_factors: list[RiskFactorResponse] = Field(default_factory=list)
    overall_severity: RiskSeverity
    risk_score: int = Field(..., ge=0, le=100)


class ProjectRiskSummary(BaseModel):
    """Severity counts and mean score over a list of component risks."""

    total_components: int
    critical_risk: int
    high_risk: int
    medium_risk: int
    low_risk: int
    average_risk_score: int


class ProjectRisksResponse(BaseModel):
    risks: list[ComponentRiskMetrics]
    summary: ProjectRiskSummary
