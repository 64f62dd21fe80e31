"""Risk scoring engine: per-component risk metrics derived on every request."""
import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.config import Settings, get_settings
from archledger.core.metrics import RISK_ASSESSMENTS_TOTAL
from archledger.core.risk_scoring import (
    build_risk_factors,
    calculate_risk_score,
    overall_severity,
    round_half_up,
)
from archledger.models.base import utcnow
from archledger.models.component import Component
from archledger.models.enums import RiskSeverity
from archledger.schemas.risk import ComponentRiskMetrics, ProjectRiskSummary, RiskFactorResponse
from archledger.services.component_service import ComponentService
from archledger.services.decision_service import DecisionService
from archledger.services.project_service import ProjectService
from archledger.services.risk_sources import (
    ChurnSource,
    CouplingSource,
    NullCouplingSource,
    build_churn_source,
)

logger = logging.getLogger(__name__)


class RiskService:
    """Computes component risk from churn, decision coverage and coupling.

    Nothing is persisted; metrics are recomputed from current state each call.
    """

    def __init__(
        self,
        db: AsyncSession,
        churn_source: ChurnSource | None = None,
        coupling_source: CouplingSource | None = None,
        settings: Settings | None = None,
    ):
        """Initialize risk service.

        Args:
            db: Database session
            churn_source: Churn provider (defaults to the configured one)
            coupling_source: Coupling provider (defaults to NullCouplingSource)
            settings: Application settings
        """
        self.db = db
        self.settings = settings or get_settings()
        self.churn_source = churn_source or build_churn_source(db, self.settings)
        self.coupling_source = coupling_source or NullCouplingSource()
        self.components = ComponentService(db)
        self.decisions = DecisionService(db)
        self.projects = ProjectService(db)

    async def _assess(self, components: list[Component]) -> list[ComponentRiskMetrics]:
        ids = [component.id for component in components]
        window_days = self.settings.churn_window_days
        since = utcnow() - timedelta(days=window_days)

        churn = await self.churn_source.count_for(ids, since)
        coverage = await self.decisions.count_links_by_component(ids)
        coupling = await self.coupling_source.count_for(ids)

        risks = []
        for component in components:
            churn_rate = churn.get(component.id, 0)
            decision_count = coverage.get(component.id, 0)
            coupling_score = coupling.get(component.id, 0)

            factors = build_risk_factors(churn_rate, decision_count, coupling_score, window_days)
            severity = overall_severity(factors)
            RISK_ASSESSMENTS_TOTAL.labels(severity=severity.value).inc()

            risks.append(
                ComponentRiskMetrics(
                    component_id=component.component_id,
                    component_name=component.name,
                    churn_rate=churn_rate,
                    decision_count=decision_count,
                    coupling_score=coupling_score,
                    risk_factors=[
                        RiskFactorResponse(
                            type=factor.type,
                            description=factor.description,
                            metric=factor.metric,
                            severity=factor.severity,
                        )
                        for factor in factors
                    ],
                    overall_severity=severity,
                    risk_score=calculate_risk_score(churn_rate, decision_count, coupling_score),
                )
            )
        return risks

    async def calculate_component_risk(self, component_id: UUID) -> ComponentRiskMetrics:
        """Compute risk metrics for one component.

        Raises:
            NotFound: unknown component
        """
        component = await self.components.get_by_id(component_id)
        return (await self._assess([component]))[0]

    async def calculate_project_risks(self, project_id: UUID) -> list[ComponentRiskMetrics]:
        """Compute risk metrics for every component on the project's canvas.

        Returns an empty list when the project has no canvas.

        Raises:
            NotFound: unknown project
        """
        await self.projects.get_by_id(project_id)
        canvas = await self.projects.get_canvas(project_id)
        if canvas is None:
            return []

        components = await self.components.list_by_canvas(canvas.id)
        return await self._assess(components)

    async def get_high_risk_components(
        self,
        project_id: UUID,
        min_severity: RiskSeverity = RiskSeverity.MEDIUM,
    ) -> list[ComponentRiskMetrics]:
        """Project risks whose overall severity is at or above ``min_severity``."""
        risks = await self.calculate_project_risks(project_id)
        return [risk for risk in risks if risk.overall_severity.is_at_least(min_severity)]

    @staticmethod
    def summarize(risks: list[ComponentRiskMetrics]) -> ProjectRiskSummary:
        """Count components per severity and average their scores."""
        counts = {severity: 0 for severity in RiskSeverity}
        for risk in risks:
            counts[risk.overall_severity] += 1

        average = round_half_up(sum(r.risk_score for r in risks) / len(risks)) if risks else 0
        return ProjectRiskSummary(
            total_components=len(risks),
            critical_risk=counts[RiskSeverity.CRITICAL],
            high_risk=counts[RiskSeverity.HIGH],
            medium_risk=counts[RiskSeverity.MEDIUM],
            low_risk=counts[RiskSeverity.LOW],
            average_risk_score=average,
        )
