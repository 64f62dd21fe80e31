"""Component risk scoring rules.

Three signals feed a component's risk:
- churn: commits touching the component in the trailing window (higher is worse)
- decision coverage: decision records linked to the component (lower is worse)
- coupling: structural dependencies to/from the component (higher is worse)

Severities come from a three-tier threshold table per signal. The 0-100 risk
score is a separate weighted blend of the same raw metrics.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from archledger.models.enums import RiskFactorType, RiskSeverity


@dataclass(frozen=True)
class Thresholds:
    low: float
    medium: float
    high: float


THRESHOLDS: dict[str, Thresholds] = {
    "churn": Thresholds(low=5, medium=10, high=20),  # commits per window
    "decisions": Thresholds(low=0, medium=1, high=3),  # decisions per component
    "coupling": Thresholds(low=3, medium=6, high=10),  # dependencies
}

CHURN_WEIGHT = 0.4
DECISION_WEIGHT = 0.4
COUPLING_WEIGHT = 0.2


@dataclass(frozen=True)
class RiskFactor:
    type: RiskFactorType
    description: str
    metric: float
    severity: RiskSeverity


def determine_severity(
    metric: float,
    thresholds: Thresholds,
    inverse: bool = False,
) -> RiskSeverity:
    """Map a raw metric onto a severity tier.

    Args:
        metric: Raw metric value
        thresholds: Tier cutoffs for the metric
        inverse: True when lower values are worse (decision coverage)

    Returns:
        RiskSeverity for the metric

    Examples:
        >>> determine_severity(12, THRESHOLDS["churn"])
        <RiskSeverity.HIGH: 'high'>
        >>> determine_severity(0, THRESHOLDS["decisions"], inverse=True)
        <RiskSeverity.CRITICAL: 'critical'>
        >>> determine_severity(3, THRESHOLDS["decisions"], inverse=True)
        <RiskSeverity.LOW: 'low'>
    """
    if inverse:
        if metric <= thresholds.low:
            return RiskSeverity.CRITICAL
        if metric <= thresholds.medium:
            return RiskSeverity.HIGH
        if metric < thresholds.high:
            return RiskSeverity.MEDIUM
        return RiskSeverity.LOW

    if metric >= thresholds.high:
        return RiskSeverity.CRITICAL
    if metric >= thresholds.medium:
        return RiskSeverity.HIGH
    if metric >= thresholds.low:
        return RiskSeverity.MEDIUM
    return RiskSeverity.LOW


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_risk_score(
    churn_rate: float,
    decision_count: int,
    coupling_score: float,
) -> int:
    """Calculate the weighted 0-100 risk score.

    Churn and coupling ramp linearly from 0 to 100 as the metric approaches
    its high threshold and stay flat beyond it. Decision coverage is inverted:
    no decisions scores 100, coverage at or past the high threshold scores 0.

    Examples:
        >>> calculate_risk_score(0, 0, 0)
        40
        >>> calculate_risk_score(20, 3, 10)
        60
    """
    churn_score = min(churn_rate / THRESHOLDS["churn"].high * 100, 100)
    if decision_count == 0:
        decision_score = 100.0
    else:
        decision_score = max(0.0, 100 - decision_count / THRESHOLDS["decisions"].high * 100)
    coupling_normalized = min(coupling_score / THRESHOLDS["coupling"].high * 100, 100)

    total = (
        churn_score * CHURN_WEIGHT
        + decision_score * DECISION_WEIGHT
        + coupling_normalized * COUPLING_WEIGHT
    )
    return round_half_up(total)


def _format_metric(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_risk_factors(
    churn_rate: float,
    decision_count: int,
    coupling_score: float,
    churn_window_days: int = 30,
) -> list[RiskFactor]:
    """Build the ordered list of triggered factors (churn, coverage, coupling).

    Metrics whose severity is LOW contribute no factor.
    """
    factors: list[RiskFactor] = []

    churn_severity = determine_severity(churn_rate, THRESHOLDS["churn"])
    if churn_severity != RiskSeverity.LOW:
        factors.append(
            RiskFactor(
                type=RiskFactorType.HIGH_CHURN,
                description=(
                    f"High change frequency: {_format_metric(churn_rate)} commits "
                    f"in last {churn_window_days} days"
                ),
                metric=churn_rate,
                severity=churn_severity,
            )
        )

    decision_severity = determine_severity(decision_count, THRESHOLDS["decisions"], inverse=True)
    if decision_severity != RiskSeverity.LOW:
        plural = "" if decision_count == 1 else "s"
        factors.append(
            RiskFactor(
                type=RiskFactorType.LOW_DECISION_COVERAGE,
                description=f"Low decision documentation: {decision_count} decision{plural}",
                metric=decision_count,
                severity=decision_severity,
            )
        )

    coupling_severity = determine_severity(coupling_score, THRESHOLDS["coupling"])
    if coupling_severity != RiskSeverity.LOW:
        factors.append(
            RiskFactor(
                type=RiskFactorType.HIGH_COUPLING,
                description=f"High coupling: {_format_metric(coupling_score)} dependencies",
                metric=coupling_score,
                severity=coupling_severity,
            )
        )

    return factors


def overall_severity(factors: list[RiskFactor]) -> RiskSeverity:
    """Highest severity among the factors, LOW when there are none."""
    return max(
        (factor.severity for factor in factors),
        key=RiskSeverity.get_rank,
        default=RiskSeverity.LOW,
    )
