"""Enumerations for decision status, risk severity and activity types."""

from enum import Enum


class DecisionStatus(str, Enum):
    """Decision record status.

    Workflow:
    - PROPOSED: Drafted, open for discussion
    - ACCEPTED: Agreed and in force
    - DEPRECATED: No longer recommended, not replaced
    - SUPERSEDED: Replaced by a newer record (terminal, set only by supersede)
    """

    PROPOSED = "PROPOSED"
    ACCEPTED = "ACCEPTED"
    DEPRECATED = "DEPRECATED"
    SUPERSEDED = "SUPERSEDED"


class RiskSeverity(str, Enum):
    """Risk severity with ordinal ranking low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def get_rank(cls, severity: "RiskSeverity") -> int:
        """Get numeric rank for severity comparison.

        Args:
            severity: RiskSeverity to rank

        Returns:
            Integer rank (higher = more severe)
        """
        ranks = {
            cls.LOW: 0,
            cls.MEDIUM: 1,
            cls.HIGH: 2,
            cls.CRITICAL: 3,
        }
        return ranks.get(severity, 0)

    def is_at_least(self, floor: "RiskSeverity") -> bool:
        """Check if this severity is at or above the given floor."""
        return self.get_rank(self) >= self.get_rank(floor)


class RiskFactorType(str, Enum):
    """Kinds of risk signal a component can trigger."""

    HIGH_CHURN = "high_churn"
    LOW_DECISION_COVERAGE = "low_decision_coverage"
    HIGH_COUPLING = "high_coupling"


class ComponentType(str, Enum):
    """Architecture map component kinds."""

    SERVICE = "service"
    LIBRARY = "library"
    DATABASE = "database"
    EXTERNAL = "external"
    UI = "ui"


class ActivityType(str, Enum):
    """Project activity feed entries."""

    DECISION_CREATED = "DECISION_CREATED"
    DECISION_UPDATED = "DECISION_UPDATED"
    DECISION_SUPERSEDED = "DECISION_SUPERSEDED"
    DECISION_DELETED = "DECISION_DELETED"
    COMPONENT_CREATED = "COMPONENT_CREATED"
    COMPONENT_DELETED = "COMPONENT_DELETED"
    GIT_COMMIT = "GIT_COMMIT"
