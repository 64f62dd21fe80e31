"""SQLAlchemy models."""

from archledger.models.activity import Activity
from archledger.models.base import Base, BaseModel
from archledger.models.component import Component
from archledger.models.component_commit import ComponentCommit
from archledger.models.component_decision import ComponentDecision
from archledger.models.decision_record import DecisionRecord
from archledger.models.enums import (
    ActivityType,
    ComponentType,
    DecisionStatus,
    RiskFactorType,
    RiskSeverity,
)
from archledger.models.git_repository import GitCommit, GitRepository
from archledger.models.project import Canvas, Project

__all__ = [
    "Base",
    "BaseModel",
    "ActivityType",
    "ComponentType",
    "DecisionStatus",
    "RiskFactorType",
    "RiskSeverity",
    "Project",
    "Canvas",
    "Component",
    "DecisionRecord",
    "ComponentDecision",
    "GitRepository",
    "GitCommit",
    "ComponentCommit",
    "Activity",
]
