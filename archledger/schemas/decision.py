"""Pydantic schemas for decision record endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archledger.models.enums import DecisionStatus


def _dedupe_tags(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    seen: dict[str, None] = {}
    for tag in v:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class CreateDecisionRequest(BaseModel):
    """Request schema for creating a decision record.

    The five text fields are optional here so the ledger can report every
    missing one at once instead of failing on the first.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=255)
    context: str | None = None
    decision: str | None = None
    rationale: str | None = None
    consequences: str | None = None
    status: str | None = Field(None, description="PROPOSED (default), ACCEPTED or DEPRECATED")
    tags: list[str] = Field(default_factory=list)
    linked_component_ids: list[UUID] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        return _dedupe_tags(v) or []


class UpdateDecisionRequest(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=255)
    context: str | None = None
    decision: str | None = None
    rationale: str | None = None
    consequences: str | None = None
    status: str | None = None
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str] | None) -> list[str] | None:
        return _dedupe_tags(v)


class SupersedeRequest(BaseModel):
    """Request schema for superseding a decision with a newer one."""

    model_config = ConfigDict(extra="forbid")

    new_decision_id: UUID


class LinkComponentRequest(BaseModel):
    """Request schema for linking/unlinking a decision and a component."""

    model_config = ConfigDict(extra="forbid")

    component_id: UUID


class DecisionResponse(BaseModel):
    """Decision record hydrated with its links."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    title: str
    context: str
    decision: str
    rationale: str
    consequences: str
    status: DecisionStatus
    tags: list[str] = Field(default_factory=list)
    supersedes_id: UUID | None = None
    superseded_by_id: UUID | None = None
    created_by: str
    created_at: datetime
    updated_at: datetime
    linked_component_ids: list[UUID] = Field(default_factory=list)


class SupersessionResponse(BaseModel):
    """Both sides of a completed supersession."""

    old_decision: DecisionResponse
    new_decision: DecisionResponse
