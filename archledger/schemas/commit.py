"""Pydantic schemas for commit tagging endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TagCommitRequest(BaseModel):
    """Request schema for tagging/untagging a commit with a component."""

    model_config = ConfigDict(extra="forbid")

    component_id: UUID


class ComponentCommitResponse(BaseModel):
    """A commit tagged with a component."""

    model_config = ConfigDict(from_attributes=True)

    component_id: UUID
    commit_id: UUID
    sha: str
    tagged_at: datetime


class ComponentCommitCount(BaseModel):
    component_id: str
    commit_count: int


class CommitCountsResponse(BaseModel):
    """All-time tagged commit counts for every component on a canvas."""

    commit_counts: list[ComponentCommitCount]
