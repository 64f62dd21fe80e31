"""Pydantic schemas for project endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateProjectRequest(BaseModel):
    """Request schema for creating a project and its canvas."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProjectResponse(BaseModel):
    """Response schema for a project."""

    id: UUID
    name: str
    description: str | None = None
    created_by: str
    canvas_id: UUID | None = None
    created_at: datetime
