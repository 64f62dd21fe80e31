"""Pydantic schemas for architecture component endpoints."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archledger.models.enums import ComponentType


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class CreateComponentRequest(BaseModel):
    """Request schema for placing a component on a project's canvas."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=255)
    type: ComponentType = ComponentType.SERVICE
    description: str | None = None
    position: Position = Field(default_factory=Position)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UpdateComponentRequest(BaseModel):
    """Request schema for updating a component."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    type: ComponentType | None = None
    description: str | None = None
    position: Position | None = None
    metadata: dict[str, Any] | None = None


class ComponentResponse(BaseModel):
    """Response schema for a component."""

    id: UUID
    component_id: str
    canvas_id: UUID
    name: str
    type: ComponentType
    description: str | None = None
    position: Position
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, component) -> "ComponentResponse":
        return cls(
            id=component.id,
            component_id=component.component_id,
            canvas_id=component.canvas_id,
            name=component.name,
            type=component.type,
            description=component.description,
            position=Position(x=component.position_x, y=component.position_y),
            metadata=component.metadata_json or {},
            created_at=component.created_at,
            updated_at=component.updated_at,
        )
