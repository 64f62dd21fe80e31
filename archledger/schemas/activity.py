"""Pydantic schemas for the project activity feed."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from archledger.models.enums import ActivityType


class ActivityResponse(BaseModel):
    """One activity feed entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    type: ActivityType
    data: dict[str, Any]
    created_at: datetime


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ActivityFeedResponse(BaseModel):
    """A page of the activity feed, newest first."""

    activities: list[ActivityResponse]
    pagination: Pagination
