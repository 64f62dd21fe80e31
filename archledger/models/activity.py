"""Activity model."""

from sqlalchemy import JSON, Column, ForeignKey, Index, Uuid
from sqlalchemy import Enum as SQLEnum

from archledger.models.base import BaseModel
from archledger.models.enums import ActivityType


class Activity(BaseModel):
    """Project activity feed entry.

    Written best-effort after a mutation has committed; a missing entry never
    means the mutation failed.
    """

    __tablename__ = "activities"

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(
        SQLEnum(
            ActivityType,
            name="activity_type",
            native_enum=False,
            length=40,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    data = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_activities_project_created", "project_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, type={self.type}, project_id={self.project_id})>"
