"""Project and Canvas models."""
from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Text, Uuid

from archledger.models.base import BaseModel


class Project(BaseModel):
    """Project entity owning an architecture map and its decision records."""

    __tablename__ = "projects"

    name = Column(
        String(255),
        nullable=False,
        index=True
    )
    description = Column(
        Text,
        nullable=True
    )
    created_by = Column(
        String(255),
        nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "LENGTH(name) > 0",
            name="project_name_not_empty"
        ),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"


class Canvas(BaseModel):
    """Architecture map canvas; at most one per project."""

    __tablename__ = "canvases"

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    name = Column(
        String(255),
        nullable=False,
        default="Architecture Map"
    )

    def __repr__(self) -> str:
        return f"<Canvas(id={self.id}, project_id={self.project_id})>"
