"""Component model for the architecture map."""
from sqlalchemy import JSON, Column, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy import Enum as SQLEnum

from archledger.models.base import BaseModel
from archledger.models.enums import ComponentType


class Component(BaseModel):
    """Architecture component placed on a project's canvas.

    ``component_id`` is the stable, human-facing identifier (e.g.
    ``COMP-LZ3K9Q-4F2A1B``) that decisions, commits and discussions refer to;
    ``id`` is the storage key.
    """

    __tablename__ = "components"

    component_id = Column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )
    canvas_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("canvases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(
        String(255),
        nullable=False,
    )
    type = Column(
        SQLEnum(ComponentType, name="component_type", native_enum=False, length=20, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ComponentType.SERVICE,
    )
    description = Column(
        Text,
        nullable=True,
    )
    position_x = Column(Float, nullable=False, default=0.0)
    position_y = Column(Float, nullable=False, default=0.0)
    metadata_json = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_components_canvas_created", "canvas_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Component(id={self.id}, component_id={self.component_id}, name={self.name})>"
