"""Component/Decision link model."""
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid

from archledger.models.base import BaseModel, utcnow


class ComponentDecision(BaseModel):
    """Junction table linking decision records to architecture components.

    A pair is linked at most once; ``uq_component_decision`` makes a second
    insert of the same pair fail, which the ledger absorbs as a no-op.
    """

    __tablename__ = "component_decisions"

    component_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    decision_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("decision_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    linked_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    __table_args__ = (
        UniqueConstraint(
            "component_id",
            "decision_id",
            name="uq_component_decision"
        ),
    )

    def __repr__(self) -> str:
        return f"<ComponentDecision(component_id={self.component_id}, decision_id={self.decision_id})>"
