"""Decision Record model (architectural decision records)."""
from sqlalchemy import JSON, Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy import Enum as SQLEnum

from archledger.models.base import BaseModel
from archledger.models.enums import DecisionStatus


class DecisionRecord(BaseModel):
    """Architectural decision record.

    Supersession is stored as a pair of inverse pointers:
    - ``supersedes_id``: the older record this one replaces
    - ``superseded_by_id``: the newer record that replaced this one

    Both are written together by ``DecisionService.supersede`` and never
    through a plain update.
    """

    __tablename__ = "decision_records"

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    context = Column(Text, nullable=False)
    decision = Column(Text, nullable=False)
    rationale = Column(Text, nullable=False)
    consequences = Column(Text, nullable=False)
    status = Column(
        SQLEnum(DecisionStatus, name="decision_status", native_enum=False, length=20, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=DecisionStatus.PROPOSED,
        index=True,
    )
    tags = Column(JSON, nullable=False, default=list)
    supersedes_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("decision_records.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    superseded_by_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("decision_records.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by = Column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_decisions_project_created", "project_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<DecisionRecord(id={self.id}, title='{self.title}', status={self.status})>"
