"""Component/Commit tag model."""
from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid

from archledger.models.base import BaseModel, utcnow


class ComponentCommit(BaseModel):
    """Tag recording that a commit touched an architecture component.

    Churn is the number of tagged commits whose ``committed_at`` falls in the
    trailing window.
    """

    __tablename__ = "component_commits"

    component_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("components.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    commit_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("git_commits.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    tagged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("component_id", "commit_id", name="uq_component_commit"),
    )

    def __repr__(self) -> str:
        return f"<ComponentCommit(component_id={self.component_id}, commit_id={self.commit_id})>"
