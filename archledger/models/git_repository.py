"""Git repository and commit models."""
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid

from archledger.models.base import BaseModel


class GitRepository(BaseModel):
    """GitHub repository connected to a project.

    ``access_token`` holds the Fernet ciphertext produced by
    ``archledger.core.encryption.encrypt``.
    """

    __tablename__ = "git_repositories"

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    full_name = Column(String(511), nullable=False)
    access_token = Column(Text, nullable=False)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("project_id", "full_name", name="uq_repository_project_name"),
    )

    def __repr__(self) -> str:
        return f"<GitRepository(id={self.id}, full_name={self.full_name})>"


class GitCommit(BaseModel):
    """Commit fetched from a connected repository."""

    __tablename__ = "git_commits"

    repository_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("git_repositories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sha = Column(String(64), nullable=False, index=True)
    message = Column(Text, nullable=False, default="")
    author = Column(String(255), nullable=False, default="")
    author_email = Column(String(255), nullable=True)
    committed_at = Column(DateTime(timezone=True), nullable=False)
    url = Column(String(1024), nullable=True)

    __table_args__ = (
        UniqueConstraint("repository_id", "sha", name="uq_commit_repository_sha"),
        Index("idx_commits_repository_committed", "repository_id", "committed_at"),
    )

    def __repr__(self) -> str:
        return f"<GitCommit(sha={self.sha}, repository_id={self.repository_id})>"
