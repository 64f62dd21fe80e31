"""Create git repository, commit and commit tag tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create tables backing GitHub sync and the churn signal."""
    op.create_table(
        'git_repositories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('owner', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(511), nullable=False),
        # Fernet ciphertext, never the plain token
        sa.Column('access_token', sa.Text, nullable=False),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.UniqueConstraint('project_id', 'full_name', name='uq_repository_project_name'),
    )
    op.create_index('ix_git_repositories_project_id', 'git_repositories', ['project_id'])

    op.create_table(
        'git_commits',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('repository_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('git_repositories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sha', sa.String(64), nullable=False),
        sa.Column('message', sa.Text, nullable=False, server_default=''),
        sa.Column('author', sa.String(255), nullable=False, server_default=''),
        sa.Column('author_email', sa.String(255), nullable=True),
        sa.Column('committed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('url', sa.String(1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.UniqueConstraint('repository_id', 'sha', name='uq_commit_repository_sha'),
    )
    op.create_index('ix_git_commits_repository_id', 'git_commits', ['repository_id'])
    op.create_index('ix_git_commits_sha', 'git_commits', ['sha'])
    op.create_index('idx_commits_repository_committed', 'git_commits', ['repository_id', 'committed_at'])

    op.create_table(
        'component_commits',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('component_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('components.id', ondelete='CASCADE'), nullable=False),
        sa.Column('commit_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('git_commits.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tagged_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.UniqueConstraint('component_id', 'commit_id', name='uq_component_commit'),
    )
    op.create_index('ix_component_commits_component_id', 'component_commits', ['component_id'])
    op.create_index('ix_component_commits_commit_id', 'component_commits', ['commit_id'])


def downgrade() -> None:
    """Drop git tables."""
    op.drop_table('component_commits')
    op.drop_table('git_commits')
    op.drop_table('git_repositories')
