"""Create architecture tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create project, canvas, component, decision and activity tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Projects and their (single) canvas
    op.create_table(
        'projects',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('created_by', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.CheckConstraint('LENGTH(name) > 0', name='project_name_not_empty'),
    )
    op.create_index('ix_projects_name', 'projects', ['name'])

    op.create_table(
        'canvases',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False, server_default='Architecture Map'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )
    op.create_index('ix_canvases_project_id', 'canvases', ['project_id'], unique=True)

    # Components placed on a canvas
    op.create_table(
        'components',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('component_id', sa.String(64), nullable=False),
        sa.Column('canvas_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('canvases.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='service'),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('position_x', sa.Float, nullable=False, server_default='0'),
        sa.Column('position_y', sa.Float, nullable=False, server_default='0'),
        sa.Column('metadata_json', postgresql.JSONB, nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.CheckConstraint(
            "type IN ('service', 'library', 'database', 'external', 'ui')",
            name='component_type_valid',
        ),
    )
    op.create_index('ix_components_component_id', 'components', ['component_id'], unique=True)
    op.create_index('ix_components_canvas_id', 'components', ['canvas_id'])
    op.create_index('idx_components_canvas_created', 'components', ['canvas_id', 'created_at'])

    # Decision records with inverse supersession pointers
    op.create_table(
        'decision_records',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('context', sa.Text, nullable=False),
        sa.Column('decision', sa.Text, nullable=False),
        sa.Column('rationale', sa.Text, nullable=False),
        sa.Column('consequences', sa.Text, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PROPOSED'),
        sa.Column('tags', postgresql.JSONB, nullable=False, server_default='[]'),
        sa.Column('supersedes_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('decision_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('superseded_by_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('decision_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_by', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.CheckConstraint(
            "status IN ('PROPOSED', 'ACCEPTED', 'DEPRECATED', 'SUPERSEDED')",
            name='decision_status_valid',
        ),
        sa.CheckConstraint('supersedes_id IS NULL OR supersedes_id <> id', name='decision_not_self_superseding'),
        sa.CheckConstraint('superseded_by_id IS NULL OR superseded_by_id <> id', name='decision_not_self_superseded'),
    )
    op.create_index('ix_decision_records_project_id', 'decision_records', ['project_id'])
    op.create_index('ix_decision_records_status', 'decision_records', ['status'])
    op.create_index('ix_decision_records_supersedes_id', 'decision_records', ['supersedes_id'])
    op.create_index('ix_decision_records_superseded_by_id', 'decision_records', ['superseded_by_id'])
    op.create_index('idx_decisions_project_created', 'decision_records', ['project_id', 'created_at'])

    # Decision <-> component links
    op.create_table(
        'component_decisions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('component_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('components.id', ondelete='CASCADE'), nullable=False),
        sa.Column('decision_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('decision_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('linked_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.UniqueConstraint('component_id', 'decision_id', name='uq_component_decision'),
    )
    op.create_index('ix_component_decisions_component_id', 'component_decisions', ['component_id'])
    op.create_index('ix_component_decisions_decision_id', 'component_decisions', ['decision_id'])

    # Project activity feed
    op.create_table(
        'activities',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(40), nullable=False),
        sa.Column('data', postgresql.JSONB, nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    )
    op.create_index('idx_activities_project_created', 'activities', ['project_id', 'created_at'])


def downgrade() -> None:
    """Drop architecture tables."""
    op.drop_table('activities')
    op.drop_table('component_decisions')
    op.drop_table('decision_records')
    op.drop_table('components')
    op.drop_table('canvases')
    op.drop_table('projects')
