"""create users and aggregate_documents

Revision ID: a3f1c9d27b10
Revises:
Create Date: 2026-09-28
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = 'a3f1c9d27b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Whole aggregate (challenge, study structure, festival, schedules) in one JSONB body
    op.create_table(
        'aggregate_documents',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('kind', sa.String(32), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('natural_key', sa.String(64), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('body', postgresql.JSONB(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint('kind', 'owner_id', 'natural_key', name='uq_aggregate_natural_key'),
    )
    op.create_index('ix_aggregate_documents_owner_id', 'aggregate_documents', ['owner_id'])
    op.create_index('ix_aggregate_kind_owner', 'aggregate_documents', ['kind', 'owner_id', 'is_deleted'])


def downgrade():
    op.drop_index('ix_aggregate_kind_owner', 'aggregate_documents')
    op.drop_index('ix_aggregate_documents_owner_id', 'aggregate_documents')
    op.drop_table('aggregate_documents')
    op.drop_table('users')
