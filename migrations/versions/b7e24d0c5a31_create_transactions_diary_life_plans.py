"""create transactions, diary_entries, life_plans

Revision ID: b7e24d0c5a31
Revises: a3f1c9d27b10
Create Date: 2026-10-02
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = 'b7e24d0c5a31'
down_revision = 'a3f1c9d27b10'
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    # 1. Transactions
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(16), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('category', sa.String(64), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
    )
    op.create_index('ix_transactions_owner_id', 'transactions', ['owner_id'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])

    # 2. Diary
    op.create_table(
        'diary_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('good_things', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('bad_things', postgresql.JSONB(), nullable=False, server_default='[]'),
        *_timestamps(),
    )
    op.create_index('ix_diary_entries_owner_id', 'diary_entries', ['owner_id'])
    op.create_index('ix_diary_entries_date', 'diary_entries', ['date'])

    # 3. Life plans
    op.create_table(
        'life_plans',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('start_age', sa.Integer(), nullable=False),
        sa.Column('end_age', sa.Integer(), nullable=False),
        sa.Column('target_year', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(1000), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_life_plans_owner_id', 'life_plans', ['owner_id'])
    op.create_index('ix_life_plans_target_year', 'life_plans', ['target_year'])


def downgrade():
    op.drop_index('ix_life_plans_target_year', 'life_plans')
    op.drop_index('ix_life_plans_owner_id', 'life_plans')
    op.drop_table('life_plans')

    op.drop_index('ix_diary_entries_date', 'diary_entries')
    op.drop_index('ix_diary_entries_owner_id', 'diary_entries')
    op.drop_table('diary_entries')

    op.drop_index('ix_transactions_date', 'transactions')
    op.drop_index('ix_transactions_owner_id', 'transactions')
    op.drop_table('transactions')
