"""add calculation history

Revision ID: 001_add_calculation_history
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_add_calculation_history'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'calculation_history',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('window_id', sa.String(length=64), nullable=False),
        sa.Column('expression', sa.Text(), nullable=False),
        sa.Column('result', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_index('ix_calculation_history_window_id', 'calculation_history', ['window_id'])
    op.create_index('ix_calculation_history_created_at', 'calculation_history', ['created_at'])
    op.create_index('idx_calculation_history_window_created', 'calculation_history', ['window_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('idx_calculation_history_window_created', table_name='calculation_history')
    op.drop_index('ix_calculation_history_created_at', table_name='calculation_history')
    op.drop_index('ix_calculation_history_window_id', table_name='calculation_history')
    op.drop_table('calculation_history')
