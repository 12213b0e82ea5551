"""user mission progress

Revision ID: 5a7b3e91c4d2
Revises: 8e4d2c6a0b57
Create Date: 2025-06-16 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5a7b3e91c4d2'
down_revision: Union[str, None] = '8e4d2c6a0b57'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'user_mission_progress',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('mission_id', sa.Integer(), sa.ForeignKey('missions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='in_progress'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'mission_id', name='uq_progress_user_mission')
    )
    op.create_index('ix_user_mission_progress_user_id', 'user_mission_progress', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_user_mission_progress_user_id', table_name='user_mission_progress')
    op.drop_table('user_mission_progress')
