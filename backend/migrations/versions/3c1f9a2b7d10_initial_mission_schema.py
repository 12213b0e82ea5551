"""initial mission schema

Revision ID: 3c1f9a2b7d10
Revises:
Create Date: 2025-06-02 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f9a2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'hospitals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'mission_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('emoji', sa.String(length=16), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'mission_folders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False, server_default='#6366f1'),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_collapsed', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'action_types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('icon_url', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'missions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('mission_categories.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('visibility', sa.String(length=16), nullable=False, server_default='public'),
        sa.Column('hospital_id', sa.Integer(), sa.ForeignKey('hospitals.id'), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('missions.id', ondelete='CASCADE'), nullable=True),
        sa.Column('folder_id', sa.Integer(), sa.ForeignKey('mission_folders.id', ondelete='SET NULL'), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('event_end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('is_first_come', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notice_items', sa.JSON(), nullable=False),
        sa.Column('header_image_url', sa.Text(), nullable=True),
        sa.Column('gift_image_url', sa.Text(), nullable=True),
        sa.Column('gift_description', sa.Text(), nullable=True),
        sa.Column('venue_image_url', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_missions_parent_id', 'missions', ['parent_id'])
    op.create_index('ix_missions_folder_order', 'missions', ['folder_id', 'order'])

    op.create_table(
        'sub_missions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mission_id', sa.Integer(), sa.ForeignKey('missions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('action_type_id', sa.Integer(), sa.ForeignKey('action_types.id', ondelete='SET NULL'), nullable=True),
        sa.Column('submission_types', sa.JSON(), nullable=False),
        sa.Column('submission_labels', sa.JSON(), nullable=False),
        sa.Column('require_review', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sequential_level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attendance_type', sa.String(length=20), nullable=True),
        sa.Column('attendance_password', sa.Text(), nullable=True),
        sa.Column('studio_dpi', sa.Integer(), nullable=False, server_default='300'),
        sa.Column('studio_file_format', sa.String(length=10), nullable=False, server_default='pdf'),
        sa.Column('party_template_project_id', sa.Integer(), nullable=True),
        sa.Column('party_max_pages', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sub_missions_mission_id', 'sub_missions', ['mission_id'])

    op.create_table(
        'sub_mission_submissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('sub_mission_id', sa.Integer(), sa.ForeignKey('sub_missions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slots', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='submitted'),
        sa.Column('is_locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reviewer_note', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'sub_mission_id', name='uq_submission_user_sub_mission')
    )
    op.create_index('ix_submissions_sub_mission_status', 'sub_mission_submissions', ['sub_mission_id', 'status'])


def downgrade() -> None:
    op.drop_index('ix_submissions_sub_mission_status', table_name='sub_mission_submissions')
    op.drop_table('sub_mission_submissions')
    op.drop_index('ix_sub_missions_mission_id', table_name='sub_missions')
    op.drop_table('sub_missions')
    op.drop_index('ix_missions_folder_order', table_name='missions')
    op.drop_index('ix_missions_parent_id', table_name='missions')
    op.drop_table('missions')
    op.drop_table('action_types')
    op.drop_table('mission_folders')
    op.drop_table('mission_categories')
    op.drop_table('hospitals')
