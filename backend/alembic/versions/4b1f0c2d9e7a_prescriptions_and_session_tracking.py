"""prescriptions and session tracking

Revision ID: 4b1f0c2d9e7a
Revises:
Create Date: 2026-10-19 09:40:12.418230

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# define the enum type once so we can create/drop it explicitly
user_role = postgresql.ENUM('user', 'trainer', 'admin', name='user_role', create_type=False)


# revision identifiers, used by Alembic.
revision: str = '4b1f0c2d9e7a'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) enum type
    user_role.create(op.get_bind(), checkfirst=True)

    # 2) users, workouts, exercise catalog
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('role', user_role, nullable=False, server_default='user'),
        sa.Column('preferred_weight_unit', sa.String(length=2), nullable=False, server_default='kg'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(length=255), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )

    # 3) prescriptions: one row per exercise, group fields repeated per row
    op.create_table(
        'workout_prescriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rpe_value_id', sa.Integer(), nullable=True),
        sa.Column('group_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('group_order', sa.Integer(), nullable=False),
        sa.Column('group_rounds', sa.Integer(), nullable=True),
        sa.Column('rest_between_sets', sa.Integer(), nullable=True),
        sa.Column('group_name', sa.String(length=255), nullable=True),
        sa.Column('group_notes', sa.Text(), nullable=True),
        sa.Column('exercise_order', sa.Integer(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('hold_seconds', sa.Integer(), nullable=True),
        sa.Column('target_weight_kg', sa.Numeric(8, 2), nullable=True),
        sa.Column('original_target_weight_value', sa.Numeric(8, 2), nullable=True),
        sa.Column('original_target_weight_unit', sa.String(length=2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    # 4) session tree
    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='SET NULL'), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('perceived_intensity', sa.Integer(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True, index=True),
        sa.CheckConstraint('perceived_intensity BETWEEN 1 AND 10', name='ck_session_intensity'),
    )

    op.create_table(
        'session_blocks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('workout_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('group_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('block_order', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('skipped', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('perceived_exertion', sa.Integer(), nullable=True),
        sa.CheckConstraint('perceived_exertion BETWEEN 1 AND 10', name='ck_block_exertion'),
    )

    op.create_table(
        'session_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_block_id', sa.Integer(), sa.ForeignKey('session_blocks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('prescription_id', sa.Integer(), sa.ForeignKey('workout_prescriptions.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_order', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('skipped', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    op.create_table(
        'session_sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_exercise_id', sa.Integer(), sa.ForeignKey('session_exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('actual_reps', sa.Integer(), nullable=True),
        sa.Column('actual_weight_kg', sa.Numeric(8, 2), nullable=True),
        sa.Column('original_actual_weight_value', sa.Numeric(8, 2), nullable=True),
        sa.Column('original_actual_weight_unit', sa.String(length=2), nullable=True),
        sa.Column('actual_duration_seconds', sa.Integer(), nullable=True),
        sa.Column('rpe_value_id', sa.Integer(), nullable=True),
        sa.Column('was_failure', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('session_sets')
    op.drop_table('session_exercises')
    op.drop_table('session_blocks')
    op.drop_table('workout_sessions')
    op.drop_table('workout_prescriptions')
    op.drop_table('exercises')
    op.drop_table('workouts')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    # finally drop enum type
    user_role.drop(op.get_bind(), checkfirst=True)
