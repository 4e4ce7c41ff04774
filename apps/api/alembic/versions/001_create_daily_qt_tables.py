"""create daily qt, push subscription and notification tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    op.create_table(
        'daily_qt',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reference', sa.Text(), nullable=False),
        sa.Column('passage', sa.Text(), nullable=False),
        sa.Column('question1', sa.Text(), nullable=True),
        sa.Column('question2', sa.Text(), nullable=True),
        sa.Column('question3', sa.Text(), nullable=True),
        sa.Column('prayer', sa.Text(), nullable=True),
        sa.Column('ai_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('date', name='uq_daily_qt_date'),
    )

    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'push_subscriptions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('subscription', JSONType, nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', name='uq_push_subscriptions_user_id'),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('actor_name', sa.Text(), nullable=True),
        sa.Column('post_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_notifications_user_created', 'notifications', ['user_id', 'created_at'])

    op.create_table(
        'qt_completions',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('qt_date', sa.Date(), sa.ForeignKey('daily_qt.date', ondelete='CASCADE'), nullable=False),
        sa.Column('completed_date', sa.Date(), nullable=False),
        sa.Column('answers', JSONType, nullable=True),
        sa.UniqueConstraint('user_id', 'qt_date', name='uq_qt_completion_user_date'),
    )
    op.create_index('ix_qt_completions_user_completed', 'qt_completions', ['user_id', 'completed_date'])


def downgrade() -> None:
    op.drop_index('ix_qt_completions_user_completed', table_name='qt_completions')
    op.drop_table('qt_completions')
    op.drop_index('ix_notifications_user_created', table_name='notifications')
    op.drop_table('notifications')
    op.drop_table('push_subscriptions')
    op.drop_table('profiles')
    op.drop_table('daily_qt')
