from sqlalchemy import Column, Boolean, Date, DateTime, ForeignKey, Text, JSON, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from core.database import Base
import uuid

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class DailyQT(Base):
    """
    One devotional per calendar day (KST).

    `passage` holds the scripture text and the interpretation joined by the
    literal "|||" marker; clients split on it, so the encoding is fixed.
    """
    __tablename__ = "daily_qt"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False)
    reference = Column(Text, nullable=False)
    passage = Column(Text, nullable=False)
    question1 = Column(Text, nullable=True)
    question2 = Column(Text, nullable=True)
    question3 = Column(Text, nullable=True)
    prayer = Column(Text, nullable=True)
    ai_generated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("date", name="uq_daily_qt_date"),
    )


class Profile(Base):
    """Church member. Only the id matters to the QT feed fan-out."""
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class PushSubscription(Base):
    """Latest Web Push registration per user (upserted on user_id)."""
    __tablename__ = "push_subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    subscription = Column(JSONType, nullable=False)  # {endpoint, keys: {p256dh, auth}}
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_push_subscriptions_user_id"),
    )


class Notification(Base):
    """In-app notification feed row."""
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    type = Column(Text, nullable=False)  # 'daily_qt', 'announcement', 'counseling_reply', ...
    # Display label; for daily_qt this carries "<date> <reference>"
    actor_name = Column(Text, nullable=True)
    post_id = Column(Uuid(as_uuid=True), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )


class QtCompletion(Base):
    """A member's answers to a day's QT questions."""
    __tablename__ = "qt_completions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    qt_date = Column(Date, ForeignKey("daily_qt.date", ondelete="CASCADE"), nullable=False)
    completed_date = Column(Date, nullable=False)
    answers = Column(JSONType, nullable=True)

    daily_qt = relationship("DailyQT", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "qt_date", name="uq_qt_completion_user_date"),
        Index("ix_qt_completions_user_completed", "user_id", "completed_date"),
    )
