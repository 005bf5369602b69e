"""SQLAlchemy ORM models for the broadcast engine."""

import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from broadcast_shared.db.base import Base
from broadcast_shared.enums import PlanType


class RecipientProfile(Base):
    """Read model of a learner profile, owned by the profile store."""

    __tablename__ = "recipients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_active_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_enrolled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    plan_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default=PlanType.FREE
    )


class PushSubscription(Base):
    __tablename__ = "push_subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    endpoint: Mapped[str] = mapped_column(Text, nullable=False)
    p256dh: Mapped[str] = mapped_column(Text, nullable=False)
    auth: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    deactivated_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class BroadcastLog(Base):
    """Append-only audit row, one per completed broadcast."""

    __tablename__ = "broadcast_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_audience: Mapped[str] = mapped_column(String(32), nullable=False)
    total_targeted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sent_successfully: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    no_subscription: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
