"""Data access repositories with constructor-injected sessions."""

import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from broadcast_shared.db.models import BroadcastLog, PushSubscription, RecipientProfile


class RecipientRepository:
    """Read access to the recipients table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[RecipientProfile]:
        stmt = select(RecipientProfile).order_by(RecipientProfile.id)
        return list(self._session.scalars(stmt).all())


class PushSubscriptionRepository:
    """Data access for the push_subscriptions table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, subscription: PushSubscription) -> PushSubscription:
        """Add a subscription and flush to populate server defaults."""
        self._session.add(subscription)
        self._session.flush()
        return subscription

    def get_active(self, recipient_id: str) -> PushSubscription | None:
        """Fetch the active subscription for a recipient, if any."""
        stmt = select(PushSubscription).where(
            PushSubscription.recipient_id == recipient_id,
            PushSubscription.is_active.is_(True),
        )
        return self._session.scalars(stmt).first()

    def deactivate(
        self, recipient_id: str, deactivated_at: datetime.datetime
    ) -> int:
        """Mark the recipient's subscription inactive.

        Returns the number of rows changed (0 when already inactive or
        missing).
        """
        stmt = (
            update(PushSubscription)
            .where(
                PushSubscription.recipient_id == recipient_id,
                PushSubscription.is_active.is_(True),
            )
            .values(is_active=False, deactivated_at=deactivated_at)
        )
        result = self._session.execute(stmt)
        return result.rowcount

    def active_recipient_ids(self) -> set[str]:
        """Ids of every recipient that currently has an active subscription."""
        stmt = select(PushSubscription.recipient_id).where(
            PushSubscription.is_active.is_(True),
        )
        return set(self._session.scalars(stmt).all())


class BroadcastLogRepository:
    """Append-only access to the broadcast_logs table.

    Deliberately exposes no update or delete methods.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, log: BroadcastLog) -> BroadcastLog:
        """Add a log row and flush to populate the generated id."""
        self._session.add(log)
        self._session.flush()
        return log

    def list_recent(self, limit: int = 50, offset: int = 0) -> list[BroadcastLog]:
        """Fetch log rows newest-first.

        Ties on created_at are broken by insertion order (higher id first).
        """
        stmt = (
            select(BroadcastLog)
            .order_by(BroadcastLog.created_at.desc(), BroadcastLog.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self._session.scalars(stmt).all())

    def count(self) -> int:
        stmt = select(func.count()).select_from(BroadcastLog)
        return self._session.scalar(stmt) or 0
