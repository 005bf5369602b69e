"""Collaborator stores read by the broadcast engine.

The SQL implementations open a fresh session per call, so dispatch
workers can read subscriptions concurrently without sharing a session.
"""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from broadcast_shared.db.repositories import PushSubscriptionRepository, RecipientRepository
from broadcast_shared.enums import PlanType

from broadcast_service.clock import as_utc, utcnow
from broadcast_service.errors import BroadcastStorageError
from broadcast_service.models import Recipient, Subscription

logger = logging.getLogger(__name__)


class SubscriptionStore(ABC):
    @abstractmethod
    def get(self, recipient_id: str) -> Subscription | None:
        """Return the recipient's active subscription, or None."""

    @abstractmethod
    def deactivate(self, recipient_id: str) -> None:
        """Stop using the recipient's subscription for future sends."""

    @abstractmethod
    def active_recipient_ids(self) -> set[str]:
        """Ids of every recipient with an active subscription."""


class RecipientDirectory(ABC):
    @abstractmethod
    def list_all(self) -> list[Recipient]:
        """Snapshot of every known recipient.

        Raises BroadcastStorageError when the directory is unreachable.
        """


class SqlSubscriptionStore(SubscriptionStore):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, recipient_id: str) -> Subscription | None:
        with self._session_factory() as session:
            row = PushSubscriptionRepository(session).get_active(recipient_id)
            if row is None:
                return None
            return Subscription(
                recipient_id=row.recipient_id,
                endpoint=row.endpoint,
                p256dh=row.p256dh,
                auth=row.auth,
            )

    def deactivate(self, recipient_id: str) -> None:
        with self._session_factory() as session:
            changed = PushSubscriptionRepository(session).deactivate(
                recipient_id, utcnow()
            )
            session.commit()
        logger.info(
            "Subscription deactivated",
            extra={"recipient_id": recipient_id, "changed": changed},
        )

    def active_recipient_ids(self) -> set[str]:
        try:
            with self._session_factory() as session:
                return PushSubscriptionRepository(session).active_recipient_ids()
        except SQLAlchemyError as exc:
            raise BroadcastStorageError("Subscription store unreachable") from exc


class SqlRecipientDirectory(RecipientDirectory):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def list_all(self) -> list[Recipient]:
        try:
            with self._session_factory() as session:
                rows = RecipientRepository(session).list_all()
                return [
                    Recipient(
                        id=row.id,
                        last_active_at=as_utc(row.last_active_at),
                        is_enrolled=row.is_enrolled,
                        plan_type=PlanType(row.plan_type),
                    )
                    for row in rows
                ]
        except (SQLAlchemyError, ValueError) as exc:
            raise BroadcastStorageError("Recipient directory unreachable") from exc
