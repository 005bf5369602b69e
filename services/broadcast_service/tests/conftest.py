"""Test fixtures for broadcast_service tests."""

import datetime
import threading
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from broadcast_shared.db.base import Base, create_session_factory
from broadcast_shared.db.models import PushSubscription, RecipientProfile
from broadcast_shared.enums import AudienceKind, PlanType

from broadcast_service.dispatcher import DeliveryDispatcher
from broadcast_service.history import BroadcastHistory
from broadcast_service.models import BroadcastRequest, Recipient, Subscription
from broadcast_service.service import BroadcastService
from broadcast_service.stores import (
    SqlRecipientDirectory,
    SqlSubscriptionStore,
    SubscriptionStore,
)
from broadcast_service.transports.base import DeliveryResult, PushTransport

NOW = datetime.datetime(2026, 10, 19, 12, 0, tzinfo=datetime.UTC)


@pytest.fixture()
def db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """File-backed SQLite engine, one per test.

    A file database lets dispatch worker threads open their own
    connections, which an in-memory database cannot share.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'broadcast.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(db_engine)


@pytest.fixture()
def seed_recipients(session_factory: sessionmaker[Session]):
    """Insert recipient rows and optional subscriptions.

    Usage: ``seed_recipients(("r1", True), ("r2", False))`` where the
    flag says whether the recipient has an active push subscription.
    """

    def _seed(*specs: tuple[str, bool], **profile: object) -> None:
        with session_factory() as session:
            for recipient_id, subscribed in specs:
                session.add(
                    RecipientProfile(
                        id=recipient_id,
                        last_active_at=profile.get("last_active_at", NOW),
                        is_enrolled=profile.get("is_enrolled", False),
                        plan_type=profile.get("plan_type", PlanType.FREE),
                    )
                )
                if subscribed:
                    session.add(
                        PushSubscription(
                            recipient_id=recipient_id,
                            endpoint=f"https://push.example.com/{recipient_id}",
                            p256dh="p256dh-key",
                            auth="auth-secret",
                        )
                    )
            session.commit()

    return _seed


@pytest.fixture()
def mock_transport() -> MagicMock:
    """Transport that delivers everything."""
    transport = MagicMock(spec=PushTransport)
    transport.send.return_value = DeliveryResult(success=True, details="delivered")
    return transport


@pytest.fixture()
def dispatcher(mock_transport: MagicMock) -> Generator[DeliveryDispatcher, None, None]:
    dispatcher = DeliveryDispatcher(mock_transport, max_concurrency=4)
    yield dispatcher
    dispatcher.close()


@pytest.fixture()
def history(session_factory: sessionmaker[Session]) -> BroadcastHistory:
    return BroadcastHistory(session_factory)


@pytest.fixture()
def service(
    session_factory: sessionmaker[Session],
    dispatcher: DeliveryDispatcher,
    history: BroadcastHistory,
) -> BroadcastService:
    return BroadcastService(
        directory=SqlRecipientDirectory(session_factory),
        subscriptions=SqlSubscriptionStore(session_factory),
        dispatcher=dispatcher,
        history=history,
        default_deadline=10.0,
        clock=lambda: NOW,
    )


@pytest.fixture()
def broadcast_request() -> BroadcastRequest:
    return BroadcastRequest(title="Hi", body="Test", audience=AudienceKind.ALL)


class InMemorySubscriptionStore(SubscriptionStore):
    """Thread-safe dict-backed store for dispatcher tests."""

    def __init__(self, recipient_ids: list[str]) -> None:
        self._lock = threading.Lock()
        self._subs = {
            rid: Subscription(
                recipient_id=rid,
                endpoint=f"https://push.example.com/{rid}",
                p256dh="p256dh-key",
                auth="auth-secret",
            )
            for rid in recipient_ids
        }
        self.deactivated: list[str] = []

    def get(self, recipient_id: str) -> Subscription | None:
        with self._lock:
            return self._subs.get(recipient_id)

    def deactivate(self, recipient_id: str) -> None:
        with self._lock:
            self._subs.pop(recipient_id, None)
            self.deactivated.append(recipient_id)

    def active_recipient_ids(self) -> set[str]:
        with self._lock:
            return set(self._subs)


@pytest.fixture()
def subscription_store_factory():
    return InMemorySubscriptionStore


def make_recipient(recipient_id: str, **overrides: object) -> Recipient:
    defaults: dict = {
        "last_active_at": NOW,
        "is_enrolled": False,
        "plan_type": PlanType.FREE,
    }
    defaults.update(overrides)
    return Recipient(id=recipient_id, **defaults)


@pytest.fixture()
def recipient_factory():
    return make_recipient


@pytest.fixture()
def now() -> datetime.datetime:
    return NOW
