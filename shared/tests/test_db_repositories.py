"""Tests for repository classes."""

import datetime

from sqlalchemy.orm import Session

from broadcast_shared.db.models import BroadcastLog, PushSubscription, RecipientProfile
from broadcast_shared.db.repositories import (
    BroadcastLogRepository,
    PushSubscriptionRepository,
    RecipientRepository,
)
from broadcast_shared.enums import AudienceKind, PlanType


def _make_subscription(recipient_id: str, **overrides: object) -> PushSubscription:
    defaults: dict = {
        "recipient_id": recipient_id,
        "endpoint": f"https://push.example.com/{recipient_id}",
        "p256dh": "p256dh-key",
        "auth": "auth-secret",
    }
    defaults.update(overrides)
    return PushSubscription(**defaults)


def _make_log(created_at: datetime.datetime, **overrides: object) -> BroadcastLog:
    defaults: dict = {
        "title": "Title",
        "body": "Body",
        "target_audience": AudienceKind.ALL,
        "created_at": created_at,
    }
    defaults.update(overrides)
    return BroadcastLog(**defaults)


class TestRecipientRepository:
    def test_list_all_ordered_by_id(self, db_session: Session) -> None:
        db_session.add_all([
            RecipientProfile(id="b", plan_type=PlanType.PAID),
            RecipientProfile(id="a", is_enrolled=True),
        ])
        db_session.flush()

        rows = RecipientRepository(db_session).list_all()
        assert [r.id for r in rows] == ["a", "b"]


class TestPushSubscriptionRepository:
    def test_get_active(self, db_session: Session) -> None:
        repo = PushSubscriptionRepository(db_session)
        repo.create(_make_subscription("r1"))

        found = repo.get_active("r1")
        assert found is not None
        assert found.endpoint == "https://push.example.com/r1"

    def test_get_active_ignores_inactive(self, db_session: Session) -> None:
        repo = PushSubscriptionRepository(db_session)
        repo.create(_make_subscription("r2", is_active=False))

        assert repo.get_active("r2") is None

    def test_deactivate(self, db_session: Session) -> None:
        repo = PushSubscriptionRepository(db_session)
        sub = repo.create(_make_subscription("r3"))
        now = datetime.datetime.now(datetime.UTC)

        changed = repo.deactivate("r3", now)
        db_session.refresh(sub)

        assert changed == 1
        assert sub.is_active is False
        assert sub.deactivated_at is not None
        assert repo.get_active("r3") is None

    def test_deactivate_missing_is_noop(self, db_session: Session) -> None:
        repo = PushSubscriptionRepository(db_session)
        now = datetime.datetime.now(datetime.UTC)

        assert repo.deactivate("nobody", now) == 0

    def test_active_recipient_ids(self, db_session: Session) -> None:
        repo = PushSubscriptionRepository(db_session)
        repo.create(_make_subscription("on-1"))
        repo.create(_make_subscription("on-2"))
        repo.create(_make_subscription("off", is_active=False))

        assert repo.active_recipient_ids() == {"on-1", "on-2"}


class TestBroadcastLogRepository:
    def test_create_assigns_id(self, db_session: Session) -> None:
        repo = BroadcastLogRepository(db_session)
        log = repo.create(_make_log(datetime.datetime.now(datetime.UTC)))

        assert log.id is not None

    def test_list_recent_newest_first(self, db_session: Session) -> None:
        repo = BroadcastLogRepository(db_session)
        now = datetime.datetime.now(datetime.UTC)
        older = repo.create(_make_log(now - datetime.timedelta(hours=1), title="old"))
        newer = repo.create(_make_log(now, title="new"))

        rows = repo.list_recent()
        assert [r.id for r in rows] == [newer.id, older.id]

    def test_list_recent_breaks_ties_by_insertion(self, db_session: Session) -> None:
        repo = BroadcastLogRepository(db_session)
        now = datetime.datetime.now(datetime.UTC)
        first = repo.create(_make_log(now))
        second = repo.create(_make_log(now))

        rows = repo.list_recent()
        assert [r.id for r in rows] == [second.id, first.id]

    def test_list_recent_pagination(self, db_session: Session) -> None:
        repo = BroadcastLogRepository(db_session)
        now = datetime.datetime.now(datetime.UTC)
        created = [
            repo.create(_make_log(now + datetime.timedelta(seconds=i)))
            for i in range(5)
        ]

        page = repo.list_recent(limit=2, offset=1)
        assert [r.id for r in page] == [created[3].id, created[2].id]

    def test_count(self, db_session: Session) -> None:
        repo = BroadcastLogRepository(db_session)
        assert repo.count() == 0

        now = datetime.datetime.now(datetime.UTC)
        repo.create(_make_log(now))
        repo.create(_make_log(now))

        assert repo.count() == 2
