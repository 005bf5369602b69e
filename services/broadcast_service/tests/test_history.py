"""Tests for the append-only broadcast history."""

import dataclasses
import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from broadcast_shared.enums import AudienceKind

from broadcast_service.errors import BroadcastStorageError
from broadcast_service.history import MAX_PAGE_SIZE, BroadcastHistory
from broadcast_service.models import BroadcastReport, BroadcastRequest

REPORT = BroadcastReport(total_recipients=3, sent_successfully=1, failed=1, no_subscription=1)


def _failing_session_factory() -> MagicMock:
    factory = MagicMock(spec=sessionmaker)
    factory.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))
    return factory


class TestRecord:
    def test_record_returns_entry(self, history, broadcast_request, now) -> None:
        entry = history.record(broadcast_request, REPORT, now)

        assert entry.id is not None
        assert entry.title == "Hi"
        assert entry.audience == AudienceKind.ALL
        assert entry.report == REPORT
        assert entry.created_at == now

    def test_record_keeps_url(self, history, now) -> None:
        request = BroadcastRequest(
            title="New lesson", body="Open it", url="/courses", audience=AudienceKind.ENROLLED
        )

        history.record(request, REPORT, now)

        [entry] = history.list()
        assert entry.url == "/courses"
        assert entry.audience == AudienceKind.ENROLLED

    def test_storage_failure_raises(self, broadcast_request, now) -> None:
        history = BroadcastHistory(_failing_session_factory())

        with pytest.raises(BroadcastStorageError):
            history.record(broadcast_request, REPORT, now)


class TestList:
    def test_newest_first(self, history, broadcast_request, now) -> None:
        for minutes in (0, 10, 5):
            history.record(
                broadcast_request.model_copy(update={"title": f"t{minutes}"}),
                REPORT,
                now + datetime.timedelta(minutes=minutes),
            )

        assert [e.title for e in history.list()] == ["t10", "t5", "t0"]

    def test_pagination(self, history, broadcast_request, now) -> None:
        for i in range(5):
            history.record(
                broadcast_request.model_copy(update={"title": f"t{i}"}),
                REPORT,
                now + datetime.timedelta(seconds=i),
            )

        page = history.list(limit=2, offset=2)
        assert [e.title for e in page] == ["t2", "t1"]

    def test_limit_is_clamped(self, history, broadcast_request, now) -> None:
        history.record(broadcast_request, REPORT, now)

        assert len(history.list(limit=0)) == 1
        assert len(history.list(limit=MAX_PAGE_SIZE * 10, offset=-5)) == 1

    def test_created_at_is_utc(self, history, broadcast_request, now) -> None:
        history.record(broadcast_request, REPORT, now)

        [entry] = history.list()
        assert entry.created_at == now
        assert entry.created_at.tzinfo is not None

    def test_read_failure_raises(self) -> None:
        history = BroadcastHistory(_failing_session_factory())

        with pytest.raises(BroadcastStorageError):
            history.list()


class TestAppendOnly:
    def test_n_records_give_n_entries(self, history, broadcast_request, now) -> None:
        for _ in range(4):
            history.record(broadcast_request, REPORT, now)

        assert history.count() == 4
        assert len(history.list()) == 4

    def test_entries_cannot_be_mutated(self, history, broadcast_request, now) -> None:
        entry = history.record(broadcast_request, REPORT, now)

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.title = "tampered"  # type: ignore[misc]

        [stored] = history.list()
        assert stored.title == "Hi"

    def test_copies_do_not_share_state(self, history, broadcast_request, now) -> None:
        history.record(broadcast_request, REPORT, now)

        first = history.list()
        first.clear()

        assert len(history.list()) == 1

    def test_no_update_or_delete_api(self) -> None:
        public = {name for name in dir(BroadcastHistory) if not name.startswith("_")}

        assert public == {"record", "list", "count", "health_check"}


class TestHealthCheck:
    def test_healthy(self, history) -> None:
        assert history.health_check() is True

    def test_unhealthy(self) -> None:
        assert BroadcastHistory(_failing_session_factory()).health_check() is False
