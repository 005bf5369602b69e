"""Append-only broadcast history backed by the broadcast_logs table."""

import datetime
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from broadcast_shared.db.models import BroadcastLog
from broadcast_shared.db.repositories import BroadcastLogRepository
from broadcast_shared.enums import AudienceKind

from broadcast_service.clock import as_utc
from broadcast_service.errors import BroadcastStorageError
from broadcast_service.models import BroadcastLogEntry, BroadcastReport, BroadcastRequest

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


class BroadcastHistory:
    """Records completed broadcasts and lists them newest-first.

    Entries handed out are frozen copies, never the ORM rows themselves.
    There is no update or delete path.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def record(
        self,
        request: BroadcastRequest,
        report: BroadcastReport,
        at: datetime.datetime,
    ) -> BroadcastLogEntry:
        log = BroadcastLog(
            title=request.title,
            body=request.body,
            url=request.url,
            target_audience=str(request.audience),
            total_targeted=report.total_recipients,
            sent_successfully=report.sent_successfully,
            failed=report.failed,
            no_subscription=report.no_subscription,
            created_at=at,
        )
        try:
            with self._session_factory() as session:
                BroadcastLogRepository(session).create(log)
                session.commit()
                log_id = log.id
        except SQLAlchemyError as exc:
            raise BroadcastStorageError("Failed to record broadcast history") from exc

        return BroadcastLogEntry(
            id=log_id,
            title=request.title,
            body=request.body,
            url=request.url,
            audience=request.audience,
            report=report,
            created_at=at,
        )

    def list(self, limit: int = 50, offset: int = 0) -> list[BroadcastLogEntry]:
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)
        try:
            with self._session_factory() as session:
                rows = BroadcastLogRepository(session).list_recent(limit, offset)
                return [_to_entry(row) for row in rows]
        except SQLAlchemyError as exc:
            raise BroadcastStorageError("Failed to read broadcast history") from exc

    def count(self) -> int:
        try:
            with self._session_factory() as session:
                return BroadcastLogRepository(session).count()
        except SQLAlchemyError as exc:
            raise BroadcastStorageError("Failed to read broadcast history") from exc

    def health_check(self) -> bool:
        try:
            with self._session_factory() as session:
                session.execute(select(1))
            return True
        except SQLAlchemyError:
            return False


def _to_entry(row: BroadcastLog) -> BroadcastLogEntry:
    return BroadcastLogEntry(
        id=row.id,
        title=row.title,
        body=row.body,
        url=row.url,
        audience=AudienceKind(row.target_audience),
        report=BroadcastReport(
            total_recipients=row.total_targeted,
            sent_successfully=row.sent_successfully,
            failed=row.failed,
            no_subscription=row.no_subscription,
        ),
        created_at=as_utc(row.created_at),
    )
