"""Broadcast use case: validate, resolve, dispatch, aggregate, record."""

import datetime
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from broadcast_shared.enums import AudienceKind

from broadcast_service.audience import audience_stats, resolve
from broadcast_service.clock import utcnow
from broadcast_service.dispatcher import DeliveryDispatcher
from broadcast_service.history import BroadcastHistory
from broadcast_service.models import (
    AudienceStats,
    BroadcastLogEntry,
    BroadcastReport,
    BroadcastRequest,
)
from broadcast_service.report import aggregate
from broadcast_service.stats_cache import AudienceStatsCache
from broadcast_service.stores import RecipientDirectory, SubscriptionStore
from broadcast_service.validation import parse_broadcast_request

logger = logging.getLogger(__name__)


class BroadcastService:
    """Runs broadcasts end to end and serves the read-only admin queries."""

    def __init__(
        self,
        directory: RecipientDirectory,
        subscriptions: SubscriptionStore,
        dispatcher: DeliveryDispatcher,
        history: BroadcastHistory,
        *,
        default_deadline: float | None = None,
        clock: Callable[[], datetime.datetime] = utcnow,
        stats_cache: AudienceStatsCache | None = None,
    ) -> None:
        self._directory = directory
        self._subscriptions = subscriptions
        self._dispatcher = dispatcher
        self._history = history
        self._default_deadline = default_deadline
        self._clock = clock
        self._stats_cache = stats_cache

    def broadcast(
        self,
        request: BroadcastRequest | Mapping[str, Any],
        deadline: float | None = None,
    ) -> BroadcastReport:
        """Send one message to a resolved audience and record the result.

        Raises BroadcastValidationError before any side effect if the
        request is invalid, and BroadcastStorageError if the recipient
        directory cannot be read or the history entry cannot be written.
        In the latter case some pushes may already have gone out.
        """
        started = time.monotonic()
        budget = deadline if deadline is not None else self._default_deadline

        request = parse_broadcast_request(request)

        recipients = self._directory.list_all()
        recipient_ids = resolve(request.audience, recipients, self._clock())

        log_ctx = {
            "audience": str(request.audience),
            "recipients": len(recipient_ids),
        }
        logger.info("Broadcast dispatching", extra=log_ctx)

        remaining = None
        if budget is not None:
            remaining = max(0.0, budget - (time.monotonic() - started))

        outcomes = self._dispatcher.dispatch(
            request, recipient_ids, self._subscriptions, deadline=remaining
        )
        report = aggregate(len(recipient_ids), outcomes)

        entry = self._history.record(request, report, self._clock())

        if self._stats_cache is not None:
            self._stats_cache.invalidate()

        logger.info(
            "Broadcast recorded",
            extra={
                **log_ctx,
                "broadcast_id": entry.id,
                "sent_successfully": report.sent_successfully,
                "failed": report.failed,
                "no_subscription": report.no_subscription,
                "duration_ms": round((time.monotonic() - started) * 1000),
            },
        )
        return report

    def audience_stats(self) -> dict[AudienceKind, AudienceStats]:
        if self._stats_cache is not None:
            cached = self._stats_cache.get()
            if cached is not None:
                return cached

        stats = audience_stats(
            self._directory.list_all(),
            self._subscriptions.active_recipient_ids(),
            self._clock(),
        )

        if self._stats_cache is not None:
            self._stats_cache.set(stats)
        return stats

    def history(self, limit: int = 50, offset: int = 0) -> list[BroadcastLogEntry]:
        return self._history.list(limit=limit, offset=offset)

    def health_check(self) -> bool:
        return self._history.health_check()

    def close(self) -> None:
        self._dispatcher.close()
