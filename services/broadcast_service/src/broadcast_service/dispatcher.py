"""Concurrent fan-out of one message to many recipients."""

import json
import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from broadcast_shared.enums import DeliveryStatus

from broadcast_service.models import BroadcastRequest, DeliveryOutcome
from broadcast_service.stores import SubscriptionStore
from broadcast_service.transports.base import PushTransport

logger = logging.getLogger(__name__)

TIMEOUT_DETAIL = "timeout"
TRANSPORT_ERROR_DETAIL = "transport error"
LOOKUP_ERROR_DETAIL = "subscription lookup failed"

_MAX_DETAIL_LENGTH = 200


class DeliveryDispatcher:
    """Sends a broadcast to each recipient with a bounded worker pool.

    Every recipient gets exactly one terminal outcome. There are no
    retries: a failed send is reported as failed. Expired subscriptions
    are deactivated on a separate single worker so a slow store write
    never holds up delivery.
    """

    def __init__(self, transport: PushTransport, max_concurrency: int = 10) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._transport = transport
        self._max_concurrency = max_concurrency
        self._deactivator = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="push-deactivate"
        )

    def dispatch(
        self,
        request: BroadcastRequest,
        recipient_ids: Sequence[str],
        subscriptions: SubscriptionStore,
        deadline: float | None = None,
    ) -> list[DeliveryOutcome]:
        """Deliver *request* to every recipient id.

        Returns outcomes in the same order as *recipient_ids*. When
        *deadline* (seconds) elapses, recipients still queued or in flight
        are reported as failed with detail ``"timeout"``.
        """
        ids = list(recipient_ids)
        if not ids:
            return []

        payload = json.dumps(request.payload())
        collected: list[DeliveryOutcome | None] = [None] * len(ids)

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_concurrency, len(ids)),
            thread_name_prefix="push-dispatch",
        )
        futures: dict[Future[tuple[DeliveryOutcome, bool]], int] = {
            executor.submit(self._deliver, rid, payload, subscriptions): index
            for index, rid in enumerate(ids)
        }

        try:
            for future in as_completed(futures, timeout=deadline):
                outcome, expired = future.result()
                collected[futures[future]] = outcome
                if expired:
                    self._schedule_deactivation(subscriptions, outcome.recipient_id)
        except TimeoutError:
            for future in futures:
                if not future.done():
                    future.add_done_callback(
                        lambda f: self._on_late_result(f, subscriptions)
                    )
            logger.warning(
                "Dispatch deadline elapsed",
                extra={
                    "deadline_seconds": deadline,
                    "unfinished": sum(1 for o in collected if o is None),
                },
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return [
            outcome
            if outcome is not None
            else DeliveryOutcome(rid, DeliveryStatus.FAILED, TIMEOUT_DETAIL)
            for rid, outcome in zip(ids, collected)
        ]

    def close(self) -> None:
        """Wait for pending deactivations and release the worker."""
        self._deactivator.shutdown(wait=True)

    def _deliver(
        self,
        recipient_id: str,
        payload: str,
        subscriptions: SubscriptionStore,
    ) -> tuple[DeliveryOutcome, bool]:
        log_ctx = {"recipient_id": recipient_id}

        try:
            subscription = subscriptions.get(recipient_id)
        except Exception:
            logger.exception("Subscription lookup failed", extra=log_ctx)
            return (
                DeliveryOutcome(recipient_id, DeliveryStatus.FAILED, LOOKUP_ERROR_DETAIL),
                False,
            )

        if subscription is None:
            return DeliveryOutcome(recipient_id, DeliveryStatus.NO_SUBSCRIPTION), False

        try:
            result = self._transport.send(subscription, payload)
        except Exception:
            logger.exception("Push transport error", extra=log_ctx)
            return (
                DeliveryOutcome(
                    recipient_id, DeliveryStatus.FAILED, TRANSPORT_ERROR_DETAIL
                ),
                False,
            )

        if result.success:
            logger.debug("Push delivered", extra=log_ctx)
            return DeliveryOutcome(recipient_id, DeliveryStatus.DELIVERED), False

        logger.info("Push failed", extra={**log_ctx, "reason": result.details})
        detail = (result.details or "push failed")[:_MAX_DETAIL_LENGTH]
        return (
            DeliveryOutcome(recipient_id, DeliveryStatus.FAILED, detail),
            result.subscription_expired,
        )

    def _on_late_result(
        self,
        future: Future[tuple[DeliveryOutcome, bool]],
        subscriptions: SubscriptionStore,
    ) -> None:
        # The outcome stays "timeout"; only an expired endpoint is acted on.
        if future.cancelled() or future.exception() is not None:
            return
        outcome, expired = future.result()
        if expired:
            self._schedule_deactivation(subscriptions, outcome.recipient_id)

    def _schedule_deactivation(
        self, subscriptions: SubscriptionStore, recipient_id: str
    ) -> None:
        try:
            self._deactivator.submit(self._deactivate, subscriptions, recipient_id)
        except RuntimeError:
            logger.warning(
                "Dispatcher closed, skipping deactivation",
                extra={"recipient_id": recipient_id},
            )

    @staticmethod
    def _deactivate(subscriptions: SubscriptionStore, recipient_id: str) -> None:
        try:
            subscriptions.deactivate(recipient_id)
        except Exception:
            logger.exception(
                "Subscription deactivation failed",
                extra={"recipient_id": recipient_id},
            )
