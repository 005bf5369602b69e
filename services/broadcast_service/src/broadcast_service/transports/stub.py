"""Transport for environments without VAPID keys: nothing leaves the process."""

import logging

from broadcast_service.models import Subscription
from broadcast_service.transports.base import DeliveryResult, PushTransport

logger = logging.getLogger(__name__)


class StubPushTransport(PushTransport):
    def send(self, subscription: Subscription, payload: str) -> DeliveryResult:
        logger.info(
            "Push skipped, no VAPID keys configured",
            extra={
                "recipient_id": subscription.recipient_id,
                "payload_bytes": len(payload.encode()),
            },
        )
        return DeliveryResult(success=True, details="delivered")
