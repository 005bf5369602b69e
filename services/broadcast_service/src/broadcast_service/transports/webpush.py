"""Web Push transport backed by pywebpush (VAPID)."""

import logging

import requests
from pywebpush import WebPushException, webpush

from broadcast_service.config import WebPushConfig
from broadcast_service.models import Subscription
from broadcast_service.transports.base import DeliveryResult, PushTransport

logger = logging.getLogger(__name__)

# Push services answer 404/410 once the browser has dropped the endpoint.
_EXPIRED_STATUS_CODES = frozenset({404, 410})


class WebPushTransport(PushTransport):
    """Sends encrypted Web Push messages through the subscriber's push service."""

    def __init__(self, config: WebPushConfig) -> None:
        self._private_key = config.vapid_private_key
        self._subject = config.vapid_subject
        self._timeout = config.timeout_seconds

    def send(self, subscription: Subscription, payload: str) -> DeliveryResult:
        try:
            webpush(
                subscription_info=subscription.to_webpush_dict(),
                data=payload,
                vapid_private_key=self._private_key,
                # pywebpush adds aud/exp to the claims dict, so pass a fresh one.
                vapid_claims={"sub": self._subject},
                timeout=self._timeout,
            )
        except WebPushException as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status in _EXPIRED_STATUS_CODES:
                return DeliveryResult(
                    success=False,
                    details="subscription expired",
                    subscription_expired=True,
                )
            if status is not None:
                return DeliveryResult(
                    success=False, details=f"push service returned {status}"
                )
            logger.warning(
                "Push rejected before reaching the push service",
                extra={"recipient_id": subscription.recipient_id},
            )
            return DeliveryResult(success=False, details="push rejected")
        except requests.RequestException:
            return DeliveryResult(success=False, details="push service unreachable")

        return DeliveryResult(success=True, details="delivered")
