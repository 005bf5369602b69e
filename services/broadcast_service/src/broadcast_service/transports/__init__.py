"""Push transport selection."""

import logging

from broadcast_service.config import WebPushConfig
from broadcast_service.transports.base import DeliveryResult, PushTransport
from broadcast_service.transports.stub import StubPushTransport
from broadcast_service.transports.webpush import WebPushTransport

logger = logging.getLogger(__name__)

__all__ = [
    "DeliveryResult",
    "PushTransport",
    "StubPushTransport",
    "WebPushTransport",
    "create_transport",
]


def create_transport(config: WebPushConfig) -> PushTransport:
    """Return the Web Push transport, or the logging stub without VAPID keys."""
    if config.is_configured:
        return WebPushTransport(config)
    logger.warning("VAPID keys not configured, using stub push transport")
    return StubPushTransport()
