"""Abstract push transport interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from broadcast_service.models import Subscription


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of a single push-send attempt.

    ``subscription_expired`` is set when the push service reports that the
    endpoint no longer exists, so the caller can deactivate it.
    """

    success: bool
    details: str
    subscription_expired: bool = False


class PushTransport(ABC):
    """Base class for push-service clients."""

    @abstractmethod
    def send(self, subscription: Subscription, payload: str) -> DeliveryResult:
        """Attempt to deliver *payload* (a JSON string) to one endpoint.

        Implementations should not raise; return DeliveryResult(success=False)
        on failure instead. ``details`` must not contain key material.
        """
