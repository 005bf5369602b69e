"""Value objects passed between the broadcast engine stages."""

import datetime
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from broadcast_shared.enums import AudienceKind, DeliveryStatus, PlanType


@dataclass(frozen=True, slots=True)
class Recipient:
    id: str
    last_active_at: datetime.datetime | None
    is_enrolled: bool
    plan_type: PlanType


@dataclass(frozen=True, slots=True)
class Subscription:
    """Push endpoint credential for one recipient.

    Key material is excluded from repr so it never reaches the logs.
    """

    recipient_id: str
    endpoint: str
    p256dh: str = field(repr=False)
    auth: str = field(repr=False)

    def to_webpush_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


class BroadcastRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    url: str | None = None
    audience: AudienceKind

    def payload(self) -> dict[str, str]:
        """Message shape the client service worker renders."""
        data = {"title": self.title, "body": self.body}
        if self.url:
            data["url"] = self.url
        return data


@dataclass(frozen=True, slots=True)
class DeliveryOutcome:
    recipient_id: str
    status: DeliveryStatus
    error_detail: str | None = None


@dataclass(frozen=True, slots=True)
class BroadcastReport:
    total_recipients: int
    sent_successfully: int
    failed: int
    no_subscription: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalUsers": self.total_recipients,
            "sentSuccessfully": self.sent_successfully,
            "failed": self.failed,
            "noSubscription": self.no_subscription,
        }


@dataclass(frozen=True, slots=True)
class BroadcastLogEntry:
    id: int
    title: str
    body: str
    url: str | None
    audience: AudienceKind
    report: BroadcastReport
    created_at: datetime.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "url": self.url,
            "targetAudience": str(self.audience),
            "totalTargeted": self.report.total_recipients,
            "sentSuccessfully": self.report.sent_successfully,
            "failed": self.report.failed,
            "noSubscription": self.report.no_subscription,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class AudienceStats:
    total: int
    with_push: int

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "withPush": self.with_push}
