from enum import StrEnum


class AudienceKind(StrEnum):
    ALL = "all"
    INACTIVE_24H = "inactive_24h"
    ENROLLED = "enrolled"
    FREE_USERS = "free_users"


ALL_AUDIENCES: list[str] = [a.value for a in AudienceKind]


class PlanType(StrEnum):
    FREE = "free"
    PAID = "paid"


class DeliveryStatus(StrEnum):
    DELIVERED = "delivered"
    FAILED = "failed"
    NO_SUBSCRIPTION = "no_subscription"
