"""Database layer: models, repositories, engine/session utilities."""

from broadcast_shared.db.base import Base, create_db_engine, create_session_factory
from broadcast_shared.db.models import BroadcastLog, PushSubscription, RecipientProfile
from broadcast_shared.db.repositories import (
    BroadcastLogRepository,
    PushSubscriptionRepository,
    RecipientRepository,
)

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "BroadcastLog",
    "PushSubscription",
    "RecipientProfile",
    "BroadcastLogRepository",
    "PushSubscriptionRepository",
    "RecipientRepository",
]
