"""Time-bounded Redis cache for audience statistics.

The cache is an explicit object handed to the service; nothing is cached
at module level. Redis errors degrade to a cache miss.
"""

import json
import logging

from redis import Redis
from redis.exceptions import RedisError

from broadcast_shared.enums import AudienceKind

from broadcast_service.models import AudienceStats

logger = logging.getLogger(__name__)


class AudienceStatsCache:
    KEY = "broadcast:audience_stats"

    def __init__(self, redis_client: Redis, ttl_seconds: int) -> None:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be positive")
        self._redis = redis_client
        self._ttl = ttl_seconds

    def get(self) -> dict[AudienceKind, AudienceStats] | None:
        try:
            raw = self._redis.get(self.KEY)
        except RedisError:
            logger.warning("Audience stats cache read failed", exc_info=True)
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
            return {
                AudienceKind(kind): AudienceStats(
                    total=int(item["total"]), with_push=int(item["withPush"])
                )
                for kind, item in data.items()
            }
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed audience stats cache entry")
            return None

    def set(self, stats: dict[AudienceKind, AudienceStats]) -> None:
        value = json.dumps({str(kind): s.to_dict() for kind, s in stats.items()})
        try:
            self._redis.set(self.KEY, value, ex=self._ttl)
        except RedisError:
            logger.warning("Audience stats cache write failed", exc_info=True)

    def invalidate(self) -> None:
        try:
            self._redis.delete(self.KEY)
        except RedisError:
            logger.warning("Audience stats cache invalidation failed", exc_info=True)
