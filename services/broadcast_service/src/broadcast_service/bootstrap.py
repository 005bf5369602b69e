"""Wire the broadcast service from environment configuration."""

from redis import Redis

from broadcast_shared.config import PostgresConfig, RedisConfig
from broadcast_shared.db.base import create_db_engine, create_session_factory

from broadcast_service.config import BroadcastConfig, WebPushConfig
from broadcast_service.dispatcher import DeliveryDispatcher
from broadcast_service.history import BroadcastHistory
from broadcast_service.service import BroadcastService
from broadcast_service.stats_cache import AudienceStatsCache
from broadcast_service.stores import SqlRecipientDirectory, SqlSubscriptionStore
from broadcast_service.transports import create_transport


def build_service(config: BroadcastConfig) -> BroadcastService:
    pg = PostgresConfig()
    engine = create_db_engine(
        pg.dsn,
        pool_pre_ping=True,
        # One connection per dispatch worker plus one for the request itself.
        pool_size=max(pg.pool_size, config.max_concurrency + 1),
    )
    session_factory = create_session_factory(engine)

    stats_cache = None
    if config.stats_cache_ttl_seconds > 0:
        stats_cache = AudienceStatsCache(
            Redis.from_url(RedisConfig().url),
            config.stats_cache_ttl_seconds,
        )

    dispatcher = DeliveryDispatcher(
        create_transport(WebPushConfig()),
        max_concurrency=config.max_concurrency,
    )

    return BroadcastService(
        directory=SqlRecipientDirectory(session_factory),
        subscriptions=SqlSubscriptionStore(session_factory),
        dispatcher=dispatcher,
        history=BroadcastHistory(session_factory),
        default_deadline=config.deadline_seconds,
        stats_cache=stats_cache,
    )
