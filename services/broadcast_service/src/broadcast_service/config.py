from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BroadcastConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BROADCAST_")

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    max_concurrency: int = Field(default=10, ge=1)
    deadline_seconds: float | None = 60.0
    stats_cache_ttl_seconds: int = 0
    history_page_size: int = Field(default=50, ge=1, le=200)


class WebPushConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEBPUSH_")

    vapid_private_key: str = ""
    vapid_subject: str = "mailto:admin@example.com"
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.vapid_private_key)


class CeleryConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CELERY_")

    broker_url: str = "redis://localhost:6379/0"
