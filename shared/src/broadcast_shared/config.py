"""Connection settings shared by the broadcast API and worker."""

from urllib.parse import quote_plus

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = "localhost"
    port: int = 5432
    database: str = "broadcasts"
    user: str = "postgres"
    password: str = "postgres"
    # Dispatch workers each hold a connection while looking up a subscription.
    pool_size: int = Field(default=10, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dsn(self) -> str:
        credentials = f"{quote_plus(self.user)}:{quote_plus(self.password)}"
        return f"postgresql://{credentials}@{self.host}:{self.port}/{self.database}"


class RedisConfig(BaseSettings):
    """Redis holding the Celery broker and the audience stats cache."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        auth = f":{quote_plus(self.password)}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"
