"""Portal Settings — every tunable read from the environment (or .env).

Invariants:
    - Secrets (jwt_secret, identity_provider_api_key) have no production-safe default
    - get_settings() is cached (lru_cache): single instance per process
    - database_url always names an async driver

Design Decisions:
    - jwt_audience="" disables the audience check (some IdPs omit `aud`)
    - Non-secret defaults match the docker-compose service names
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SYNC_POSTGRES_PREFIXES = ("postgresql://", "postgres://")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Persistence
    database_url: str = "postgresql+asyncpg://portal:portal@db:5432/portal"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Bearer tokens issued by the identity provider
    jwt_secret: str = "change-me"
    jwt_algorithms: list[str] = ["HS256"]
    jwt_audience: str = "authenticated"

    # Identity provider REST API
    identity_provider_url: str = "http://localhost:9999"
    identity_provider_api_key: str = ""
    identity_provider_timeout_seconds: float = 10.0
    email_redirect_url: str | None = None

    # Admin dashboard
    dashboard_cache_ttl_seconds: float = 60.0

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosting providers hand out postgres:// URLs; asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in _SYNC_POSTGRES_PREFIXES:
                if v.startswith(prefix):
                    return "postgresql+asyncpg://" + v[len(prefix):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
