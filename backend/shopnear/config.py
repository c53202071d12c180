"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (or .env)
    - get_settings() is cached (lru_cache): single instance per process
    - The token codec is built from settings once and injected, never
      re-reading the secret at call time
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopnear.core.token_codec import TokenCodec


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://shopnear:shopnear@db:5432/shopnear"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    secret_key: str = "change-me"
    token_ttl_hours: int = 7 * 24
    cookie_domain: str | None = None
    cookie_max_age_seconds: int = 30 * 24 * 3600
    cookie_secure: bool = False
    bcrypt_rounds: int = 12

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def build_token_codec(settings: Settings) -> TokenCodec:
    return TokenCodec(
        secret_key=settings.secret_key,
        ttl=timedelta(hours=settings.token_ttl_hours),
    )
