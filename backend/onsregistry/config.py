"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Owner identity and authorizer roster come from the environment (never hardcoded
      in call sites)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - persist_snapshots defaults to False: the registry works out-of-the-box in memory;
      turning it on requires a migrated database
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Access control
    owner_id: str = "owner"
    authorizers: list[str] = []
    require_authorized_writers: bool = False

    # Event side-channel
    event_log_capacity: int = 10_000

    # Persistence
    persist_snapshots: bool = False
    database_url: str = (
        "postgresql+asyncpg://ons:ons@db:5432/ons"
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

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
