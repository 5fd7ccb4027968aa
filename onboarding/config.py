"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - api_keys parsed from JSON: {"<key>": {"id": "...", "permissions": [...]}}
"""

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class ApiKeyGrant(BaseModel):
    """Actor identity and capabilities bound to one API key."""
    id: str
    permissions: list[str] = []


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://onboarding:onboarding@db:5432/onboarding"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Authentication
    api_keys: dict[str, ApiKeyGrant] = {}

    # Exception reporting
    reporters: list[str] = ["log"]
    error_tracker_url: str | None = None
    error_tracker_token: str | None = None
    reporter_timeout_seconds: float = 2.0
    reporting_ceiling_seconds: float = 5.0

    # Notifications
    mail_from_address: str = "hello@app.com"
    mail_from_name: str = "Your Application"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
