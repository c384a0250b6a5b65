"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Driver-specific URL schemes, keyed by the prefix they replace
_ASYNC_SCHEMES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}
_SYNC_SCHEMES = {
    "postgres://": "postgresql://",
    "postgresql+asyncpg://": "postgresql://",
    "sqlite+aiosqlite://": "sqlite://",
}


def _with_scheme(url: str, schemes: dict[str, str]) -> str:
    for prefix, replacement in schemes.items():
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "userlink"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    # Storage
    # "json" keeps every collection in one JSON file, "database" uses the documents table
    storage_backend: Literal["json", "database"] = "json"
    json_db_path: str = "db.json"  # Empty string keeps the JSON store in memory
    database_auto_create: bool = True
    storage_fallback_to_memory: bool = True

    # Database ("database" backend and Alembic)
    # database_url_override (any postgres/sqlite URL) wins over the postgres_* parts
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "userlink"
    postgres_password: str = ""
    postgres_db: str = "userlink"

    def _base_database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def database_url(self) -> str:
        """URL with an async driver (asyncpg / aiosqlite) for the document store."""
        url = _with_scheme(self._base_database_url(), _ASYNC_SCHEMES)
        # asyncpg rejects libpq query options such as sslmode
        if url.startswith("postgresql+asyncpg://"):
            url = url.split("?", 1)[0]
        return url

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """URL with a sync driver (psycopg2 / sqlite3) for Alembic."""
        return _with_scheme(self._base_database_url(), _SYNC_SCHEMES)

    # Auth / JWT
    jwt_secret_key: str  # Required - no default, must be set in .env
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24  # 1 day

    # OpenAI Assistants API
    openai_api_key: str = ""
    openai_org_id: str | None = None
    openai_base_url: str | None = None
    default_assistant_model: str = "gpt-4-turbo-preview"

    # Ask flow
    mock_reply_delay_seconds: float = 1.0

    # Files
    file_base_url: str = "https://example.com/files"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
