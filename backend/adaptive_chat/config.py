"""
Application configuration using Pydantic Settings.

Every setting can be overridden by an environment variable of the same
name (case-insensitive) or by a `.env` file in the working directory.
"""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Driver rewrites applied to DATABASE_URL_OVERRIDE
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


def _swap_scheme(url: str, schemes: dict[str, str]) -> str:
    for old, new in schemes.items():
        if url.startswith(old):
            return new + url[len(old):]
    return url


class Settings(BaseSettings):
    """Settings for the API process, the seeding script and Alembic."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Adaptive Chat"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    # Database
    # A full URL (PostgreSQL, Neon with sslmode=require, or sqlite) wins over the POSTGRES_* parts
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "adaptive_chat"
    postgres_password: str = ""
    postgres_db: str = "adaptive_chat"

    def _postgres_url(self, scheme: str) -> str:
        return (
            f"{scheme}://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def database_url(self) -> str:
        """Async driver URL used by the application engine."""
        if not self.database_url_override:
            return self._postgres_url("postgresql+asyncpg")
        url = _swap_scheme(self.database_url_override, _ASYNC_SCHEMES)
        # asyncpg rejects libpq query options; SSL goes through connect_args (db/session.py)
        if url.startswith("postgresql+asyncpg://"):
            url = url.partition("?")[0]
        return url

    @computed_field
    @property
    def database_requires_ssl(self) -> bool:
        url = self.database_url_override or ""
        return "sslmode=require" in url or "ssl=require" in url

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """Sync driver URL for Alembic."""
        if not self.database_url_override:
            return self._postgres_url("postgresql")
        return _swap_scheme(self.database_url_override, _SYNC_SCHEMES)

    # Auth / JWT
    jwt_secret_key: str  # Required - no default, must be set in .env
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Password hashing (PBKDF2-HMAC-SHA256)
    password_hash_iterations: int = 390_000

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Anthropic API (optional - the gateway answers with a placeholder when unset)
    anthropic_api_key: str = ""

    # LLM Configuration
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2000
    llm_title_max_tokens: int = 30
    llm_timeout_seconds: float = 60.0
    llm_max_attempts: int = 3
    llm_retry_base_delay: float = 1.0

    # Conversation
    history_limit: int = 10

    # Uploads
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MB

    # Reference data
    seed_modes_on_startup: bool = True


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
