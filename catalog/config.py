"""
Catalog API: Application Configuration
========================================

What:  Typed configuration loaded from environment variables (or a .env file).
How:   pydantic-settings reads and validates the values. `create_app()` builds
       exactly one Settings instance at process start and hands it to the
       components that need it (engine factory, repositories, middleware).
Who:   catalog.main, catalog.database, catalog.__main__.

Database URL resolution:
    1. DATABASE_URL, when set. Plain `postgres://` / `postgresql://` URLs
       (as issued by most hosting providers) are rewritten to the asyncpg
       driver form.
    2. Otherwise a URL assembled from DB_HOST / DB_PORT / DB_USER /
       DB_PASSWORD / DB_NAME.
"""

from typing import List, Literal, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVER_PREFIXES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


class Settings(BaseSettings):
    """
    Application settings.

    Every value has a development default; production deployments override
    DATABASE_URL (or the DB_* variables) and CORS_ORIGINS.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # ── Store selection ───────────────────────────────────────────────────
    # sql: relational backend through async SQLAlchemy
    # memory: process-local maps, nothing persisted
    store_backend: Literal["sql", "memory"] = Field(default="sql")

    # Insert the fixed starter rows into empty tables at startup
    seed_data: bool = Field(default=True)

    # ── Database ──────────────────────────────────────────────────────────
    database_url: Optional[str] = Field(
        default=None,
        description="Full async SQLAlchemy connection URL",
    )

    # Fallback parts, used only when DATABASE_URL is not set
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="")
    db_name: str = Field(default="catalog")

    db_pool_size: int = Field(default=5, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        """
        The connection URL the engine should use.

        DATABASE_URL wins when present; otherwise the discrete DB_* parts are
        combined. The password is URL-quoted so special characters survive.
        """
        if self.database_url:
            url = self.database_url.strip()
            for prefix, replacement in _ASYNC_DRIVER_PREFIXES.items():
                if url.startswith(prefix):
                    return replacement + url[len(prefix):]
            return url

        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{quote_plus(self.db_password)}"
        return (
            f"postgresql+asyncpg://{credentials}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.resolved_database_url.startswith("sqlite")
