"""
NoteTaker Backend: Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the database module, and Alembic.

Database URL resolution:
    1. DATABASE_URL, if set, is used verbatim (any async SQLAlchemy URL,
       e.g. sqlite+aiosqlite:///./notes.db for local runs).
    2. Otherwise the POSTGRES_* parts are composed into a
       postgresql+asyncpg:// URL.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Deployments override the
    database credentials.
    """

    # ── Database ──────────────────────────────────────────────────────────
    database_url: Optional[str] = Field(
        default=None,
        description="Full async SQLAlchemy URL; overrides the POSTGRES_* parts",
    )
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_user: str = Field(default="notetaker")
    postgres_password: str = Field(default="")
    postgres_db: str = Field(default="notes_app")

    # Pool sizing; ignored for SQLite URLs
    # Why 10 + 5: every request holds a connection for one statement only, so
    # a small pool serves many concurrent requests. Total stays well under
    # PostgreSQL's default max_connections (100).
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create the notes table on startup (otherwise run `alembic upgrade head`)
    db_create_tables: bool = Field(default=False)

    # ── Static Assets ─────────────────────────────────────────────────────
    public_dir: str = Field(default="./public")

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def sqlalchemy_url(self) -> str:
        """The effective async database URL, with the password left in."""
        if self.database_url:
            return self.database_url
        url = URL.create(
            drivername="postgresql+asyncpg",
            username=self.postgres_user,
            password=self.postgres_password or None,
            host=self.postgres_host,
            port=self.postgres_port,
            database=self.postgres_db,
        )
        return url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.sqlalchemy_url).get_backend_name() == "sqlite"


settings = Settings()
