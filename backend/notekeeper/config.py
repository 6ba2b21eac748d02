"""Application configuration."""
from functools import lru_cache
import logging
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

# Async drivers for the dialects the key-value upsert supports
ASYNC_DRIVERS = {"aiosqlite", "asyncpg", "psycopg"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Notekeeper"
    debug: bool = False

    # Storage
    database_url: str = "sqlite+aiosqlite:///./data/notekeeper.db"
    data_dir: Path = Path("./data")
    assets_dir: Path | None = None

    # Auth
    bcrypt_rounds: int = 12

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    class Config:
        env_prefix = "NOTEKEEPER_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        """Fail closed on URLs the async engine cannot drive."""
        try:
            url = make_url(value)
        except ArgumentError as exc:
            raise ValueError(f"DATABASE_URL is not a valid URL: {value}") from exc

        driver = url.drivername.partition("+")[2]
        if driver not in ASYNC_DRIVERS:
            raise ValueError(
                f"DATABASE_URL must use an async driver (e.g. sqlite+aiosqlite), got '{url.drivername}'."
            )
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{value}' is not a logging level.")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, value: str) -> str:
        if value not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'.")
        return value

    @model_validator(mode="after")
    def default_assets_dir(self) -> "Settings":
        # Images live next to the database unless placed elsewhere explicitly
        if self.assets_dir is None:
            self.assets_dir = self.data_dir / "notes_images"
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
