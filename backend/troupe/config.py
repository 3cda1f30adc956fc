from __future__ import annotations
"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Troupe application settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "Troupe"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # --- Database (MySQL 8.0+) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "troupe"
    DB_URL: str = ""  # full SQLAlchemy URL, overrides the DB_* fields (e.g. sqlite+aiosqlite)
    DB_AUTO_CREATE: bool = False

    @property
    def DATABASE_URL(self) -> str:
        """Async connection string, asyncmy driver unless DB_URL is set."""
        if self.DB_URL:
            return self.DB_URL
        encoded_password = quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+asyncmy://{self.DB_USER}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            "?charset=utf8mb4"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    # --- Redis (pub/sub + Celery broker) ---
    REDIS_URL: str = "redis://localhost:6379/0"
    REALTIME_ENABLED: bool = True

    # --- Blob storage ---
    MEDIA_VOLUME: str = "media_volume"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    UPLOAD_URL_TTL_SECONDS: int = 3600
    MAX_UPLOAD_MB: int = 50

    # --- Maintenance ---
    REPAIR_SCHEDULE_HOUR: int = 3

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
