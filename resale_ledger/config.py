from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Resale Ledger"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: Optional[str] = "sqlite:///./resale_ledger.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Login gate
    # ==============================
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None
    ADMIN_PASSWORD_SALT: Optional[str] = None
    ADMIN_PBKDF2_ROUNDS: int = 200_000
    SESSION_SECRET: Optional[str] = None
    SESSION_COOKIE: str = "resale_session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7

    # ==============================
    # Analytics
    # ==============================
    MOST_PROFITABLE_DEFAULT_LIMIT: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
