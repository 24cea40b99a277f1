"""
Telemetry Store - Configuration
All settings loaded from environment variables (prefix TELEMETRY_)
"""

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Store settings loaded from environment variables."""

    # Storage
    store_path: str = "data/telemetry.db"
    busy_timeout_seconds: float = 5.0
    sql_echo: bool = False

    # Retention
    retention_days: int = 30
    prune_interval_seconds: int = 3600

    # Logging
    log_level: str = "INFO"

    @property
    def retention(self) -> timedelta:
        """Retention window as a timedelta."""
        return timedelta(days=self.retention_days)

    class Config:
        env_prefix = "TELEMETRY_"
        env_file = ".env"  # Fallback for local development
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
