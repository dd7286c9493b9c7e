"""
Application configuration using Pydantic Settings.
"""

import os
from datetime import date
from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_env_file() -> str:
    """Pick the env file for APP_ENV (development unless set to production)."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Calculator service settings, overridable from the environment."""

    # App settings
    app_name: str = "Finappo Financial Calculators"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # First payment date used when a request does not supply one
    schedule_start_date: date = date(2026, 1, 1)
    # Rows returned per schedule; totals always use the full schedule
    max_schedule_rows: int = 1200

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("max_schedule_rows")
    @classmethod
    def check_max_schedule_rows(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_schedule_rows must be at least 1")
        return value

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
