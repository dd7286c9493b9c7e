"""
Tests for application settings.
"""

import pytest
from datetime import date
from pydantic import ValidationError

from finappo.config import Settings


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        """Test default schedule settings."""
        settings = Settings()
        assert settings.schedule_start_date == date(2026, 1, 1)
        assert settings.max_schedule_rows == 1200

    def test_environment_override(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("MAX_SCHEDULE_ROWS", "240")
        monkeypatch.setenv("SCHEDULE_START_DATE", "2030-07-01")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.max_schedule_rows == 240
        assert settings.schedule_start_date == date(2030, 7, 1)
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_invalid_schedule_rows(self):
        """Test row cap must be positive."""
        with pytest.raises(ValidationError):
            Settings(max_schedule_rows=0)
