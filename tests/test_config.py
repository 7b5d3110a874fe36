"""Tests for settings loading."""

import pytest

from payslip_engine.config import Settings, get_settings

ENV_VARS = (
    "DATABASE_URL",
    "HOST",
    "PORT",
    "DEBUG",
    "LOG_LEVEL",
    "SQL_ECHO",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Run with no settings in the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.host == "0.0.0.0"
        assert settings.port == 8084
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.sql_echo is False
        assert settings.pool_size == 10
        assert settings.max_overflow == 20

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///payslip.db")
        clean_env.setenv("PORT", "9000")
        clean_env.setenv("DEBUG", "TRUE")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///payslip.db"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_settings_are_cached(self, clean_env):
        first = get_settings()
        clean_env.setenv("PORT", "9999")

        assert get_settings() is first
        assert get_settings().port == 8084
