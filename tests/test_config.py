"""
WellBloom Backend: Configuration and Access Log Tests
======================================================

What we test:
    ✅ Log level normalization and rejection
    ✅ CORS origin parsing
    ✅ Production refuses placeholder settings; development tolerates them
    ✅ Startup fails in production with placeholder settings, warns otherwise
    ✅ Access log level chosen from status and latency
"""

import logging
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as SettingsValidationError

from wellbloom import main
from wellbloom.config import DEV_JWT_SECRET, Settings
from wellbloom.middleware.logging import access_level


class TestSettings:

    def test_log_level_is_normalized(self):
        assert Settings(log_level=" warning ").log_level == "WARNING"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(log_level="chatty")

    def test_cors_origins_are_split_and_trimmed(self):
        s = Settings(cors_origins="https://app.wellbloom.io, https://admin.wellbloom.io,")

        assert s.cors_origins_list == ["https://app.wellbloom.io", "https://admin.wellbloom.io"]

    def test_development_tolerates_placeholders(self):
        s = Settings(environment="development", jwt_secret=DEV_JWT_SECRET)

        s.validate_required_for_production()
        assert s.production_problems()

    def test_production_lists_every_problem(self):
        s = Settings(
            environment="production",
            jwt_secret=DEV_JWT_SECRET,
            database_url="sqlite+aiosqlite:///:memory:",
            cors_origins="*",
        )

        with pytest.raises(ValueError) as exc_info:
            s.validate_required_for_production()

        message = str(exc_info.value)
        assert "JWT_SECRET" in message
        assert "SQLite" in message
        assert "CORS_ORIGINS" in message

    def test_production_with_real_values_passes(self):
        s = Settings(
            environment="production",
            jwt_secret="a-long-random-secret",
            database_url="postgresql+asyncpg://bloom:pw@db:5432/wellbloom",
            cors_origins="https://app.wellbloom.io",
        )

        assert s.production_problems() == []
        s.validate_required_for_production()


class TestAccessLevel:

    def test_levels(self):
        assert access_level(200, 5.0) == logging.INFO
        assert access_level(404, 5.0) == logging.WARNING
        assert access_level(503, 5.0) == logging.ERROR

    def test_slow_success_is_a_warning(self):
        assert access_level(200, 60_000.0) == logging.WARNING


class TestLifespan:

    @pytest.fixture(autouse=True)
    def _keep_test_logging(self, monkeypatch):
        # setup_logging replaces root handlers, caplog included
        monkeypatch.setattr(main, "setup_logging", lambda: None)

    @pytest.mark.asyncio
    async def test_production_with_placeholders_refuses_to_start(self, monkeypatch):
        monkeypatch.setattr(main.settings, "environment", "production")
        monkeypatch.setattr(main.settings, "jwt_secret", DEV_JWT_SECRET)

        with pytest.raises(ValueError, match="JWT_SECRET"):
            async with main.lifespan(main.app):
                pass

    @pytest.mark.asyncio
    async def test_development_starts_and_warns(self, monkeypatch, caplog):
        monkeypatch.setattr(main.settings, "environment", "development")
        monkeypatch.setattr(main.settings, "jwt_secret", DEV_JWT_SECRET)
        dispose = AsyncMock()
        monkeypatch.setattr(main, "dispose_engine", dispose)

        with caplog.at_level(logging.WARNING, logger=main.logger.name):
            async with main.lifespan(main.app):
                pass

        assert any("JWT_SECRET" in r.getMessage() for r in caplog.records)
        dispose.assert_awaited_once()
