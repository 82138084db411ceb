"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError

from duplex_tracker.config import Settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in ("DATABASE_URL", "AUTH_SECRET", "DUPLEX_COUNT", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.database_url == "sqlite+aiosqlite:///./duplex_tracker.db"
        assert settings.duplex_count == 20
        assert settings.log_level == "INFO"
        assert settings.auth_token_max_age_seconds == 12 * 60 * 60

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DUPLEX_COUNT", "8")
        monkeypatch.setenv("DATABASE_ECHO", "true")

        settings = Settings()

        assert settings.duplex_count == 8
        assert settings.database_echo is True

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("AUTH_SECRET", raising=False)
        (tmp_path / ".env").write_text("AUTH_SECRET=from-dotenv\n")

        assert Settings().auth_secret == "from-dotenv"

    def test_duplex_count_must_be_positive(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DUPLEX_COUNT", "0")

        with pytest.raises(ValidationError):
            Settings()
