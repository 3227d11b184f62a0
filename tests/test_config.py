"""Tests for Settings."""

from convquery.config import Settings


class TestSettings:
    """SUT: Settings"""

    def test_defaults(self, monkeypatch):
        """Defaults should point at a local MongoDB."""
        monkeypatch.delenv("MONGO_URI", raising=False)
        settings = Settings(_env_file=None)
        assert settings.mongo_uri == "mongodb://localhost:27017"
        assert settings.conversations_collection == "conversations"
        assert settings.default_env == "development"
        assert settings.allow_disk_use is True

    def test_env_override(self, monkeypatch):
        """Environment variables should override defaults, case-insensitively."""
        monkeypatch.setenv("MONGO_DATABASE", "analytics")
        monkeypatch.setenv("default_env", "production")
        settings = Settings(_env_file=None)
        assert settings.mongo_database == "analytics"
        assert settings.default_env == "production"
