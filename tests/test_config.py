"""
Unit Tests for Application Settings
===================================
"""

from config import get_settings


class TestGetSettings:
    """Environment parsing."""

    def test_defaults(self, monkeypatch):
        for name in ("STORAGE_BACKEND", "PORT", "SCORING_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        settings = get_settings()

        assert settings.storage_backend == "session"
        assert settings.port == 8000
        assert settings.scoring_timeout_seconds == 30

    def test_bad_port_falls_back(self, monkeypatch):
        """A non-numeric or out-of-range PORT does not break startup."""
        monkeypatch.setenv("PORT", "http")
        assert get_settings().port == 8000
        monkeypatch.setenv("PORT", "70000")
        assert get_settings().port == 8000
        monkeypatch.setenv("PORT", " 9001 ")
        assert get_settings().port == 9001

    def test_timeout_disabled(self, monkeypatch):
        monkeypatch.setenv("SCORING_TIMEOUT_SECONDS", "0")
        assert get_settings().scoring_timeout_seconds is None
        monkeypatch.setenv("SCORING_TIMEOUT_SECONDS", "soon")
        assert get_settings().scoring_timeout_seconds is None

    def test_file_backend_opt_in(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", " File ")
        assert get_settings().storage_backend == "file"
