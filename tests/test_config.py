"""Tests for :mod:`hostwatch.config`."""

from hostwatch.config import Settings, get_settings


class TestSettings:
    """Verify default configuration values."""

    def test_default_log_level(self):
        """Default log level should be INFO."""
        s = Settings()
        assert s.log_level == "INFO"

    def test_default_port(self):
        """Default server port should be 8000."""
        s = Settings()
        assert s.port == 8000

    def test_default_host(self):
        """Default bind host should be loopback."""
        s = Settings()
        assert s.host == "127.0.0.1"

    def test_reverse_dns_enabled_by_default(self):
        s = Settings()
        assert s.enable_reverse_dns is True

    def test_env_override(self, monkeypatch):
        """HOSTWATCH_-prefixed variables override defaults."""
        monkeypatch.setenv("HOSTWATCH_ENABLE_REVERSE_DNS", "false")
        monkeypatch.setenv("HOSTWATCH_WORKER_JOIN_TIMEOUT", "1.5")
        s = Settings()
        assert s.enable_reverse_dns is False
        assert s.worker_join_timeout == 1.5

    def test_get_settings_returns_instance(self):
        """get_settings() should return a Settings object."""
        cfg = get_settings()
        assert isinstance(cfg, Settings)

    def test_get_settings_is_cached(self):
        """get_settings() should return the same object on repeated calls."""
        a = get_settings()
        b = get_settings()
        assert a is b
