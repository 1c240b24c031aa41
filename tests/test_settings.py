"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from taildrop_relay.config.constants import NATIVE_HOST_NAME
from taildrop_relay.config.settings import Settings, clear_settings_cache, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.relay_host_name == NATIVE_HOST_NAME
        assert settings.relay_host_path is None
        assert settings.relay_host_timeout is None
        assert settings.relay_fetch_timeout == 30.0
        assert settings.relay_manifest_dirs

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RELAY_HOST_PATH", str(tmp_path / "host"))
        monkeypatch.setenv("RELAY_HOST_TIMEOUT", "2.5")
        monkeypatch.setenv("relay_log_level", "debug")
        settings = Settings()
        assert settings.relay_host_path == tmp_path / "host"
        assert settings.relay_host_timeout == 2.5
        assert settings.relay_log_level == "DEBUG"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("TAILSCALE_BIN=/opt/tailscale/bin/tailscale\n")
        assert Settings().tailscale_bin == "/opt/tailscale/bin/tailscale"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("RELAY_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings()

    def test_is_configured(self, tmp_path):
        (tmp_path / "com.example.json").write_text("{}")
        settings = Settings(relay_host_name="com.example", relay_manifest_dirs=[tmp_path])
        assert settings.is_configured() == {"relay_host_path": False, "host_manifest": True}

    def test_get_settings_is_cached(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("TAILSCALE_BIN", "other")
        assert get_settings() is first
        clear_settings_cache()
        assert get_settings().tailscale_bin == "other"
