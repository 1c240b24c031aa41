"""Shared fixtures for taildrop-relay tests."""

import os

import pytest

from taildrop_relay.config.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for key in list(os.environ):
        if key.startswith("RELAY_") or key == "TAILSCALE_BIN":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()
