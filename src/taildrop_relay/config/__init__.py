"""Configuration and settings management."""

from taildrop_relay.config.constants import DEFAULT_FILE_NAME, NATIVE_HOST_NAME, Limits, Timeouts
from taildrop_relay.config.logging import get_logger, setup_logging
from taildrop_relay.config.settings import Settings, clear_settings_cache, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "setup_logging",
    "get_logger",
    "DEFAULT_FILE_NAME",
    "NATIVE_HOST_NAME",
    "Timeouts",
    "Limits",
]
