"""Application settings loaded from the environment and .env files."""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taildrop_relay.config.constants import DEFAULT_EXTENSION_ORIGIN, NATIVE_HOST_NAME, Timeouts


def default_manifest_dirs() -> list[Path]:
    """Native messaging host manifest directories for Chrome and Chromium."""
    home = Path.home()
    if sys.platform == "darwin":
        return [
            home / "Library/Application Support/Google/Chrome/NativeMessagingHosts",
            home / "Library/Application Support/Chromium/NativeMessagingHosts",
            Path("/Library/Google/Chrome/NativeMessagingHosts"),
            Path("/Library/Application Support/Chromium/NativeMessagingHosts"),
        ]
    if sys.platform.startswith("win"):
        # Windows registers hosts in the registry; this is where we keep ours.
        return [home / "AppData/Local/taildrop-relay/NativeMessagingHosts"]
    return [
        home / ".config/google-chrome/NativeMessagingHosts",
        home / ".config/chromium/NativeMessagingHosts",
        Path("/etc/opt/chrome/native-messaging-hosts"),
        Path("/etc/chromium/native-messaging-hosts"),
    ]


class Settings(BaseSettings):
    """taildrop-relay configuration.

    Values come from environment variables (case-insensitive) or a `.env`
    file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    relay_host_name: str = Field(
        default=NATIVE_HOST_NAME,
        description="Name of the native messaging host to talk to",
    )
    relay_host_path: Path | None = Field(
        default=None,
        description="Explicit host executable; skips the manifest lookup",
    )
    relay_manifest_dirs: list[Path] = Field(
        default_factory=default_manifest_dirs,
        description="Directories searched for <host name>.json manifests",
    )
    relay_extension_origin: str = Field(
        default=DEFAULT_EXTENSION_ORIGIN,
        description="Caller origin passed to the host as its first argument",
    )
    relay_host_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the host before giving up (unset = wait)",
    )
    relay_fetch_timeout: float = Field(
        default=Timeouts.IMAGE_FETCH,
        gt=0,
        description="Timeout in seconds for downloading the image",
    )
    relay_log_level: str = Field(default="INFO", description="Logging level")
    relay_host_log_file: Path = Field(
        default_factory=lambda: Path.home() / ".taildrop-relay" / "host.log",
        description="Log file used by the native messaging host",
    )
    tailscale_bin: str = Field(default="tailscale", description="Tailscale CLI executable")

    @field_validator("relay_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(valid)}")
        return upper

    def is_configured(self) -> dict[str, bool]:
        """Report which pieces needed for a transfer are in place."""
        host_path = self.relay_host_path
        manifest_found = any(
            (d / f"{self.relay_host_name}.json").is_file() for d in self.relay_manifest_dirs
        )
        return {
            "relay_host_path": host_path is not None and host_path.is_file(),
            "host_manifest": manifest_found,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (for tests or after changing the environment)."""
    get_settings.cache_clear()
