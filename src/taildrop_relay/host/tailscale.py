"""Thin wrapper over the tailscale CLI used by the native messaging host."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

from taildrop_relay.config.constants import TaildropTarget, Timeouts
from taildrop_relay.config.logging import get_logger
from taildrop_relay.exceptions import HostError

logger = get_logger(__name__)
_OS_ALIASES = {
    "ios": "ios",
    "macos": "macos",
    "darwin": "macos",
    "windows": "windows",
    "linux": "linux",
}


def normalize_os(os_name: str | None) -> str:
    """Normalize a tailscale OS string to ios, macos, windows or linux."""
    key = (os_name or "").lower()
    if key in _OS_ALIASES:
        return _OS_ALIASES[key]
    logger.info("Unknown OS: %s, defaulting to linux", os_name)
    return "linux"


def peer_device_name(peer: dict) -> str:
    """First DNS label of the peer, falling back to its HostName."""
    dns_name = peer.get("DNSName") or ""
    label = dns_name.split(".", 1)[0]
    return label or peer.get("HostName", "")


def taildrop_targets(status: dict) -> list[dict]:
    """Online, non exit-node peers that can receive Taildrop files."""
    devices = []
    for peer in (status.get("Peer") or {}).values():
        if not peer.get("Online"):
            continue
        if peer.get("ExitNodeOption"):
            continue
        if peer.get("TaildropTarget") != TaildropTarget.AVAILABLE:
            continue
        devices.append(
            {
                "name": peer_device_name(peer),
                "id": peer.get("ID", ""),
                "online": True,
                "os": normalize_os(peer.get("OS")),
            }
        )
    return devices


class TailscaleCLI:
    """Runs tailscale commands and turns failures into HostError."""

    def __init__(self, binary: str = "tailscale", timeout: float = Timeouts.TAILSCALE_COMMAND):
        self.binary = binary
        self.timeout = timeout

    def _run(self, *args: str) -> bytes:
        cmd = [self.binary, *args]
        logger.info("Executing: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd, capture_output=True, check=True, timeout=self.timeout
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            logger.error("Command stderr: %s", stderr)
            raise HostError(f"command failed: exit status {e.returncode}", details=stderr) from e
        except subprocess.TimeoutExpired as e:
            raise HostError(f"command failed: timed out after {self.timeout:g}s") from e
        except OSError as e:
            raise HostError(f"command failed: {e}") from e
        return completed.stdout

    def status(self) -> dict:
        output = self._run("status", "--json")
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise HostError(f"invalid status JSON: {e}") from e

    def file_cp(self, path: Path, device_name: str) -> None:
        self._run("file", "cp", str(path), f"{device_name}:")
