"""Request/response channel to the native messaging host.

Every call launches the host once, writes one framed request to its stdin and
reads one framed reply from its stdout, the same way a browser services
`runtime.sendNativeMessage`.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from taildrop_relay.bridge_types import BridgeResult
from taildrop_relay.config.constants import (
    HOST_COMMUNICATION_ERROR,
    HOST_NOT_FOUND_ERROR,
    Limits,
)
from taildrop_relay.config.logging import get_logger
from taildrop_relay.config.settings import Settings, get_settings
from taildrop_relay.exceptions import FramingError, TransportUnavailableError
from taildrop_relay.messaging import decode_reply, encode_message
from taildrop_relay.transport.manifest import resolve_host_path

logger = get_logger(__name__)


class TransportChannel(ABC):
    """A connector that exchanges one message with one helper process."""

    @abstractmethod
    async def exchange(self, message: dict) -> dict | None:
        """Send a message and return the raw reply, or None if there was none.

        Raises:
            TransportUnavailableError: If the helper could not be reached.
        """

    async def send(self, message: dict) -> dict:
        """Send a message and return a normalized BridgeResult dict."""
        if not message.get("action"):
            raise ValueError("Request message must include an action")
        try:
            reply = await self.exchange(message)
        except TransportUnavailableError as e:
            logger.warning("Native host unavailable for %s: %s", message["action"], e)
            return BridgeResult.failed(e.message).to_dict()
        result = BridgeResult.from_reply(reply)
        if not result.success:
            logger.info("Action %s failed: %s", message["action"], result.error)
        return result.to_dict()


class NativeMessagingChannel(TransportChannel):
    """Talks to a native messaging host executable over stdio."""

    def __init__(
        self,
        host_name: str,
        manifest_dirs: list[Path] | None = None,
        host_path: Path | None = None,
        origin: str = "",
        timeout: float | None = None,
    ):
        self.host_name = host_name
        self.manifest_dirs = list(manifest_dirs or [])
        self.host_path = host_path
        self.origin = origin
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> NativeMessagingChannel:
        s = settings or get_settings()
        return cls(
            host_name=s.relay_host_name,
            manifest_dirs=s.relay_manifest_dirs,
            host_path=s.relay_host_path,
            origin=s.relay_extension_origin,
            timeout=s.relay_host_timeout,
        )

    def resolve_executable(self) -> Path:
        path = self.host_path or resolve_host_path(self.host_name, self.manifest_dirs)
        if not path.is_file():
            raise TransportUnavailableError(HOST_NOT_FOUND_ERROR, details=str(path))
        return path

    async def exchange(self, message: dict) -> dict | None:
        try:
            frame = encode_message(message, max_size=Limits.MAX_HOST_REQUEST_BYTES)
        except FramingError as e:
            raise TransportUnavailableError(e.message) from e

        executable = self.resolve_executable()
        args = [self.origin] if self.origin else []
        logger.debug("Launching %s for action %s", executable, message["action"])
        try:
            proc = await asyncio.create_subprocess_exec(
                str(executable),
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise TransportUnavailableError(HOST_NOT_FOUND_ERROR, details=str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(frame), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise TransportUnavailableError(
                f"Native host did not respond within {self.timeout:g}s"
            ) from e

        if stderr:
            logger.debug("Native host stderr: %s", stderr.decode("utf-8", errors="replace"))
        if not stdout:
            logger.warning("Native host exited with code %s and no reply", proc.returncode)
            return None
        try:
            return decode_reply(stdout, max_size=Limits.MAX_HOST_REPLY_BYTES)
        except FramingError as e:
            raise TransportUnavailableError(HOST_COMMUNICATION_ERROR, details=str(e)) from e
