"""Native messaging host that lists tailnet devices and sends files with Taildrop.

The browser (or RelayBridge) launches this process once per message. It reads
one framed request from stdin, answers with one framed reply on stdout and
exits. stdout carries framing only, so all logging goes to a file.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import shutil
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable

from taildrop_relay.config.logging import get_logger, setup_logging
from taildrop_relay.config.settings import get_settings
from taildrop_relay.exceptions import FramingError, HostError
from taildrop_relay.host.tailscale import TailscaleCLI, taildrop_targets
from taildrop_relay.messaging import read_message, write_message

logger = get_logger(__name__)
TEMP_DIR_PREFIX = "tailscale-sender-"
DATA_URL_SEPARATOR = ","


def _failure(context: str, err: Exception) -> dict:
    message = f"{context}: {getattr(err, 'message', None) or err}"
    logger.error("ERROR: %s", message)
    return {"success": False, "error": message}


def validate_send_file_request(device_name: str, image_data: str, file_name: str) -> None:
    if not device_name:
        raise HostError("device name is required")
    if not image_data:
        raise HostError("image data is required")
    if not file_name:
        raise HostError("file name is required")
    if DATA_URL_SEPARATOR not in image_data:
        raise HostError("invalid image data format")


def decode_image_data(image_data: str) -> bytes:
    """Decode the base64 part of a data URL."""
    _, sep, encoded = image_data.partition(DATA_URL_SEPARATOR)
    if not sep:
        raise HostError("invalid data URL format")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HostError(f"failed to decode base64: {e}") from e


def target_file_name(file_name: str, image_type: str) -> str:
    """Strip directories and make sure the name carries an extension."""
    name = Path(file_name.replace("\\", "/")).name or "image"
    if Path(name).suffix:
        return name
    ext = mimetypes.guess_extension(image_type) if image_type else None
    if not ext:
        _, _, subtype = image_type.partition("/")
        ext = f".{subtype}" if subtype else ".jpg"
    return name + ext


class NativeHost:
    """Handles one native messaging request."""

    def __init__(
        self,
        tailscale: TailscaleCLI,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        temp_root: Path | None = None,
    ):
        self.tailscale = tailscale
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.temp_root = temp_root
        self._handlers: dict[str, Callable[[dict], dict]] = {
            "get_devices": self._handle_get_devices,
            "send_file": self._handle_send_file,
        }

    def handle_message(self, message: dict) -> dict:
        action = message.get("action")
        logger.info("Received action: %s", action)
        handler = self._handlers.get(action) if isinstance(action, str) else None
        if handler is None:
            return _failure("Unknown action", HostError(f"action: {action}"))
        return handler(message)

    def _handle_get_devices(self, message: dict) -> dict:
        return self.get_devices()

    def _handle_send_file(self, message: dict) -> dict:
        return self.send_file(
            message.get("device_name") or "",
            message.get("image_data") or "",
            message.get("file_name") or "",
            message.get("image_type") or "",
        )

    def get_devices(self) -> dict:
        logger.info("Getting Tailscale devices")
        try:
            status = self.tailscale.status()
        except HostError as e:
            return _failure("Failed to get Tailscale status", e)
        devices = taildrop_targets(status)
        logger.info("Found %d online devices", len(devices))
        return {"success": True, "data": devices}

    def send_file(self, device_name: str, image_data: str, file_name: str, image_type: str) -> dict:
        logger.info("Sending file %s to device %s", file_name, device_name)
        try:
            validate_send_file_request(device_name, image_data, file_name)
        except HostError as e:
            return _failure("Invalid send file request", e)
        try:
            data = decode_image_data(image_data)
        except HostError as e:
            return _failure("Failed to decode image data", e)

        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=self.temp_root))
        except OSError as e:
            return _failure("Failed to create temporary file", e)

        try:
            path = temp_dir / target_file_name(file_name, image_type)
            try:
                path.write_bytes(data)
            except OSError as e:
                return _failure("Failed to create temporary file", e)
            try:
                self.tailscale.file_cp(path, device_name)
            except HostError as e:
                return _failure("Failed to send file via Tailscale", e)
        finally:
            try:
                shutil.rmtree(temp_dir)
            except OSError as e:
                logger.warning("WARNING: Failed to remove temp file: %s", e)

        logger.info("File sent successfully to %s", device_name)
        return {"success": True}

    def reply(self, response: dict) -> None:
        write_message(self.stdout, response)
        logger.info("Response sent: success=%s", response.get("success"))

    def run(self) -> int:
        """Serve a single request. Returns the process exit code."""
        logger.info("=== Tailscale Image Sender Native Host Started ===")
        try:
            message = read_message(self.stdin)
        except FramingError as e:
            self.reply(_failure("Failed to read message", e))
            return 1
        if message is None:
            logger.info("Connection closed by extension")
            return 0
        try:
            self.reply(self.handle_message(message))
        except Exception as e:
            logger.exception("PANIC")
            try:
                self.reply({"success": False, "error": f"Host crashed: {e}"})
            except (OSError, FramingError):
                logger.exception("Could not report crash to caller")
            return 1
        logger.info("=== Host execution completed ===")
        return 0


def main() -> None:
    settings = get_settings()
    setup_logging(settings.relay_log_level, log_file=settings.relay_host_log_file)
    host = NativeHost(TailscaleCLI(settings.tailscale_bin))
    raise SystemExit(host.run())


if __name__ == "__main__":
    main()
