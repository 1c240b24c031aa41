"""Data models shared by the bridge, the host and the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Device(BaseModel):
    """A peer on the tailnet that can receive files."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Device name, unique within one discovery response")
    os: str | None = Field(default=None, description="Normalized OS tag (ios, macos, windows, linux)")
    online: bool = Field(default=False, description="Whether the peer is currently reachable")


def parse_devices(data: Any) -> list[Device]:
    """Parse the `data` field of a discovery result into Device models."""
    if not data:
        return []
    return [Device.model_validate(item) for item in data]


def online_devices(devices: list[Device]) -> list[Device]:
    """Filter devices down to those reported online."""
    return [d for d in devices if d.online]


@dataclass
class ImagePayload:
    """A fetched image ready to be sent. Lives only for one transfer."""

    data: bytes
    mime_type: str
    file_name: str


@dataclass
class TransferRequest:
    """A `send_file` request for the native messaging host."""

    device_name: str
    payload: ImagePayload
    image_data: str

    def to_message(self) -> dict:
        return {
            "action": "send_file",
            "device_name": self.device_name,
            "image_data": self.image_data,
            "file_name": self.payload.file_name,
            "image_type": self.payload.mime_type,
        }


class TransferState(str, Enum):
    """Progress of a single send_image call."""

    IDLE = "idle"
    FETCHING = "fetching"
    ENCODING = "encoding"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
