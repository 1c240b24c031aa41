"""Native messaging wire format.

Each message is a 4-byte unsigned length in native byte order (little-endian
on every platform browsers support) followed by that many bytes of UTF-8 JSON.
"""

from __future__ import annotations

import json
import struct
from typing import BinaryIO

from taildrop_relay.config.constants import Limits
from taildrop_relay.exceptions import FramingError

_HEADER = struct.Struct("<I")


def encode_message(obj: dict, max_size: int = Limits.MAX_HOST_REQUEST_BYTES) -> bytes:
    """Serialize a message into a length-prefixed frame."""
    body = json.dumps(obj, separators=(",", ":")).encode("utf-8")
    if len(body) > max_size:
        raise FramingError(f"Message too large ({len(body)} bytes, limit {max_size})")
    return _HEADER.pack(len(body)) + body


def decode_length(header: bytes) -> int:
    if len(header) != _HEADER.size:
        raise FramingError(f"Truncated length header ({len(header)} of {_HEADER.size} bytes)")
    return _HEADER.unpack(header)[0]


def decode_body(body: bytes) -> dict:
    try:
        message = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FramingError("Failed to unmarshal JSON", details=str(e)) from e
    if not isinstance(message, dict):
        raise FramingError(f"Expected a JSON object, got {type(message).__name__}")
    return message


def decode_reply(raw: bytes, max_size: int = Limits.MAX_HOST_REPLY_BYTES) -> dict | None:
    """Decode the first frame out of a host's complete stdout.

    Returns None when the host wrote nothing at all.
    """
    if not raw:
        return None
    length = decode_length(raw[: _HEADER.size])
    if length > max_size:
        raise FramingError(f"Reply too large ({length} bytes, limit {max_size})")
    body = raw[_HEADER.size : _HEADER.size + length]
    if len(body) != length:
        raise FramingError(f"Truncated message body ({len(body)} of {length} bytes)")
    return decode_body(body)


def read_message(
    stream: BinaryIO, max_size: int = Limits.MAX_HOST_REQUEST_BYTES
) -> dict | None:
    """Read one frame from a blocking binary stream.

    Returns None on a clean EOF before the header.
    """
    header = stream.read(_HEADER.size)
    if not header:
        return None
    length = decode_length(header)
    if length > max_size:
        raise FramingError(f"Message too large ({length} bytes, limit {max_size})")
    body = stream.read(length)
    if len(body) != length:
        raise FramingError(f"Truncated message body ({len(body)} of {length} bytes)")
    return decode_body(body)


def write_message(stream: BinaryIO, obj: dict, max_size: int = Limits.MAX_HOST_REPLY_BYTES) -> None:
    """Write one frame to a blocking binary stream and flush it."""
    stream.write(encode_message(obj, max_size=max_size))
    stream.flush()
