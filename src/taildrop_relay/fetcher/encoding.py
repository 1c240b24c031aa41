"""Binary to transport-safe text encoding."""

from __future__ import annotations

import base64

from taildrop_relay.config.constants import Limits
from taildrop_relay.exceptions import EncodeError

# Room for the other send_file fields and JSON punctuation
_ENVELOPE_RESERVE = 4096


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a `data:` URL; the host decodes everything after the comma."""
    try:
        encoded = base64.b64encode(data).decode("ascii")
    except (TypeError, ValueError) as e:
        raise EncodeError("Failed to encode image", details=str(e)) from e
    data_url = f"data:{mime_type or 'application/octet-stream'};base64,{encoded}"
    if len(data_url) + _ENVELOPE_RESERVE > Limits.MAX_HOST_REQUEST_BYTES:
        raise EncodeError(
            f"Image too large to send ({len(data)} bytes)",
            details=f"encoded size {len(data_url)} exceeds native messaging limit",
        )
    return data_url
