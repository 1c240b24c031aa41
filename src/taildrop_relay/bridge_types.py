"""Result type returned by every bridge operation.

A host reply is `{"success": bool, "data": ..., "error": str}` with `data`
and `error` optional. `BridgeResult` always carries all three keys so callers
can index it without checking.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from taildrop_relay.config.constants import NO_RESPONSE_ERROR, UNKNOWN_ERROR
from taildrop_relay.exceptions import HelperRejectedError, NoResponseError


def reply_data(reply: dict | None) -> Any:
    """Return the payload of a successful host reply.

    Raises:
        NoResponseError: If the host sent nothing.
        HelperRejectedError: If the host reported a failure. The host's
            error text becomes the exception message unchanged.
    """
    if not reply:
        raise NoResponseError(NO_RESPONSE_ERROR)
    if not reply.get("success"):
        raise HelperRejectedError(reply.get("error") or UNKNOWN_ERROR)
    return reply.get("data")


@dataclass
class BridgeResult:
    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> BridgeResult:
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> BridgeResult:
        return cls(success=False, error=error)

    @classmethod
    def from_reply(cls, reply: dict | None) -> BridgeResult:
        """Normalize a raw host reply (or its absence)."""
        try:
            return cls.ok(reply_data(reply))
        except (NoResponseError, HelperRejectedError) as e:
            return cls.failed(e.message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> BridgeResult:
        """Turn any fault into a failed result.

        Relay errors report their `message` only; `details` stay in the logs.
        """
        message = getattr(exc, "message", None)
        if not isinstance(message, str) or not message:
            message = str(exc) or type(exc).__name__
        return cls.failed(message)

    def to_dict(self) -> dict:
        return asdict(self)
