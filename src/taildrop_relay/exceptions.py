"""Centralized exception classes for taildrop-relay.

Every failure the relay can run into maps onto one of these. The bridge
catches them at its boundary and reports `error` strings to the caller, so
`message` should always read well on its own.
"""


class RelayError(Exception):
    """Base exception for all taildrop-relay errors."""

    def __init__(self, message: str, details: str | None = None):
        """Initialize the exception.

        Args:
            message: User-friendly error message.
            details: Additional technical details for debugging.
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class TransportUnavailableError(RelayError):
    """Raised when the native messaging host cannot be reached or is not installed."""

    pass


class ManifestError(TransportUnavailableError):
    """Raised when a native messaging host manifest is missing or invalid."""

    pass


class NoResponseError(RelayError):
    """Raised when the host exits without sending a reply."""

    pass


class HelperRejectedError(RelayError):
    """Raised when the host replies with an explicit failure."""

    pass


class FetchError(RelayError):
    """Raised when the image cannot be downloaded."""

    pass


class EncodeError(RelayError):
    """Raised when the image cannot be encoded for transport."""

    pass


class FramingError(RelayError):
    """Raised when a native messaging frame is malformed."""

    pass


class HostError(RelayError):
    """Raised inside the native messaging host when an action fails."""

    pass
