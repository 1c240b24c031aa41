"""Centralized constants for taildrop-relay."""

NATIVE_HOST_NAME = "com.bitandbang.tailscale_image_sender"
DEFAULT_FILE_NAME = "image.jpg"
DEFAULT_EXTENSION_ORIGIN = "chrome-extension://taildrop-relay/"
NO_RESPONSE_ERROR = "No response from native host"
UNKNOWN_ERROR = "Unknown error"
# Diagnostics mirror the strings browsers report for native messaging failures
HOST_NOT_FOUND_ERROR = "Specified native messaging host not found."
HOST_COMMUNICATION_ERROR = "Error when communicating with the native messaging host."


# Timeouts in seconds
class Timeouts:
    IMAGE_FETCH = 30.0
    TAILSCALE_COMMAND = 120.0


class Limits:
    # Native messaging caps, per direction
    MAX_HOST_REPLY_BYTES = 1024 * 1024
    MAX_HOST_REQUEST_BYTES = 64 * 1024 * 1024


class TaildropTarget:
    """Values of the TaildropTarget field in `tailscale status --json`."""

    UNKNOWN = 0
    AVAILABLE = 1
    NO_NETMAP_AVAILABLE = 2
    IPN_STATE_NOT_RUNNING = 3
    MISSING_CAP = 4
    OFFLINE = 5
    NO_PEER_INFO = 6
    UNSUPPORTED_OS = 7
    NO_PEER_API = 8
    OWNED_BY_OTHER_USER = 9
