"""Transport to the native messaging host."""

from taildrop_relay.transport.channel import (
    NativeMessagingChannel,
    TransportChannel,
)
from taildrop_relay.transport.manifest import (
    build_manifest,
    find_manifest,
    install_manifest,
    load_manifest,
    resolve_host_path,
)

__all__ = [
    "TransportChannel",
    "NativeMessagingChannel",
    "build_manifest",
    "find_manifest",
    "install_manifest",
    "load_manifest",
    "resolve_host_path",
]
