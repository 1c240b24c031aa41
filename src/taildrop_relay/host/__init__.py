"""Native messaging host backed by the tailscale CLI."""

from taildrop_relay.host.native_host import NativeHost, main
from taildrop_relay.host.tailscale import TailscaleCLI, normalize_os, taildrop_targets

__all__ = ["NativeHost", "TailscaleCLI", "main", "normalize_os", "taildrop_targets"]
