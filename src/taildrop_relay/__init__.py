"""taildrop-relay - send images from the web to Tailscale peers."""

__version__ = "0.1.0"
