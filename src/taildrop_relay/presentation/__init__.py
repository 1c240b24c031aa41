"""Rendering helpers for terminal front ends."""

from taildrop_relay.presentation.render import (
    NO_DEVICES_MESSAGE,
    describe_result,
    device_table,
    os_icon,
    render_devices,
)

__all__ = ["NO_DEVICES_MESSAGE", "describe_result", "device_table", "os_icon", "render_devices"]
