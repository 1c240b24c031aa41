"""Terminal rendering for device lists and transfer results."""

from __future__ import annotations

from typing import Callable, TypeVar

from rich.console import Console
from rich.prompt import IntPrompt
from rich.table import Table

from taildrop_relay.models import Device, online_devices

T = TypeVar("T")
OS_ICONS = {
    "ios": "📱",
    "macos": "🍎",
    "windows": "🪟",
    "linux": "🐧",
}
DEFAULT_OS_ICON = "💻"
NO_DEVICES_MESSAGE = "No online devices found"


def os_icon(os_name: str | None) -> str:
    return OS_ICONS.get((os_name or "").lower(), DEFAULT_OS_ICON)


def device_table(devices: list[Device], title: str = "Tailscale devices") -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("OS", justify="center")
    table.add_column("Device", style="cyan")
    table.add_column("OS name", style="dim")
    for index, device in enumerate(devices, start=1):
        table.add_row(str(index), os_icon(device.os), device.name, device.os or "unknown")
    return table


def render_devices(
    devices: list[Device],
    on_select: Callable[[Device], T],
    console: Console | None = None,
) -> T | None:
    """Show online devices, ask for one and hand it to on_select.

    Returns whatever on_select returns, or None when no device is online.
    """
    console = console or Console()
    available = online_devices(devices)
    if not available:
        console.print(f"[red]{NO_DEVICES_MESSAGE}[/red]")
        return None
    console.print(device_table(available))
    choice = IntPrompt.ask(
        "Send to device",
        console=console,
        choices=[str(i) for i in range(1, len(available) + 1)],
        show_choices=False,
    )
    return on_select(available[choice - 1])


def describe_result(result: dict, success_message: str = "✓ Sent successfully!") -> str:
    """Status line for a BridgeResult dict."""
    if result.get("success"):
        return success_message
    return f"Error: {result.get('error') or 'Unknown error'}"
