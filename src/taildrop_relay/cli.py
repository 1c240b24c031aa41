"""CLI interface for taildrop-relay."""

import asyncio
import shutil
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .bridge import RelayBridge
from .config.logging import get_logger, setup_logging
from .config.settings import get_settings
from .exceptions import ManifestError
from .fetcher.filenames import file_name_from_url
from .models import Device, parse_devices
from .presentation import NO_DEVICES_MESSAGE, describe_result, device_table, render_devices
from .transport.manifest import build_manifest, install_manifest

app = typer.Typer(
    name="taildrop-relay",
    help="Send images from the web to devices on your Tailscale network.",
    rich_markup_mode="rich",
)

console = Console()
HOST_EXECUTABLE = "taildrop-relay-host"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before running a command."""
    try:
        level = "DEBUG" if verbose else get_settings().relay_log_level
    except ValidationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)
    setup_logging(level)


def _load_devices(bridge: RelayBridge) -> list[Device]:
    result = asyncio.run(bridge.list_devices())
    if not result["success"]:
        console.print(f"[red]{describe_result(result)}[/red]")
        raise typer.Exit(1)
    return parse_devices(result["data"])


@app.command()
def devices(
    show_all: bool = typer.Option(False, "--all", "-a", help="Include offline devices"),
) -> None:
    """List devices that can receive files."""
    found = _load_devices(RelayBridge())
    shown = found if show_all else [d for d in found if d.online]
    if not shown:
        console.print(f"[yellow]{NO_DEVICES_MESSAGE}[/yellow]")
        return
    console.print(device_table(shown))


@app.command()
def send(
    url: str = typer.Argument(..., help="Image URL to send"),
    device: str = typer.Option(
        None,
        "--device",
        "-d",
        help="Target device name (prompts when omitted)",
    ),
) -> None:
    """Send an image to a tailnet device.

    Examples:
        taildrop-relay send https://example.com/cat.png --device laptop
        taildrop-relay send https://pbs.twimg.com/media/abc.jpg
    """
    logger = get_logger(__name__)
    bridge = RelayBridge()
    target: Device | None
    if device:
        target = Device(name=device, online=True)
    else:
        target = render_devices(_load_devices(bridge), on_select=lambda d: d, console=console)
        if target is None:
            raise typer.Exit(1)

    console.print(f"[dim]Sending[/dim] {file_name_from_url(url)} [dim]to[/dim] {target.name}...")
    result = asyncio.run(bridge.send_image(url, target))
    if result["success"]:
        console.print(f"[green]{describe_result(result)}[/green]")
        return
    logger.debug("Transfer to %s failed: %s", target.name, result["error"])
    console.print(f"[red]{describe_result(result)}[/red]")
    raise typer.Exit(1)


@app.command("install-host")
def install_host(
    origins: list[str] = typer.Option(
        ...,
        "--origin",
        "-o",
        help="Allowed caller origin, e.g. chrome-extension://<id>/ (repeatable)",
    ),
    directory: Path = typer.Option(
        None,
        "--dir",
        help="Manifest directory (defaults to the first configured one)",
    ),
    host_path: Path = typer.Option(
        None,
        "--host-path",
        help=f"Host executable (defaults to {HOST_EXECUTABLE} on PATH)",
    ),
) -> None:
    """Register the native messaging host with the browser."""
    settings = get_settings()
    if host_path is None:
        found = shutil.which(HOST_EXECUTABLE)
        if not found:
            console.print(f"[red]Could not find {HOST_EXECUTABLE} on PATH.[/red] Pass --host-path.")
            raise typer.Exit(1)
        host_path = Path(found)
    target_dir = directory or settings.relay_manifest_dirs[0]
    try:
        manifest = build_manifest(settings.relay_host_name, host_path.resolve(), origins)
    except ManifestError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    written = install_manifest(manifest, target_dir)
    console.print(f"[green]✓ Installed[/green] {written}")


@app.command()
def status() -> None:
    """Show configuration status."""
    console.print(Panel("[bold]Configuration Status[/bold]", border_style="blue"))
    try:
        settings = get_settings()
        config_status = settings.is_configured()
    except ValidationError as e:
        console.print(f"[red]Failed to load configuration:[/red] {e}")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("RELAY_HOST_NAME", settings.relay_host_name)
    table.add_row("RELAY_HOST_PATH", str(settings.relay_host_path or "[dim]not set[/dim]"))
    table.add_row(
        "RELAY_MANIFEST_DIRS", "\n".join(str(d) for d in settings.relay_manifest_dirs)
    )
    table.add_row("RELAY_EXTENSION_ORIGIN", settings.relay_extension_origin)
    table.add_row("RELAY_FETCH_TIMEOUT", f"{settings.relay_fetch_timeout:g}s")
    table.add_row("RELAY_LOG_LEVEL", settings.relay_log_level)
    table.add_row("TAILSCALE_BIN", settings.tailscale_bin)
    console.print(table)

    if config_status["relay_host_path"] or config_status["host_manifest"]:
        console.print("[green]✓ Native host is registered[/green]")
    else:
        console.print(
            "[yellow]Native host not found.[/yellow] "
            "Run [bold]taildrop-relay install-host[/bold] to register it."
        )


if __name__ == "__main__":
    app()
