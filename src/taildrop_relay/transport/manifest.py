"""Native messaging host manifests: lookup, validation and installation."""

from __future__ import annotations

import json
import re
from pathlib import Path

from taildrop_relay.config.constants import HOST_NOT_FOUND_ERROR
from taildrop_relay.config.logging import get_logger
from taildrop_relay.exceptions import ManifestError

logger = get_logger(__name__)
HOST_NAME_PATTERN = re.compile(r"^[a-z0-9_]+(\.[a-z0-9_]+)*$")


def validate_host_name(name: str) -> str:
    if not HOST_NAME_PATTERN.match(name):
        raise ManifestError("Invalid native messaging host name.", details=name)
    return name


def find_manifest(name: str, search_dirs: list[Path]) -> Path:
    """Return the first `<name>.json` found in search_dirs."""
    validate_host_name(name)
    for directory in search_dirs:
        candidate = directory / f"{name}.json"
        if candidate.is_file():
            logger.debug("Found manifest for %s at %s", name, candidate)
            return candidate
    raise ManifestError(
        HOST_NOT_FOUND_ERROR,
        details=f"{name}.json not in {', '.join(str(d) for d in search_dirs)}",
    )


def load_manifest(path: Path, name: str | None = None) -> dict:
    """Read and validate a manifest file."""
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError("Invalid native messaging host manifest.", details=str(e)) from e
    if not isinstance(manifest, dict):
        raise ManifestError("Invalid native messaging host manifest.", details=str(path))
    if name is not None and manifest.get("name") != name:
        raise ManifestError(
            "Invalid native messaging host manifest.",
            details=f"name {manifest.get('name')!r} does not match {name!r}",
        )
    if manifest.get("type") != "stdio":
        raise ManifestError(
            "Invalid native messaging host manifest.",
            details=f"unsupported type {manifest.get('type')!r}",
        )
    host_path = manifest.get("path")
    if not isinstance(host_path, str) or not host_path:
        raise ManifestError("Invalid native messaging host manifest.", details="missing path")
    return manifest


def resolve_host_path(name: str, search_dirs: list[Path]) -> Path:
    """Resolve the executable registered for a native messaging host."""
    manifest_path = find_manifest(name, search_dirs)
    manifest = load_manifest(manifest_path, name)
    host_path = Path(manifest["path"])
    if not host_path.is_absolute():
        # Chrome on Windows resolves relative paths against the manifest
        host_path = manifest_path.parent / host_path
    return host_path


def build_manifest(
    name: str,
    host_path: Path,
    allowed_origins: list[str],
    description: str = "Tailscale image sender native host",
) -> dict:
    validate_host_name(name)
    return {
        "name": name,
        "description": description,
        "path": str(host_path),
        "type": "stdio",
        "allowed_origins": allowed_origins,
    }


def install_manifest(manifest: dict, directory: Path) -> Path:
    """Write a manifest into a browser's NativeMessagingHosts directory."""
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / f"{manifest['name']}.json"
    target.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    logger.info("Installed native messaging manifest at %s", target)
    return target
