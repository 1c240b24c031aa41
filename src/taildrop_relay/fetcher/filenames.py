"""File name derivation for fetched images."""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

from taildrop_relay.config.constants import DEFAULT_FILE_NAME


def file_name_from_url(url: str) -> str:
    """Return the decoded last path segment of url, or DEFAULT_FILE_NAME.

    The decoded name is used both for display and for the transfer payload.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return DEFAULT_FILE_NAME
    if not parts.scheme or not parts.netloc:
        return DEFAULT_FILE_NAME
    segment = parts.path.rsplit("/", 1)[-1]
    name = unquote(segment).strip()
    # A decoded %2F must not turn the name back into a path
    name = name.replace("/", "_").replace("\\", "_")
    if not name or name in {".", ".."}:
        return DEFAULT_FILE_NAME
    return name
