"""Test doubles shared across test modules."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

from taildrop_relay.transport.channel import TransportChannel


class FakeChannel(TransportChannel):
    """Channel that records messages and answers with canned replies."""

    def __init__(self, reply: dict | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.messages: list[dict] = []

    async def exchange(self, message: dict) -> dict | None:
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return self.reply


def write_script(path: Path, body: str) -> Path:
    """Write an executable Python script that runs under the current interpreter."""
    path.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path
