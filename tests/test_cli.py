"""Tests for the taildrop-relay CLI."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from taildrop_relay.cli import app

runner = CliRunner()
DEVICES = [
    {"name": "laptop", "os": "linux", "online": True},
    {"name": "phone", "os": "ios", "online": False},
]


def _bridge(list_result=None, send_result=None):
    bridge = MagicMock()
    bridge.list_devices = AsyncMock(
        return_value=list_result or {"success": True, "data": DEVICES, "error": None}
    )
    bridge.send_image = AsyncMock(
        return_value=send_result or {"success": True, "data": None, "error": None}
    )
    return bridge


class TestDevicesCommand:
    def test_lists_online_devices(self):
        with patch("taildrop_relay.cli.RelayBridge", return_value=_bridge()):
            result = runner.invoke(app, ["devices"])
        assert result.exit_code == 0
        assert "laptop" in result.output
        assert "phone" not in result.output

    def test_all_includes_offline(self):
        with patch("taildrop_relay.cli.RelayBridge", return_value=_bridge()):
            result = runner.invoke(app, ["devices", "--all"])
        assert "phone" in result.output

    def test_discovery_error(self):
        failing = _bridge(list_result={"success": False, "data": None, "error": "No response from native host"})
        with patch("taildrop_relay.cli.RelayBridge", return_value=failing):
            result = runner.invoke(app, ["devices"])
        assert result.exit_code == 1
        assert "Error: No response from native host" in result.output

    def test_nothing_online(self):
        offline = _bridge(list_result={"success": True, "data": [DEVICES[1]], "error": None})
        with patch("taildrop_relay.cli.RelayBridge", return_value=offline):
            result = runner.invoke(app, ["devices"])
        assert result.exit_code == 0
        assert "No online devices found" in result.output


class TestSendCommand:
    def test_send_to_named_device(self):
        bridge = _bridge()
        with patch("taildrop_relay.cli.RelayBridge", return_value=bridge):
            result = runner.invoke(app, ["send", "https://example.com/cat.png", "--device", "laptop"])
        assert result.exit_code == 0
        assert "Sent successfully" in result.output
        url, device = bridge.send_image.call_args.args
        assert url == "https://example.com/cat.png"
        assert device.name == "laptop"
        bridge.list_devices.assert_not_called()

    def test_prompts_for_device(self):
        bridge = _bridge()
        with patch("taildrop_relay.cli.RelayBridge", return_value=bridge):
            result = runner.invoke(app, ["send", "https://example.com/cat.png"], input="1\n")
        assert result.exit_code == 0
        assert bridge.send_image.call_args.args[1].name == "laptop"

    def test_send_failure(self):
        bridge = _bridge(send_result={"success": False, "data": None, "error": "Failed to fetch image: HTTP 404"})
        with patch("taildrop_relay.cli.RelayBridge", return_value=bridge):
            result = runner.invoke(app, ["send", "https://example.com/cat.png", "-d", "laptop"])
        assert result.exit_code == 1
        assert "Error: Failed to fetch image: HTTP 404" in result.output


class TestInstallHost:
    def test_writes_manifest(self, tmp_path):
        host = tmp_path / "taildrop-relay-host"
        host.write_text("")
        result = runner.invoke(
            app,
            [
                "install-host",
                "--origin",
                "chrome-extension://abc/",
                "--dir",
                str(tmp_path / "hosts"),
                "--host-path",
                str(host),
            ],
        )
        assert result.exit_code == 0
        manifest = json.loads((tmp_path / "hosts" / "com.bitandbang.tailscale_image_sender.json").read_text())
        assert manifest["path"] == str(host.resolve())
        assert manifest["allowed_origins"] == ["chrome-extension://abc/"]

    def test_missing_host_executable(self, tmp_path):
        with patch("taildrop_relay.cli.shutil.which", return_value=None):
            result = runner.invoke(app, ["install-host", "-o", "chrome-extension://abc/", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Could not find" in result.output


class TestStatus:
    def test_reports_missing_host(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RELAY_MANIFEST_DIRS", json.dumps([str(tmp_path)]))
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Native host not found" in result.output
