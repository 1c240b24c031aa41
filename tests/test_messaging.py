"""Tests for native messaging framing."""

import io
import struct

import pytest

from taildrop_relay.exceptions import FramingError
from taildrop_relay.messaging import (
    decode_length,
    decode_reply,
    encode_message,
    read_message,
    write_message,
)


def _frame(body: bytes) -> bytes:
    return struct.pack("<I", len(body)) + body


class TestEncode:
    def test_header_is_little_endian_length(self):
        frame = encode_message({"action": "get_devices"})
        body = b'{"action":"get_devices"}'
        assert frame == struct.pack("<I", len(body)) + body

    def test_rejects_oversized_message(self):
        with pytest.raises(FramingError, match="too large"):
            encode_message({"image_data": "x" * 100}, max_size=50)


class TestDecodeReply:
    def test_empty_output_is_no_reply(self):
        assert decode_reply(b"") is None

    def test_reads_first_frame_only(self):
        raw = _frame(b'{"success":true}') + _frame(b'{"success":false}')
        assert decode_reply(raw) == {"success": True}

    def test_truncated_header(self):
        with pytest.raises(FramingError, match="Truncated length header"):
            decode_reply(b"\x05\x00")

    def test_truncated_body(self):
        with pytest.raises(FramingError, match="Truncated message body"):
            decode_reply(struct.pack("<I", 10) + b"{}")

    def test_invalid_json(self):
        with pytest.raises(FramingError, match="unmarshal"):
            decode_reply(_frame(b"not json"))

    def test_non_object_payload(self):
        with pytest.raises(FramingError, match="JSON object"):
            decode_reply(_frame(b"[1, 2]"))

    def test_reply_over_limit(self):
        with pytest.raises(FramingError, match="Reply too large"):
            decode_reply(_frame(b'{"a":"' + b"x" * 64 + b'"}'), max_size=16)

    def test_decode_length(self):
        assert decode_length(struct.pack("<I", 1234)) == 1234


class TestStreams:
    def test_read_message_eof(self):
        assert read_message(io.BytesIO(b"")) is None

    def test_write_then_read(self):
        buf = io.BytesIO()
        write_message(buf, {"success": True, "data": [{"name": "laptop"}]})
        buf.seek(0)
        assert read_message(buf) == {"success": True, "data": [{"name": "laptop"}]}

    def test_read_message_truncated_body(self):
        with pytest.raises(FramingError):
            read_message(io.BytesIO(struct.pack("<I", 20) + b'{"a":1}'))
