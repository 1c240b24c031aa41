"""Relay bridge - the API the presentation layer calls.

Both operations always resolve to a BridgeResult dict. Nothing raised by the
fetcher, the encoder or the transport escapes to the caller.
"""

from __future__ import annotations

from taildrop_relay.bridge_types import BridgeResult
from taildrop_relay.config.logging import get_logger
from taildrop_relay.fetcher.encoding import encode_data_url
from taildrop_relay.fetcher.image_fetcher import ImageFetcher
from taildrop_relay.models import Device, TransferRequest, TransferState
from taildrop_relay.transport.channel import NativeMessagingChannel, TransportChannel

logger = get_logger(__name__)


def _device_name(device: Device | dict | str) -> str:
    if isinstance(device, Device):
        return device.name
    if isinstance(device, dict):
        name = device.get("name")
    else:
        name = device
    if not isinstance(name, str) or not name:
        raise ValueError("Device name is required")
    return name


class RelayBridge:
    """Sends images to tailnet devices through the native messaging host."""

    def __init__(
        self,
        channel: TransportChannel | None = None,
        fetcher: ImageFetcher | None = None,
    ):
        self._channel = channel or NativeMessagingChannel.from_settings()
        self._fetcher = fetcher or ImageFetcher.from_settings()

    async def list_devices(self) -> dict:
        """Ask the host for tailnet devices.

        The host decides which peers are listed and their online/os fields;
        the result is returned as the channel normalized it.
        """
        try:
            return await self._channel.send({"action": "get_devices"})
        except Exception as e:
            logger.exception("Device discovery failed")
            return BridgeResult.from_exception(e).to_dict()

    async def send_image(self, url: str, device: Device | dict | str) -> dict:
        """Fetch the image at url and send it to device via Taildrop."""
        state = TransferState.IDLE
        try:
            device_name = _device_name(device)
            state = self._advance(state, TransferState.FETCHING, url)
            payload = await self._fetcher.fetch_payload(url)

            state = self._advance(state, TransferState.ENCODING, url)
            request = TransferRequest(
                device_name=device_name,
                payload=payload,
                image_data=encode_data_url(payload.data, payload.mime_type),
            )

            state = self._advance(state, TransferState.SENDING, url)
            result = await self._channel.send(request.to_message())
        except Exception as e:
            logger.warning("send_image failed while %s: %s", state.value, e)
            self._advance(state, TransferState.FAILED, url)
            return BridgeResult.from_exception(e).to_dict()

        final = TransferState.SUCCEEDED if result["success"] else TransferState.FAILED
        self._advance(state, final, url)
        return result

    @staticmethod
    def _advance(current: TransferState, new: TransferState, url: str) -> TransferState:
        logger.debug("send_image %s: %s -> %s", url, current.value, new.value)
        return new
