"""Download images for transfer."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from urllib.parse import unquote, unquote_to_bytes, urlsplit

import httpx

from taildrop_relay.config.constants import Timeouts
from taildrop_relay.config.logging import get_logger
from taildrop_relay.config.settings import Settings, get_settings
from taildrop_relay.exceptions import FetchError
from taildrop_relay.fetcher.filenames import file_name_from_url
from taildrop_relay.fetcher.header_policy import HeaderPolicy, default_header_policy
from taildrop_relay.models import ImagePayload

logger = get_logger(__name__)
ALLOWED_SCHEMES = frozenset({"http", "https"})
DATA_URL_PREFIX = "data:"


def _validate_url(url: str) -> None:
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise FetchError(f"Invalid image URL: {e}", details=url) from e
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        raise FetchError(f"Invalid image URL: {url}", details=url)


def _decode_data_url(url: str) -> tuple[bytes, str]:
    """Decode an inline `data:[<mime>][;base64],<payload>` image."""
    header, sep, payload = url[len(DATA_URL_PREFIX) :].partition(",")
    if not sep:
        raise FetchError("Invalid image URL: malformed data URL", details=url[:80])
    params = [p.strip().lower() for p in header.split(";")]
    if "base64" in params[1:]:
        try:
            data = base64.b64decode("".join(unquote(payload).split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise FetchError(f"Failed to decode data URL: {e}", details=url[:80]) from e
    else:
        data = unquote_to_bytes(payload)
    return data, params[0]


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class ImageFetcher:
    """Fetches image bytes over HTTP(S) or from inline data URLs.

    A fresh client is opened for every fetch, so concurrent transfers share
    nothing. `transport` lets tests plug in an `httpx.MockTransport`.
    """

    def __init__(
        self,
        policy: HeaderPolicy | None = None,
        timeout: float = Timeouts.IMAGE_FETCH,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.policy = policy or default_header_policy()
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ImageFetcher:
        s = settings or get_settings()
        return cls(timeout=s.relay_fetch_timeout)

    async def fetch(self, url: str) -> tuple[bytes, str]:
        """Download url, or decode it if it is a data URL. Returns (bytes, mime_type).

        Raises:
            FetchError: On any network failure, bad status, undecodable data URL
                or non-image body.
        """
        if url[: len(DATA_URL_PREFIX)].lower() == DATA_URL_PREFIX:
            data, mime_type = _decode_data_url(url)
            source = "data URL"
        else:
            data, mime_type = await self._download(url)
            source = url

        if mime_type.startswith("text/"):
            raise FetchError(f"URL did not return an image ({mime_type})", details=source)
        if not data:
            raise FetchError("Fetched image is empty", details=source)
        if not mime_type:
            mime_type = mimetypes.guess_type(file_name_from_url(url))[0] or ""
        logger.debug("Fetched %d bytes (%s) from %s", len(data), mime_type or "unknown", source)
        return data, mime_type

    async def _download(self, url: str) -> tuple[bytes, str]:
        _validate_url(url)
        headers = self.policy.headers_for(url)
        if headers:
            logger.debug("Using spoofed headers for %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Failed to fetch image: HTTP {e.response.status_code}", details=url
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Failed to fetch image: {e}", details=url) from e

        return response.content, _media_type(response.headers.get("content-type"))

    async def fetch_payload(self, url: str) -> ImagePayload:
        data, mime_type = await self.fetch(url)
        return ImagePayload(data=data, mime_type=mime_type, file_name=file_name_from_url(url))
