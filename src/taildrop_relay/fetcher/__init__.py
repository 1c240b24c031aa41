"""Image retrieval and encoding."""

from taildrop_relay.fetcher.encoding import encode_data_url
from taildrop_relay.fetcher.filenames import file_name_from_url
from taildrop_relay.fetcher.header_policy import (
    TWIMG_HEADERS,
    HeaderPolicy,
    HeaderRule,
    default_header_policy,
)
from taildrop_relay.fetcher.image_fetcher import ImageFetcher

__all__ = [
    "ImageFetcher",
    "HeaderPolicy",
    "HeaderRule",
    "TWIMG_HEADERS",
    "default_header_policy",
    "encode_data_url",
    "file_name_from_url",
]
