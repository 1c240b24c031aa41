"""Request headers for image hosts that reject default client headers."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

# X/Twitter's image CDN refuses hotlinked requests without a browser-like profile
TWIMG_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "*/*",
    "Referer": "https://x.com/",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class HeaderRule:
    """Attach `headers` when the URL's hostname contains `host_pattern`."""

    host_pattern: str
    headers: dict[str, str] = field(default_factory=dict)

    def matches(self, hostname: str) -> bool:
        return self.host_pattern in hostname


class HeaderPolicy:
    """Ordered table of hostname pattern -> header set. First match wins."""

    def __init__(self, rules: list[HeaderRule] | None = None):
        self._rules = list(rules or [])

    @property
    def rules(self) -> list[HeaderRule]:
        return list(self._rules)

    def add_rule(self, host_pattern: str, headers: dict[str, str]) -> None:
        self._rules.append(HeaderRule(host_pattern, dict(headers)))

    def headers_for(self, url: str) -> dict[str, str]:
        try:
            hostname = urlsplit(url).hostname or ""
        except ValueError:
            return {}
        hostname = hostname.lower()
        for rule in self._rules:
            if hostname and rule.matches(hostname):
                return dict(rule.headers)
        return {}


def default_header_policy() -> HeaderPolicy:
    return HeaderPolicy([HeaderRule("twimg", TWIMG_HEADERS)])
