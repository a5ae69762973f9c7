"""Link preview service for bookmark entries.

Fetches a page and pulls its OpenGraph / <title> metadata. Private and
loopback hosts are refused, and results are kept in a small bounded cache.
"""

from __future__ import annotations

import ipaddress
import time
from collections import OrderedDict
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx
from bs4 import BeautifulSoup

from lifelog.core.config import settings
from lifelog.core.exceptions import PreviewFetchError, ValidationError
from lifelog.core.logging import get_logger
from lifelog.schemas.preview import PreviewResponse

logger = get_logger(__name__)

MAX_URL_LENGTH = 2048
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 280

# Hosts served through a proxy that exposes OpenGraph tags
REWRITE_HOSTS = {
    "x.com": "fxtwitter.com",
    "www.x.com": "fxtwitter.com",
    "twitter.com": "fxtwitter.com",
    "www.twitter.com": "fxtwitter.com",
    "mobile.twitter.com": "fxtwitter.com",
}

# Meta property/name -> preview field
META_KEYS = {
    "og:title": "title",
    "og:description": "description",
    "description": "description",
    "og:image": "image",
    "og:site_name": "site_name",
}


class PreviewCache:
    """Bounded LRU cache of previews with a TTL.

    The oldest entry is evicted once ``max_entries`` is reached.
    """

    def __init__(self, max_entries: int, ttl: float):
        self.max_entries = max_entries
        self.ttl = ttl
        self._entries: OrderedDict[str, tuple[PreviewResponse, float]] = OrderedDict()

    def get(self, key: str) -> PreviewResponse | None:
        """Get a cached preview if present and not expired.

        Args:
            key: Cache key (the requested URL).

        Returns:
            Cached preview or None if expired/missing.
        """
        item = self._entries.get(key)
        if item is None:
            return None
        preview, stored_at = item
        if time.monotonic() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return preview

    def set(self, key: str, preview: PreviewResponse) -> None:
        self._entries[key] = (preview, time.monotonic())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


preview_cache = PreviewCache(
    max_entries=settings.preview_cache_size,
    ttl=settings.preview_cache_ttl,
)


def is_blocked_host(hostname: str) -> bool:
    """Check whether a host is loopback, link-local or on a private network."""
    host = hostname.lower().strip("[]")
    if host == "localhost" or host.endswith(".localhost") or host.endswith(".local"):
        return True

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped

    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
    )


def validate_preview_url(raw_url: str | None) -> str:
    """Check a preview URL and return it normalized.

    Raises:
        ValidationError: If the URL is missing, too long, not http(s) or
            points at a blocked host.
    """
    if not raw_url:
        raise ValidationError("url parameter is required", field="url")
    if len(raw_url) > MAX_URL_LENGTH:
        raise ValidationError("url is too long", field="url")

    try:
        parts = urlsplit(raw_url)
        hostname = parts.hostname
        parts.port  # raises on a malformed port
    except ValueError as e:
        raise ValidationError("Invalid url", field="url") from e

    if parts.scheme not in ("http", "https"):
        raise ValidationError("Invalid url protocol", field="url")
    if not hostname:
        raise ValidationError("Invalid url", field="url")
    if is_blocked_host(hostname):
        raise ValidationError("Blocked host", field="url")

    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


def rewrite_fetch_url(url: str) -> str:
    """Swap hosts that need a proxy to expose preview metadata."""
    parts = urlsplit(url)
    target = REWRITE_HOSTS.get((parts.hostname or "").lower())
    if target is None:
        return url
    netloc = target if parts.port is None else f"{target}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def extract_metadata(page: str) -> dict[str, str | None]:
    """Extract title, description, image and site name from HTML.

    OpenGraph tags win; the first occurrence of each property is kept and
    <title> is the fallback title.
    """
    soup = BeautifulSoup(page, "lxml")

    found: dict[str, str] = {}
    for tag in soup.find_all("meta"):
        prop = (tag.get("property") or tag.get("name") or "").lower()
        content = tag.get("content")
        if not content or prop not in META_KEYS:
            continue
        found.setdefault(META_KEYS[prop], content.strip())

    if "title" not in found and soup.title and soup.title.string:
        found["title"] = soup.title.string.strip()

    title = found.get("title")
    description = found.get("description")
    return {
        "title": title[:MAX_TITLE_LENGTH] if title else None,
        "description": description[:MAX_DESCRIPTION_LENGTH] if description else None,
        "image": found.get("image"),
        "site_name": found.get("site_name"),
    }


class PreviewService:
    """Fetches link previews over HTTP."""

    def __init__(self, cache: PreviewCache | None = None):
        self.cache = preview_cache if cache is None else cache
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=settings.preview_timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": settings.preview_user_agent,
                    "Accept": "text/html,application/xhtml+xml",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, raw_url: str | None) -> PreviewResponse:
        """Get a preview for a URL, using the cache when possible.

        Raises:
            ValidationError: If the URL is rejected.
            PreviewFetchError: If the page cannot be fetched.
        """
        url = validate_preview_url(raw_url)
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        fetch_url = rewrite_fetch_url(url)
        hostname = urlsplit(url).hostname or ""
        client = await self._get_client()

        try:
            response = await client.get(fetch_url)
        except httpx.HTTPError as e:
            logger.warning("preview_fetch_failed", url=fetch_url, error=str(e))
            raise PreviewFetchError() from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning("preview_upstream_error", url=fetch_url, status=response.status_code)
            raise PreviewFetchError(f"Upstream error: {response.status_code}")

        content_type = response.headers.get("content-type", "")
        if "text/html" not in content_type:
            preview = PreviewResponse(url=url, hostname=hostname, title=hostname)
        else:
            page = response.text[: settings.preview_max_html_chars]
            meta = extract_metadata(page)
            if meta["image"]:
                meta["image"] = urljoin(fetch_url, meta["image"])
            preview = PreviewResponse(url=url, hostname=hostname, **meta)

        self.cache.set(url, preview)
        return preview
