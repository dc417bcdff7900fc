"""
Aggregator link resolution.

Aggregator feeds (e.g. Google News) publish redirect links instead of the
article URL. The real URL is read from the redirect's Location header,
without downloading the body. Links from other hosts pass through.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urljoin, urlparse

import httpx

from ..config import ResolveConfig
from ..core.errors import ResolveError

logger = logging.getLogger(__name__)


def needs_resolution(link: str, cfg: ResolveConfig) -> bool:
    """Return True if the link points at a configured aggregator host.

    Raises:
        ResolveError: If the link cannot be parsed as a URL
    """
    if not cfg.enabled:
        return False
    try:
        host = (urlparse(link).hostname or "").lower()
    except ValueError as exc:
        raise ResolveError(f"malformed link {link!r}: {exc}") from exc
    return any(host == h or host.endswith("." + h) for h in cfg.aggregator_hosts)


async def resolve_url(link: str, client: httpx.AsyncClient, cfg: ResolveConfig) -> str:
    """Resolve an aggregator link to the article URL.

    Order:
    1. Location header of a HEAD request with redirects disabled
    2. The configured query parameter of the link itself

    Raises:
        ResolveError: If neither yields a URL or the request fails
    """
    if not needs_resolution(link, cfg):
        return link

    try:
        resp = await client.head(link, follow_redirects=False)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise ResolveError(f"{type(exc).__name__}: {exc}") from exc

    location = resp.headers.get("location")
    if location:
        try:
            resolved = urljoin(link, location)
        except ValueError as exc:
            raise ResolveError(f"malformed Location header {location!r}") from exc
        logger.debug("Real URL found: %s", resolved[:80])
        return resolved

    embedded = url_from_query(link, cfg.url_param)
    if embedded:
        logger.debug("Real URL from param: %s", embedded[:80])
        return embedded

    raise ResolveError(f"could not extract real URL from {link}")


def url_from_query(link: str, param: str) -> str | None:
    """Return an http(s) URL carried in the link's query string, if any."""
    values = parse_qs(urlparse(link).query).get(param) or []
    for value in values:
        if value.startswith(("http://", "https://")):
            return value
    return None
