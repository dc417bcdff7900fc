"""
Syndication feed fetching.

Each source is fetched and parsed independently. A failing source is
logged and skipped; the run continues with whatever other sources
produced.
"""

from __future__ import annotations

import asyncio
import calendar
from datetime import datetime, timezone
import logging
from typing import Any

import feedparser
import httpx

from ..core.errors import SourceFetchError
from ..core.types import FeedSource, RawFeedItem

logger = logging.getLogger(__name__)


async def fetch_feed(source: FeedSource, client: httpx.AsyncClient) -> list[RawFeedItem]:
    """Fetch one feed and parse its entries.

    Raises:
        SourceFetchError: On a malformed feed URL, transport errors,
            non-success status, or a response that does not parse as a feed
    """
    try:
        resp = await client.get(source.url, follow_redirects=True)
        resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise SourceFetchError(source.name, f"{type(exc).__name__}: {exc}") from exc

    feed = feedparser.parse(resp.content)
    if feed.bozo and not feed.entries:
        reason = getattr(feed, "bozo_exception", None) or "malformed feed"
        raise SourceFetchError(source.name, f"parse error: {reason}")

    items = []
    for entry in feed.entries:
        item = _parse_entry(entry, source)
        if item is not None:
            items.append(item)
    return items


async def fetch_all_feeds(
    sources: list[FeedSource],
    client: httpx.AsyncClient,
    concurrency: int,
) -> list[RawFeedItem]:
    """Fetch every source concurrently and return the union of their items.

    Items keep source order regardless of completion order.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _fetch_one(source: FeedSource) -> list[RawFeedItem]:
        async with semaphore:
            logger.info("Fetching: %s (%s)", source.name, source.url)
            try:
                items = await fetch_feed(source, client)
            except SourceFetchError as exc:
                logger.error("Failed to fetch %s: %s", source.name, exc.reason)
                return []
            logger.info("Fetched %d items from %s", len(items), source.name)
            return items

    results = await asyncio.gather(*(_fetch_one(source) for source in sources))
    all_items = [item for items in results for item in items]
    logger.info("Total items collected: %d", len(all_items))
    return all_items


def _parse_entry(entry: Any, source: FeedSource) -> RawFeedItem | None:
    link = (entry.get("link") or "").strip()
    title = (entry.get("title") or "").strip()
    if not link or not title:
        return None
    return RawFeedItem(
        title=title,
        link=link,
        published_at=_published_at(entry),
        excerpt=(entry.get("summary") or "").strip(),
        raw_content=_content_html(entry),
        source_name=source.name,
        source_language=source.language,
    )


def _published_at(entry: Any) -> datetime:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
    return datetime.now(timezone.utc)


def _content_html(entry: Any) -> str | None:
    contents = entry.get("content") or []
    values = [c.get("value") for c in contents if c.get("value")]
    return "\n".join(values) if values else None
