"""Optional keyword and publish-date filters for fetched feed items."""

from __future__ import annotations

from datetime import datetime, timezone

from .types import RawFeedItem


def filter_by_keywords(items: list[RawFeedItem], keywords: list[str]) -> list[RawFeedItem]:
    """Keep items whose title or excerpt mentions any keyword.

    Matching is case-insensitive substring matching, so it also works for
    unsegmented scripts. An empty keyword list disables the filter.
    """
    needles = [k.lower() for k in keywords if k and k.strip()]
    if not needles:
        return items
    kept = []
    for item in items:
        haystack = f"{item.title} {item.excerpt}".lower()
        if any(needle in haystack for needle in needles):
            kept.append(item)
    return kept


def filter_by_date(items: list[RawFeedItem], published_after: str | None) -> list[RawFeedItem]:
    """Drop items published before ``published_after`` (ISO 8601, naive means UTC)."""
    if not published_after:
        return items
    since = datetime.fromisoformat(published_after)
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return [item for item in items if item.published_at >= since]
