"""
Core data types for the news ingestion pipeline.

This module defines the data structures that flow through a run:
- FeedSource: A syndication feed enumerated from the source registry
- RawFeedItem: One parsed feed entry, tagged with its source
- ScrapedArticle: Canonical URL plus extracted image and structured content
- ClassificationResult: Model-produced summary, labels and translation
- NewsRecord: The persisted row, keyed by canonical source URL
- RunResult: Structured outcome returned to the caller of a run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class FeedSource:
    """A feed from the source registry.

    Attributes:
        name: Display name of the publication (e.g., "CleanTechnica")
        url: URL of the RSS/Atom feed
        language: Language code of the feed content (e.g., "en", "zh")
        enabled: Disabled sources are never fetched
    """
    name: str
    url: str
    language: str = "zh"
    enabled: bool = True


@dataclass
class RawFeedItem:
    """A parsed feed entry, ephemeral for one run.

    Attributes:
        title: Entry headline
        link: Entry link as published by the feed (may be an aggregator redirect)
        published_at: Publication time in UTC
        excerpt: Summary/content snippet from the feed
        source_name: Display name of the source feed
        source_language: Language of the source feed
        raw_content: Full HTML content embedded in the feed, if any
    """
    title: str
    link: str
    published_at: datetime
    excerpt: str
    source_name: str
    source_language: str
    raw_content: str | None = None


@dataclass
class ScrapedArticle:
    """Article page after resolution and extraction.

    Attributes:
        canonical_url: The de-indirected article URL, used as the unique key
        structured_markup: Clean heading/paragraph/list/image markup
        plain_text: Bounded plain-text projection used only for prompting
        main_image_url: Representative image, if one was found
    """
    canonical_url: str
    structured_markup: str
    plain_text: str
    main_image_url: str | None = None


@dataclass
class ClassificationResult:
    """Output of the classifier/translator stage.

    Attributes:
        summary: Short summary in the publish language
        region: Region label from the closed set
        tag: Coarse category tag
        tag_variant: More specific sub-tag
        translated_title: Title in the publish language (foreign sources only)
        translated_body: Paragraph markup of the translated body (foreign sources only)
        status: "ok", "parse_error" or "provider_error"
    """
    summary: str
    region: str
    tag: str
    tag_variant: str
    translated_title: str | None = None
    translated_body: str | None = None
    status: str = "ok"


@dataclass
class NewsRecord:
    """A persisted news row. ``source_url`` is the natural unique key."""
    title: str
    source_url: str
    source_display_name: str
    published_at: datetime
    summary: str
    region: str
    tag: str
    tag_variant: str
    content_markup: str
    image_url: str | None = None

    def to_row(self) -> dict[str, Any]:
        """Map the record onto the store's column names."""
        return {
            "title": self.title,
            "source": self.source_url,
            "source_name": self.source_display_name,
            "date": self.published_at.isoformat(),
            "summary": self.summary,
            "region": self.region,
            "tag": self.tag,
            "tag_variant": self.tag_variant,
            "full_content": self.content_markup,
            "image": self.image_url,
        }


@dataclass
class RunResult:
    """Structured outcome of one run.

    On success ``items`` holds one summary dict per persisted record. On a
    fatal error ``success`` is False and ``error``/``detail`` are populated.
    ``message`` explains runs that legitimately persisted nothing.
    """
    success: bool
    processed: int = 0
    items: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None
    error: str | None = None
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"error": self.error, "detail": self.detail}
        payload: dict[str, Any] = {
            "success": True,
            "processed": self.processed,
            "items": self.items,
        }
        if self.message:
            payload["message"] = self.message
        return payload
