"""
Core domain models and business logic.

This package contains data types, deduplication and gating logic that is
independent of any network or storage backend.
"""

from .dedup import NearDuplicateFilter, filter_known_links, title_similarity, tokenize_title
from .errors import (
    ClassificationError,
    ContentTooShort,
    IngestError,
    PersistenceError,
    ResolveError,
    ScrapeError,
    SourceFetchError,
    TranslationError,
)
from .types import (
    ClassificationResult,
    FeedSource,
    NewsRecord,
    RawFeedItem,
    RunResult,
    ScrapedArticle,
)

__all__ = [
    "FeedSource",
    "RawFeedItem",
    "ScrapedArticle",
    "ClassificationResult",
    "NewsRecord",
    "RunResult",
    "NearDuplicateFilter",
    "filter_known_links",
    "title_similarity",
    "tokenize_title",
    "IngestError",
    "SourceFetchError",
    "ResolveError",
    "ScrapeError",
    "ContentTooShort",
    "ClassificationError",
    "TranslationError",
    "PersistenceError",
]
