"""Exception taxonomy for the ingestion pipeline.

Every stage before the sink recovers from its own errors (the source or
item is skipped, or defaults are substituted). Only PersistenceError is
fatal for a run.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for all pipeline errors."""


class SourceFetchError(IngestError):
    """A feed could not be fetched or parsed."""

    def __init__(self, source_name: str, reason: str):
        super().__init__(f"{source_name}: {reason}")
        self.source_name = source_name
        self.reason = reason


class ResolveError(IngestError):
    """An aggregator link could not be resolved to an article URL."""


class ScrapeError(IngestError):
    """The article page could not be fetched."""


class ContentTooShort(ScrapeError):
    """Extracted content is below the content gate threshold."""

    def __init__(self, length: int, minimum: int):
        super().__init__(f"content too short ({length} < {minimum} chars)")
        self.length = length
        self.minimum = minimum


class ClassificationError(IngestError):
    """The model call failed or returned an unusable payload."""


class TranslationError(IngestError):
    """The body translation call failed."""


class PersistenceError(IngestError):
    """The final batch upsert failed."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail
