"""Abstract interface for the persisted news store and source registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable

from ..core.types import FeedSource, NewsRecord


class NewsStore(ABC):
    """Backing store for sources and news records.

    Every method raises PersistenceError when the backend fails.
    """

    @abstractmethod
    def list_sources(self) -> list[FeedSource]:
        """Return enabled feed sources."""
        raise NotImplementedError

    @abstractmethod
    def existing_source_urls(self, links: Iterable[str]) -> set[str]:
        """Return the subset of ``links`` already persisted as record keys."""
        raise NotImplementedError

    @abstractmethod
    def recent_titles(self, since: datetime) -> list[str]:
        """Return titles of records published at or after ``since``."""
        raise NotImplementedError

    @abstractmethod
    def upsert_records(self, records: list[NewsRecord]) -> None:
        """Insert or replace records keyed by source URL, as one batch."""
        raise NotImplementedError
