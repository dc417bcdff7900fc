"""Supabase-backed news store."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Iterable

from supabase import create_client

from ..config import StoreConfig, get_store_credentials
from ..core.errors import PersistenceError
from ..core.types import FeedSource, NewsRecord
from .base import NewsStore

logger = logging.getLogger(__name__)


class SupabaseNewsStore(NewsStore):
    """Store backed by a Supabase project.

    Sources live in ``cfg.sources_table`` (name, url, language, enabled) and
    records in ``cfg.news_table`` with a unique ``source`` column.
    """

    def __init__(self, client: Any, cfg: StoreConfig):
        self.client = client
        self.cfg = cfg

    @classmethod
    def from_config(cls, cfg: StoreConfig) -> "SupabaseNewsStore":
        url, key = get_store_credentials(cfg)
        if not url or not key:
            missing = []
            if not url:
                missing.append(cfg.url_env)
            if not key:
                missing.append(cfg.key_env)
            raise ValueError(f"Missing {', '.join(missing)}")
        return cls(create_client(url, key), cfg)

    def list_sources(self) -> list[FeedSource]:
        try:
            res = (
                self.client.table(self.cfg.sources_table)
                .select("*")
                .eq("enabled", True)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            raise PersistenceError(f"Failed to list sources: {exc}", detail=repr(exc)) from exc

        sources = []
        for row in res.data or []:
            url = (row.get("url") or "").strip()
            if not url:
                continue
            sources.append(
                FeedSource(
                    name=row.get("name") or "",
                    url=url,
                    language=row.get("language") or "zh",
                    enabled=bool(row.get("enabled", True)),
                )
            )
        return sources

    def existing_source_urls(self, links: Iterable[str]) -> set[str]:
        unique = list(dict.fromkeys(link for link in links if link))
        found: set[str] = set()
        size = max(1, self.cfg.in_chunk_size)
        for start in range(0, len(unique), size):
            chunk = unique[start : start + size]
            try:
                res = (
                    self.client.table(self.cfg.news_table)
                    .select("source")
                    .in_("source", chunk)
                    .execute()
                )
            except Exception as exc:  # noqa: BLE001
                raise PersistenceError(
                    f"Failed to read existing sources: {exc}", detail=repr(exc)
                ) from exc
            found.update(row["source"] for row in res.data or [] if row.get("source"))
        return found

    def recent_titles(self, since: datetime) -> list[str]:
        try:
            res = (
                self.client.table(self.cfg.news_table)
                .select("title")
                .gte("date", since.isoformat())
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            raise PersistenceError(f"Failed to read recent titles: {exc}", detail=repr(exc)) from exc
        return [row["title"] for row in res.data or [] if row.get("title")]

    def upsert_records(self, records: list[NewsRecord]) -> None:
        if not records:
            return
        rows = [record.to_row() for record in records]
        try:
            self.client.table(self.cfg.news_table).upsert(rows, on_conflict="source").execute()
        except Exception as exc:  # noqa: BLE001
            raise PersistenceError(f"Upsert failed: {exc}", detail=repr(exc)) from exc
        logger.info("Upserted %d records into %s", len(rows), self.cfg.news_table)
