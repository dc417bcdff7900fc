"""
Main pipeline orchestration for one ingestion run.

This module coordinates the entire workflow:
1. Enumerate enabled feed sources
2. Fetch and parse every feed
3. Drop items whose link is already persisted
4. Resolve, scrape, gate, classify and translate up to ``batch_size`` items
5. Drop near-duplicate titles
6. Upsert the surviving records in one batch

Store reads happen once, before any per-item work; the only write is the
final upsert. A failed item never aborts the run, a failed store call does.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
import logging

import httpx

from .analyzers.classifier import Classifier
from .config import AppConfig
from .core.dedup import NearDuplicateFilter, filter_known_links
from .core.errors import ContentTooShort, PersistenceError, ResolveError, ScrapeError
from .core.filters import filter_by_date, filter_by_keywords
from .core.gate import check_content
from .core.records import build_record
from .core.types import FeedSource, NewsRecord, RawFeedItem, RunResult
from .fetch.feeds import fetch_all_feeds
from .fetch.http import build_client
from .fetch.resolver import resolve_url
from .fetch.scraper import article_from_feed, scrape_article
from .llm.providers.base import CompletionProvider
from .llm.tracing import set_span_output, start_span
from .store.base import NewsStore
from .utils.logging import log_event

logger = logging.getLogger(__name__)

NO_SOURCES = "No enabled RSS sources found"
NO_ITEMS = "No new items"
NO_UNIQUE_ITEMS = "No new unique items to process."


def run_pipeline(
    cfg: AppConfig,
    store: NewsStore,
    provider: CompletionProvider,
    sources: list[FeedSource] | None = None,
    client: httpx.AsyncClient | None = None,
) -> RunResult:
    """Run the complete ingestion pipeline once.

    Args:
        cfg: Application configuration
        store: Source registry and record store
        provider: Completion provider used for classification and translation
        sources: Explicit feed list; defaults to ``cfg.sources`` or the store
        client: HTTP client for feeds and pages (built from ``cfg.fetch`` if None)

    Returns:
        RunResult describing what was persisted, or the fatal store error
    """
    return asyncio.run(run_pipeline_async(cfg, store, provider, sources, client))


async def run_pipeline_async(
    cfg: AppConfig,
    store: NewsStore,
    provider: CompletionProvider,
    sources: list[FeedSource] | None = None,
    client: httpx.AsyncClient | None = None,
) -> RunResult:
    owns_client = client is None
    if client is None:
        client = build_client(cfg.fetch)
    try:
        with start_span(
            "news_ingest.run",
            kind="chain",
            attributes={"batch_size": cfg.run.batch_size, "dry_run": cfg.run.dry_run},
        ) as run_span:
            try:
                result = await _run(cfg, store, provider, sources, client)
            except PersistenceError as exc:
                log_event(
                    logger,
                    "Store error, run aborted",
                    level=logging.ERROR,
                    event="run_failed",
                    error=str(exc),
                )
                result = RunResult(success=False, error=str(exc), detail=exc.detail)
            set_span_output(run_span, result.to_dict())
            return result
    finally:
        if owns_client:
            await client.aclose()


async def _run(
    cfg: AppConfig,
    store: NewsStore,
    provider: CompletionProvider,
    sources: list[FeedSource] | None,
    client: httpx.AsyncClient,
) -> RunResult:
    active = [s for s in await _load_sources(cfg, store, sources) if s.enabled]
    if not active:
        logger.info(NO_SOURCES)
        return RunResult(success=True, message=NO_SOURCES)
    log_event(logger, "Pipeline start", event="pipeline_start", sources=len(active))

    items = await fetch_all_feeds(active, client, cfg.fetch.concurrency)
    items = filter_by_keywords(items, cfg.filter.keywords)
    items = filter_by_date(items, cfg.filter.published_after)
    if not items:
        logger.info(NO_ITEMS)
        return RunResult(success=True, message=NO_ITEMS)

    known_links = await asyncio.to_thread(store.existing_source_urls, [i.link for i in items])
    since = datetime.now(timezone.utc) - timedelta(days=cfg.dedup.window_days)
    recent_titles = await asyncio.to_thread(store.recent_titles, since)

    fresh = filter_known_links(items, known_links)
    log_event(
        logger,
        "Exact-key dedup",
        event="dedup_links",
        fetched=len(items),
        fresh=len(fresh),
    )
    if not fresh:
        logger.info(NO_UNIQUE_ITEMS)
        return RunResult(success=True, message=NO_UNIQUE_ITEMS)

    batch = fresh[: max(0, cfg.run.batch_size)]
    classifier = Classifier(cfg.classify, provider)
    semaphore = asyncio.Semaphore(max(1, cfg.fetch.concurrency))

    async def _bounded(item: RawFeedItem) -> NewsRecord | None:
        async with semaphore:
            return await _process_item(item, cfg, client, classifier)

    processed = await asyncio.gather(*(_bounded(item) for item in batch))
    candidates = [record for record in processed if record is not None]

    records = _select_records(candidates, recent_titles)
    log_event(
        logger,
        "Candidates selected",
        event="select_records",
        batch=len(batch),
        candidates=len(candidates),
        selected=len(records),
    )

    if cfg.run.dry_run:
        logger.info("Dry run, skipping upsert of %d records", len(records))
    elif records:
        await asyncio.to_thread(store.upsert_records, records)

    return RunResult(
        success=True,
        processed=len(records),
        items=[_summarize(record) for record in records],
    )


async def _load_sources(
    cfg: AppConfig,
    store: NewsStore,
    sources: list[FeedSource] | None,
) -> list[FeedSource]:
    if sources is not None:
        return sources
    if cfg.sources:
        return [FeedSource(**entry) for entry in cfg.sources]
    return await asyncio.to_thread(store.list_sources)


async def _process_item(
    item: RawFeedItem,
    cfg: AppConfig,
    client: httpx.AsyncClient,
    classifier: Classifier,
) -> NewsRecord | None:
    """Resolve, scrape, gate, classify and translate one item.

    Returns None when the item is dropped.
    """
    logger.info("Processing: %s", item.title[:60])
    try:
        url = await resolve_url(item.link, client, cfg.resolve)
        if cfg.scrape.enabled:
            article = await scrape_article(url, client, cfg.scrape)
        else:
            article = article_from_feed(item, url, cfg.scrape)
        check_content(article, cfg.scrape.min_content_chars)
    except ContentTooShort as exc:
        log_event(
            logger,
            "Content too short, skipping",
            level=logging.WARNING,
            event="item_dropped",
            reason="content_too_short",
            title=item.title,
            length=exc.length,
        )
        return None
    except (ResolveError, ScrapeError) as exc:
        log_event(
            logger,
            "Item failed, skipping",
            level=logging.WARNING,
            event="item_dropped",
            reason=type(exc).__name__,
            title=item.title,
            error=str(exc),
        )
        return None

    result = await classifier.classify(item, article)
    result.translated_body = await classifier.translate_body(item, article)
    return build_record(item, article, result, classifier.is_foreign(item))


def _select_records(candidates: list[NewsRecord], recent_titles: list[str]) -> list[NewsRecord]:
    """Apply the near-duplicate filter in candidate order.

    Candidates that resolved to an already selected URL are dropped too, so
    the batch never carries the same key twice.
    """
    near_dups = NearDuplicateFilter(recent_titles)
    seen_urls: set[str] = set()
    selected = []
    for record in candidates:
        if record.source_url in seen_urls:
            continue
        if not near_dups.accept(record.title):
            continue
        seen_urls.add(record.source_url)
        selected.append(record)
    return selected


def _summarize(record: NewsRecord) -> dict[str, object]:
    return {
        "title": record.title,
        "tag": record.tag,
        "has_image": bool(record.image_url),
        "has_content": bool(record.content_markup),
    }
