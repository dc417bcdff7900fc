"""Tests for article page scraping and representative image selection."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from news_ingest.config import ScrapeConfig
from news_ingest.core.errors import ScrapeError
from news_ingest.core.types import RawFeedItem
from news_ingest.fetch.extractor import parse_html
from news_ingest.fetch.scraper import article_from_feed, extract_main_image, scrape_article


BLOCKED = ["googleusercontent.com"]
PARAGRAPH = "Developers submitted bids for the offshore wind zone ahead of the deadline."


def _page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


def _scrape(url: str, handler, cfg: ScrapeConfig | None = None):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await scrape_article(url, client, cfg or ScrapeConfig())

    return asyncio.run(_run())


def test_extract_main_image_prefers_og_image():
    soup = parse_html(
        _page(
            head='<meta property="og:image" content="https://img.example.com/og.jpg">'
            '<meta name="twitter:image" content="https://img.example.com/tw.jpg">',
            body='<article><img src="https://img.example.com/inline.jpg"></article>',
        )
    )
    assert extract_main_image(soup, "https://news.example.com/a", BLOCKED) == "https://img.example.com/og.jpg"


def test_extract_main_image_rejects_image_proxy():
    soup = parse_html(
        _page(
            head='<meta property="og:image" content="https://lh3.googleusercontent.com/abc">'
            '<meta name="twitter:image" content="//cdn.example.com/tw.jpg">',
        )
    )
    assert extract_main_image(soup, "https://news.example.com/a", BLOCKED) == "https://cdn.example.com/tw.jpg"


def test_extract_main_image_falls_back_to_container_image():
    soup = parse_html(
        _page(body='<div class="post-content"><img data-src="/media/turbine.jpg"></div>')
    )
    assert (
        extract_main_image(soup, "https://news.example.com/energy/a", BLOCKED)
        == "https://news.example.com/media/turbine.jpg"
    )


def test_extract_main_image_returns_none_without_candidates():
    soup = parse_html(_page(body='<p>No images</p><img src="https://img.example.com/outside.jpg">'))
    assert extract_main_image(soup, "https://news.example.com/a", BLOCKED) is None


def test_scrape_article_follows_redirects_and_uses_final_url_as_base():
    body = "<article>" + "".join(f"<p>{PARAGRAPH} ({i})</p>" for i in range(6)) + (
        '<img src="/img/site.jpg" alt="Site"></article>'
    )

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://www.publisher.example.com/new"})
        return httpx.Response(200, text=_page(body=body), headers={"content-type": "text/html"})

    article = _scrape("https://publisher.example.com/old", handler)

    assert article.canonical_url == "https://publisher.example.com/old"
    assert article.main_image_url == "https://www.publisher.example.com/img/site.jpg"
    assert f"<p>{PARAGRAPH} (0)</p>" in article.structured_markup
    assert article.plain_text.startswith(PARAGRAPH)


def test_scrape_article_raises_on_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not found")

    with pytest.raises(ScrapeError, match="404"):
        _scrape("https://publisher.example.com/missing", handler)


def test_scrape_article_wraps_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ScrapeError):
        _scrape("https://publisher.example.com/slow", handler)


def test_article_from_feed_uses_embedded_content():
    item = RawFeedItem(
        title="Offshore wind bids",
        link="https://publisher.example.com/wind",
        published_at=datetime(2025, 1, 6, tzinfo=timezone.utc),
        excerpt="Short excerpt",
        source_name="Publisher",
        source_language="zh",
        raw_content=f"<p>{PARAGRAPH}</p><p>tiny</p>",
    )

    article = article_from_feed(item, item.link, ScrapeConfig(enabled=False))

    assert article.canonical_url == item.link
    assert article.structured_markup.startswith(f"<p>{PARAGRAPH}</p>\n")
    assert "tiny" not in article.structured_markup
    assert article.main_image_url is None
