"""
Article page scraping.

Fetches the article page, picks a representative image and builds the
structured markup that becomes the persisted body. When scraping is
disabled, the feed's embedded content is pushed through the same
structural walk instead.
"""

from __future__ import annotations

from html import escape
import logging
from urllib.parse import urlparse

from bs4 import BeautifulSoup
import httpx

from ..config import ScrapeConfig
from ..core.errors import ScrapeError
from ..core.types import RawFeedItem, ScrapedArticle
from .extractor import (
    absolute_url,
    extract_all_paragraphs,
    extract_structured,
    parse_html,
    plain_text,
    render_container,
    strip_junk,
)

logger = logging.getLogger(__name__)

IMAGE_META = [("property", "og:image"), ("name", "twitter:image")]
IMAGE_CONTAINERS = ["article", ".article", ".post-content", "main"]


async def scrape_article(url: str, client: httpx.AsyncClient, cfg: ScrapeConfig) -> ScrapedArticle:
    """Fetch an article page and extract image and structured content.

    Args:
        url: Canonical article URL (already resolved)
        client: Shared HTTP client
        cfg: Scrape configuration

    Raises:
        ScrapeError: On a malformed URL, transport errors or a non-success status
    """
    try:
        resp = await client.get(url, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise ScrapeError(f"{type(exc).__name__}: {exc}") from exc
    if resp.status_code < 200 or resp.status_code >= 300:
        raise ScrapeError(f"HTTP {resp.status_code} for {url}")

    html = resp.text
    base_url = str(resp.url)

    soup = parse_html(html)
    image = extract_main_image(soup, base_url, cfg.blocked_image_domains)
    if image:
        logger.debug("Image found: %s", image[:60])

    markup = build_markup(html, base_url, cfg)
    return ScrapedArticle(
        canonical_url=url,
        structured_markup=markup,
        plain_text=plain_text(markup, cfg.plain_text_max_chars),
        main_image_url=image,
    )


def article_from_feed(item: RawFeedItem, url: str, cfg: ScrapeConfig) -> ScrapedArticle:
    """Build an article from feed-embedded content without fetching the page.

    Plain-text excerpts are split on blank lines into paragraphs before the
    structural walk.
    """
    html = item.raw_content or item.excerpt or ""
    if "<" not in html:
        html = "".join(
            f"<p>{escape(part.strip(), quote=False)}</p>" for part in html.split("\n\n") if part.strip()
        )
    soup = strip_junk(parse_html(html))
    image = extract_main_image(soup, url, cfg.blocked_image_domains)
    if image is None:
        first = soup.find("img")
        candidate = absolute_url(first.get("src"), url) if first is not None else None
        if candidate and not _is_blocked(candidate, cfg.blocked_image_domains):
            image = candidate
    markup = render_container(soup, url, cfg.min_paragraph_chars)
    return ScrapedArticle(
        canonical_url=url,
        structured_markup=markup,
        plain_text=plain_text(markup, cfg.plain_text_max_chars),
        main_image_url=image,
    )


def build_markup(html: str, base_url: str, cfg: ScrapeConfig) -> str:
    """Run the container strategies, sweeping page paragraphs if the result is short."""
    markup = extract_structured(html, base_url, cfg.strategies, cfg.min_paragraph_chars)
    if len(markup) < cfg.fallback_trigger_chars:
        markup += extract_all_paragraphs(html, cfg.fallback_paragraph_chars)
    return markup


def extract_main_image(
    soup: BeautifulSoup,
    base_url: str,
    blocked_domains: list[str],
) -> str | None:
    """Pick a representative image for the page.

    Order:
    1. og:image meta tag
    2. twitter:image meta tag
    3. First image inside a main content container

    Meta candidates hosted on a blocked domain are rejected.
    """
    for attr, value in IMAGE_META:
        tag = soup.find("meta", attrs={attr: value})
        if tag is None:
            continue
        candidate = absolute_url(tag.get("content"), base_url)
        if candidate and not _is_blocked(candidate, blocked_domains):
            return candidate

    for selector in IMAGE_CONTAINERS:
        img = soup.select_one(f"{selector} img")
        if img is None:
            continue
        candidate = absolute_url(img.get("src") or img.get("data-src"), base_url)
        if candidate and not _is_blocked(candidate, blocked_domains):
            return candidate
    return None


def _is_blocked(url: str, blocked_domains: list[str]) -> bool:
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return True
    return any(host == d or host.endswith("." + d) for d in blocked_domains)
