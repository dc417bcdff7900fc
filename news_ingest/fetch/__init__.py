"""
Feed fetching, link resolution and article extraction.

This package handles every outbound HTTP request made by a run
except model calls.
"""

from .extractor import extract_structured, plain_text, render_container, strip_junk
from .feeds import fetch_all_feeds, fetch_feed
from .http import build_client
from .resolver import needs_resolution, resolve_url
from .scraper import article_from_feed, extract_main_image, scrape_article

__all__ = [
    "build_client",
    "fetch_feed",
    "fetch_all_feeds",
    "needs_resolution",
    "resolve_url",
    "scrape_article",
    "article_from_feed",
    "extract_main_image",
    "extract_structured",
    "render_container",
    "strip_junk",
    "plain_text",
]
