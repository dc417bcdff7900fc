"""Content gate applied to scraped articles before classification."""

from __future__ import annotations

from .errors import ContentTooShort
from .types import ScrapedArticle


def check_content(article: ScrapedArticle, min_chars: int) -> ScrapedArticle:
    """Return the article unchanged, or raise ContentTooShort."""
    length = len(article.structured_markup or "")
    if length < min_chars:
        raise ContentTooShort(length, min_chars)
    return article
