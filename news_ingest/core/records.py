"""Assembly of persisted NewsRecords from the pipeline's intermediate types."""

from __future__ import annotations

from urllib.parse import urlparse

from .types import ClassificationResult, NewsRecord, RawFeedItem, ScrapedArticle


UNKNOWN_SOURCE = "未知來源"

# Friendly names for publishers commonly seen behind aggregator links.
KNOWN_DOMAINS = {
    "technews.tw": "TechNews",
    "reccessary.com": "Reccessary",
    "netzero.cna.com.tw": "淨零碳排",
    "cna.com.tw": "中央社",
    "cleantechnica.com": "CleanTechnica",
    "pv-magazine.com": "PV Magazine",
    "windpowermonthly.com": "Wind Power",
    "energy-storage.news": "Energy Storage",
    "electrek.co": "Electrek",
    "carbonbrief.org": "Carbon Brief",
    "greenbiz.com": "GreenBiz",
    "cw.com.tw": "天下雜誌",
    "bnext.com.tw": "數位時代",
    "taipower.com.tw": "台電",
    "moeaboe.gov.tw": "能源局",
    "delta-foundation.org.tw": "台達基金會",
    "e-info.org.tw": "環境資訊",
    "udn.com": "聯合新聞網",
    "ltn.com.tw": "自由時報",
}


def display_source_name(url: str, source_name: str | None) -> str:
    """Pick the display name for a record's source.

    The feed's own display name wins; otherwise the URL host is mapped
    through KNOWN_DOMAINS, falling back to the bare host.

    Examples:
        >>> display_source_name("https://www.udn.com/news/1", "")
        '聯合新聞網'
        >>> display_source_name("https://example.org/a", None)
        'example.org'
    """
    if source_name:
        return source_name
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return UNKNOWN_SOURCE
    if not host:
        return UNKNOWN_SOURCE
    if host.startswith("www."):
        host = host[4:]
    return KNOWN_DOMAINS.get(host, host)


def build_record(
    item: RawFeedItem,
    article: ScrapedArticle,
    result: ClassificationResult,
    foreign: bool,
) -> NewsRecord:
    """Combine feed item, scrape and classification into a NewsRecord.

    Foreign-language items use the translated title and, when translation
    succeeded, the translated body; otherwise the scraped markup is kept.
    """
    title = item.title
    if foreign and result.translated_title:
        title = result.translated_title
    content = result.translated_body or article.structured_markup or item.excerpt or ""
    return NewsRecord(
        title=title,
        source_url=article.canonical_url,
        source_display_name=display_source_name(article.canonical_url, item.source_name),
        published_at=item.published_at,
        summary=result.summary,
        region=result.region,
        tag=result.tag,
        tag_variant=result.tag_variant,
        content_markup=content,
        image_url=article.main_image_url,
    )
