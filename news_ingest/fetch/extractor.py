"""
Structured content extraction with ordered container strategies.

Each strategy takes raw HTML and returns clean structural markup (headings,
paragraphs, lists, blockquotes, images) or None:
1. article: the first <article> element
2. main: the first <main> element
3. content_class: common content wrapper classes
4. readability: Mozilla's readability algorithm picks the container

Strategies are tried in order until one produces non-empty markup. If the
result is still implausibly short, every paragraph on the page is swept in.
"""

from __future__ import annotations

from html import escape
import re
from typing import Callable
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from readability import Document
from readability.readability import Unparseable


JUNK_SELECTOR = (
    "script, style, iframe, nav, footer, header, aside, .ad, .advertisement, "
    ".related-posts, .menu, .popup, .social-share, .comments"
)
CONTENT_CLASS_SELECTOR = ".post-content, .article-content, .story-body, .entry-content"
WALK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "ul", "ol", "blockquote", "img"]

_WS_RE = re.compile(r"\s+")

Strategy = Callable[[str, str, int], "str | None"]


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def strip_junk(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove obviously non-content elements in place."""
    for tag in soup.select(JUNK_SELECTOR):
        tag.decompose()
    return soup


def absolute_url(src: str | None, base_url: str) -> str | None:
    """Make an image/link reference absolute; only http(s) results are kept.

    Examples:
        >>> absolute_url("//cdn.example.com/a.jpg", "https://example.com/x")
        'https://cdn.example.com/a.jpg'
        >>> absolute_url("/a.jpg", "https://example.com/news/1")
        'https://example.com/a.jpg'
    """
    if not src:
        return None
    src = src.strip()
    if src.startswith("//"):
        src = "https:" + src
    elif src.startswith("/"):
        src = urljoin(base_url, src)
    if not src.startswith(("http://", "https://")):
        return None
    return src


def render_container(container: Tag, base_url: str, min_paragraph_chars: int = 20) -> str:
    """Walk a container and re-serialize its structural elements.

    Paragraphs must be longer than ``min_paragraph_chars``; headings and
    blockquotes must be non-empty; lists are kept as-is; images need an
    absolute http(s) source.
    """
    parts: list[str] = []
    for elem in container.find_all(WALK_TAGS):
        if _inside_kept_block(elem, container):
            continue
        name = elem.name
        if name == "p":
            text = elem.get_text().strip()
            if len(text) > min_paragraph_chars:
                parts.append(f"<p>{escape(text, quote=False)}</p>")
        elif name in ("ul", "ol"):
            inner = elem.decode_contents().strip()
            if inner:
                parts.append(f"<{name}>{inner}</{name}>")
        elif name == "img":
            src = absolute_url(elem.get("src") or elem.get("data-src"), base_url)
            if src:
                alt = escape(elem.get("alt") or "")
                parts.append(f'<img src="{escape(src)}" alt="{alt}" />')
        else:
            text = elem.get_text().strip()
            if text:
                parts.append(f"<{name}>{escape(text, quote=False)}</{name}>")
    return "".join(f"{part}\n" for part in parts)


def _inside_kept_block(elem: Tag, container: Tag) -> bool:
    """True when an ancestor below ``container`` is a list or blockquote already emitted whole."""
    for parent in elem.parents:
        if parent is container:
            return False
        if parent.name in ("ul", "ol", "blockquote"):
            return True
    return False


def extract_structured(
    html: str,
    base_url: str,
    strategies: list[str],
    min_paragraph_chars: int = 20,
) -> str:
    """Run the named strategies in order and return the first non-empty markup.

    Unknown strategy names are skipped. Returns "" if every strategy fails.
    """
    for name in strategies:
        strategy = _get_strategy(name)
        if strategy is None:
            continue
        markup = strategy(html, base_url, min_paragraph_chars)
        if markup:
            return markup
    return ""


def extract_all_paragraphs(html: str, min_chars: int = 30) -> str:
    """Collect every paragraph on the page longer than ``min_chars``."""
    soup = strip_junk(parse_html(html))
    parts = []
    for p in soup.find_all("p"):
        text = p.get_text().strip()
        if len(text) > min_chars:
            parts.append(f"<p>{escape(text, quote=False)}</p>\n")
    return "".join(parts)


def plain_text(markup: str, max_chars: int = 3000) -> str:
    """Whitespace-collapsed text of the markup, capped at ``max_chars``."""
    text = parse_html(markup).get_text(separator=" ")
    return _WS_RE.sub(" ", text).strip()[:max_chars]


def _get_strategy(name: str) -> Strategy | None:
    if name == "article":
        return _extract_article
    if name == "main":
        return _extract_main
    if name == "content_class":
        return _extract_content_class
    if name == "readability":
        return _extract_readability
    return None


def _extract_article(html: str, base_url: str, min_paragraph_chars: int) -> str | None:
    container = strip_junk(parse_html(html)).find("article")
    if container is None:
        return None
    return render_container(container, base_url, min_paragraph_chars) or None


def _extract_main(html: str, base_url: str, min_paragraph_chars: int) -> str | None:
    container = strip_junk(parse_html(html)).find("main")
    if container is None:
        return None
    return render_container(container, base_url, min_paragraph_chars) or None


def _extract_content_class(html: str, base_url: str, min_paragraph_chars: int) -> str | None:
    container = strip_junk(parse_html(html)).select_one(CONTENT_CLASS_SELECTOR)
    if container is None:
        return None
    return render_container(container, base_url, min_paragraph_chars) or None


def _extract_readability(html: str, base_url: str, min_paragraph_chars: int) -> str | None:
    if not html or not html.strip():
        return None
    try:
        summary_html = Document(html).summary(html_partial=True)
    except Unparseable:
        return None
    container = parse_html(summary_html)
    return render_container(container, base_url, min_paragraph_chars) or None
