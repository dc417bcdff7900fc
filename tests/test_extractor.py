"""Tests for structured content extraction strategies."""

from __future__ import annotations

from news_ingest.config import ScrapeConfig
from news_ingest.fetch.extractor import (
    extract_all_paragraphs,
    extract_structured,
    parse_html,
    plain_text,
    render_container,
    strip_junk,
)
from news_ingest.fetch.scraper import build_markup


BASE = "https://news.example.com/energy/story"
LONG = "Taipower confirmed the new solar tender will open next month for bidders."
LONGER = "The ministry said the offshore wind auction attracted a record number of developers."

STRATEGIES = ["article", "main", "content_class", "readability"]


def test_render_container_keeps_structural_elements():
    html = f"""
    <article>
      <h2>Key points</h2>
      <p>{LONG}</p>
      <p>Too short.</p>
      <ul><li>First</li><li>Second</li></ul>
      <blockquote>Quoted statement</blockquote>
      <img src="/images/panel.jpg" alt="Solar panel">
      <img src="data:image/png;base64,AAAA">
    </article>
    """
    container = parse_html(html).find("article")

    markup = render_container(container, BASE)

    assert "<h2>Key points</h2>" in markup
    assert f"<p>{LONG}</p>" in markup
    assert "Too short." not in markup
    assert "<ul><li>First</li><li>Second</li></ul>" in markup
    assert "<blockquote>Quoted statement</blockquote>" in markup
    assert '<img src="https://news.example.com/images/panel.jpg" alt="Solar panel" />' in markup
    assert "data:image" not in markup


def test_render_container_emits_nested_paragraphs_once():
    html = f"""
    <article>
      <blockquote><p>{LONG}</p></blockquote>
      <ul><li><p>{LONGER}</p></li></ul>
    </article>
    """
    container = parse_html(html).find("article")

    markup = render_container(container, BASE)

    assert markup.count(LONG) == 1
    assert markup.count(LONGER) == 1
    assert f"<blockquote>{LONG}</blockquote>" in markup
    assert f"<ul><li><p>{LONGER}</p></li></ul>" in markup

def test_render_container_escapes_text():
    container = parse_html("<div><p>AT&amp;T and &lt;Solar&gt; Corp signed a supply deal today.</p></div>")
    assert "AT&amp;T and &lt;Solar&gt; Corp" in render_container(container, BASE)


def test_strip_junk_removes_navigation_and_ads():
    soup = strip_junk(
        parse_html(
            "<article><nav>Menu</nav><div class='ad'>Buy now</div>"
            f"<p>{LONG}</p><script>var x = 1;</script><div class='comments'>c</div></article>"
        )
    )
    text = soup.get_text()
    assert "Menu" not in text
    assert "Buy now" not in text
    assert "var x" not in text
    assert LONG in text


def test_extract_structured_prefers_article_container():
    html = f"<main><p>{LONGER}</p><article><p>{LONG}</p></article></main>"
    markup = extract_structured(html, BASE, STRATEGIES)
    assert markup == f"<p>{LONG}</p>\n"


def test_extract_structured_skips_empty_container():
    html = f"<article><p>tiny</p></article><main><p>{LONGER}</p></main>"
    assert extract_structured(html, BASE, STRATEGIES) == f"<p>{LONGER}</p>\n"


def test_extract_structured_uses_content_classes():
    html = f"<div class='sidebar'><p>{LONG}</p></div><div class='entry-content'><p>{LONGER}</p></div>"
    assert extract_structured(html, BASE, STRATEGIES) == f"<p>{LONGER}</p>\n"


def test_extract_structured_falls_back_to_readability():
    paragraphs = "".join(
        f"<p>Paragraph {i}: the grid operator, citing demand, said reserves were tight, "
        f"and that new storage, solar and wind capacity would arrive before summer.</p>"
        for i in range(6)
    )
    html = f"<html><body><div id='story'>{paragraphs}</div><div>footer links</div></body></html>"

    markup = extract_structured(html, BASE, STRATEGIES)

    assert "Paragraph 0: the grid operator" in markup
    assert markup.startswith("<p>")


def test_extract_structured_returns_empty_for_unknown_or_failing_strategies():
    assert extract_structured("<div>nothing</div>", BASE, ["unknown", "article"]) == ""
    assert extract_structured("", BASE, ["readability"]) == ""


def test_extract_all_paragraphs_uses_longer_threshold():
    html = "<p>Short paragraph under limit.</p><p>This paragraph is comfortably over thirty chars.</p>"
    markup = extract_all_paragraphs(html)
    assert markup == "<p>This paragraph is comfortably over thirty chars.</p>\n"


def test_build_markup_appends_page_paragraphs_when_short():
    html = f"<article><p>{LONG}</p></article><div class='more'><p>{LONGER}</p></div>"

    markup = build_markup(html, BASE, ScrapeConfig())

    assert markup.startswith(f"<p>{LONG}</p>\n")
    assert f"<p>{LONGER}</p>" in markup


def test_build_markup_does_not_sweep_when_long_enough():
    body = "".join(f"<p>{LONG} ({i})</p>" for i in range(10))
    html = f"<article>{body}</article><div><p>{LONGER}</p></div>"

    markup = build_markup(html, BASE, ScrapeConfig())

    assert LONGER not in markup


def test_plain_text_collapses_whitespace_and_caps_length():
    markup = "<h2>Title</h2>\n<p>one   two\n\nthree</p>"
    assert plain_text(markup) == "Title one two three"
    assert plain_text("<p>" + "x" * 5000 + "</p>", max_chars=3000) == "x" * 3000
