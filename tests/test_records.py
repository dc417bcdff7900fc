"""Tests for record assembly and run outcome serialization."""

from __future__ import annotations

from datetime import datetime, timezone

from news_ingest.core.records import UNKNOWN_SOURCE, build_record, display_source_name
from news_ingest.core.types import ClassificationResult, RawFeedItem, RunResult, ScrapedArticle


def _item(**overrides) -> RawFeedItem:
    values = dict(
        title="EU raises renewables target",
        link="https://news.google.com/rss/articles/abc",
        published_at=datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc),
        excerpt="Feed excerpt",
        source_name="Carbon Brief",
        source_language="en",
    )
    values.update(overrides)
    return RawFeedItem(**values)


def _article(markup: str = "<p>original body</p>\n", image: str | None = None) -> ScrapedArticle:
    return ScrapedArticle(
        canonical_url="https://www.carbonbrief.org/eu-target",
        structured_markup=markup,
        plain_text="original body",
        main_image_url=image,
    )


def _result(**overrides) -> ClassificationResult:
    values = dict(summary="摘要", region="Global", tag="再生能源", tag_variant="政策")
    values.update(overrides)
    return ClassificationResult(**values)


def test_display_source_name_prefers_feed_name():
    assert display_source_name("https://www.udn.com/news/1", "UDN Feed") == "UDN Feed"


def test_display_source_name_maps_known_domains():
    assert display_source_name("https://www.carbonbrief.org/x", "") == "Carbon Brief"
    assert display_source_name("https://netzero.cna.com.tw/x", None) == "淨零碳排"


def test_display_source_name_falls_back_to_host_then_unknown():
    assert display_source_name("https://www.example.org/a", "") == "example.org"
    assert display_source_name("not a url", "") == UNKNOWN_SOURCE


def test_build_record_for_foreign_item_uses_translations():
    record = build_record(
        _item(),
        _article(image="https://img.example.com/a.jpg"),
        _result(translated_title="歐盟提高再生能源目標", translated_body="<p>譯文</p>"),
        foreign=True,
    )

    assert record.title == "歐盟提高再生能源目標"
    assert record.source_url == "https://www.carbonbrief.org/eu-target"
    assert record.source_display_name == "Carbon Brief"
    assert record.content_markup == "<p>譯文</p>"
    assert record.image_url == "https://img.example.com/a.jpg"


def test_build_record_keeps_original_markup_when_translation_failed():
    record = build_record(_item(), _article(), _result(translated_title="譯名"), foreign=True)
    assert record.content_markup == "<p>original body</p>\n"


def test_build_record_native_item_keeps_title_and_falls_back_to_excerpt():
    record = build_record(
        _item(title="台電宣布新太陽能計畫", source_language="zh"),
        _article(markup=""),
        _result(translated_title="ignored"),
        foreign=False,
    )
    assert record.title == "台電宣布新太陽能計畫"
    assert record.content_markup == "Feed excerpt"


def test_record_to_row_uses_store_columns():
    row = build_record(_item(), _article(), _result(), foreign=False).to_row()

    assert row == {
        "title": "EU raises renewables target",
        "source": "https://www.carbonbrief.org/eu-target",
        "source_name": "Carbon Brief",
        "date": "2025-01-06T08:00:00+00:00",
        "summary": "摘要",
        "region": "Global",
        "tag": "再生能源",
        "tag_variant": "政策",
        "full_content": "<p>original body</p>\n",
        "image": None,
    }


def test_run_result_to_dict():
    ok = RunResult(success=True, processed=1, items=[{"title": "t", "tag": "x", "has_image": False, "has_content": True}])
    assert ok.to_dict() == {"success": True, "processed": 1, "items": ok.items}

    empty = RunResult(success=True, message="No new unique items to process.")
    assert empty.to_dict()["message"] == "No new unique items to process."

    failed = RunResult(success=False, error="Upsert failed", detail="APIError()")
    assert failed.to_dict() == {"error": "Upsert failed", "detail": "APIError()"}
