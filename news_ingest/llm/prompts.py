"""Prompt loading and rendering helpers for LLM providers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..config import ClassifyConfig
from ..core.types import RawFeedItem, ScrapedArticle


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_classify_prompt(
    item: RawFeedItem,
    article: ScrapedArticle,
    cfg: ClassifyConfig,
    foreign: bool,
) -> str:
    regions = " / ".join(f'"{region}"' for region in cfg.regions)
    return _render_template(
        "classify_foreign" if foreign else "classify_native",
        title=item.title,
        content=article.plain_text,
        regions=regions,
    )


def build_translate_prompt(article: ScrapedArticle) -> str:
    return _render_template("translate", content=article.plain_text)
