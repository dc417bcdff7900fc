"""Per-item classification and translation through a completion provider."""

from __future__ import annotations

from html import escape
import json
import logging

import httpx

from ..config import ClassifyConfig
from ..core.errors import ClassificationError, TranslationError
from ..core.types import ClassificationResult, RawFeedItem, ScrapedArticle
from ..llm.json_parser import parse_json_response, validate_classification
from ..llm.prompts import build_classify_prompt, build_translate_prompt
from ..llm.providers.base import CompletionProvider
from ..utils.logging import log_event

logger = logging.getLogger(__name__)


class Classifier:
    """Summarize, label and (for foreign sources) translate one item.

    Model failures never propagate: classification falls back to defaults
    field by field, and a failed body translation keeps the original markup.
    """

    def __init__(self, cfg: ClassifyConfig, provider: CompletionProvider) -> None:
        self.cfg = cfg
        self.provider = provider

    def is_foreign(self, item: RawFeedItem) -> bool:
        return item.source_language.lower() != self.cfg.publish_language.lower()

    def defaults(self, item: RawFeedItem) -> ClassificationResult:
        return ClassificationResult(
            summary=item.title[: self.cfg.summary_fallback_chars],
            region=self.cfg.default_region,
            tag=self.cfg.default_tag,
            tag_variant=self.cfg.default_tag_variant,
            translated_title=item.title if self.is_foreign(item) else None,
        )

    async def classify(self, item: RawFeedItem, article: ScrapedArticle) -> ClassificationResult:
        """Run the classification prompt and merge its fields over the defaults."""
        result = self.defaults(item)
        foreign = self.is_foreign(item)
        prompt = build_classify_prompt(item, article, self.cfg, foreign)

        try:
            content = await self._complete(prompt, self.cfg.classify_max_tokens, "classify")
        except ClassificationError as exc:
            log_event(
                logger,
                "Classification failed, using defaults",
                level=logging.WARNING,
                event="classify_provider_error",
                title=item.title,
                error=str(exc),
            )
            result.status = "provider_error"
            return result

        try:
            obj = parse_json_response(content)
        except json.JSONDecodeError as exc:
            log_event(
                logger,
                "JSON parse failed, using defaults",
                level=logging.WARNING,
                event="classify_parse_error",
                title=item.title,
                error=str(exc),
            )
            result.status = "parse_error"
            return result

        fields = validate_classification(obj, self.cfg.regions)
        result.summary = fields["summary"] or result.summary
        result.region = fields["region"] or result.region
        result.tag = fields["tag"] or result.tag
        result.tag_variant = fields["tag_variant"] or result.tag_variant
        if foreign:
            result.translated_title = fields["translated_title"] or item.title
        return result

    async def translate_body(self, item: RawFeedItem, article: ScrapedArticle) -> str | None:
        """Translate the article body for foreign sources.

        Returns:
            Paragraph markup of the translation, or None when the item is not
            foreign, the text is too short, or translation failed
        """
        if not self.is_foreign(item):
            return None
        if len(article.plain_text) <= self.cfg.translate_min_chars:
            return None
        try:
            return await self._translate(article)
        except TranslationError as exc:
            log_event(
                logger,
                "Translation failed, keeping original content",
                level=logging.WARNING,
                event="translate_error",
                title=item.title,
                error=str(exc),
            )
            return None

    async def _translate(self, article: ScrapedArticle) -> str:
        prompt = build_translate_prompt(article)
        try:
            content = await self._complete(prompt, self.cfg.translate_max_tokens, "translate")
        except ClassificationError as exc:
            raise TranslationError(str(exc)) from exc
        markup = paragraphs_to_markup(content)
        if not markup:
            raise TranslationError("empty translation")
        logger.info("Content translated (%d chars)", len(markup))
        return markup

    async def _complete(self, prompt: str, max_tokens: int, event: str) -> str:
        try:
            return await self.provider.complete(prompt, max_tokens, event=event)
        except (httpx.HTTPError, ValueError) as exc:
            raise ClassificationError(f"{type(exc).__name__}: {exc}") from exc


def paragraphs_to_markup(text: str) -> str:
    """Wrap blank-line separated paragraphs in <p> tags.

    Examples:
        >>> paragraphs_to_markup("First.\\n\\n  \\n\\nSecond.")
        '<p>First.</p>\\n<p>Second.</p>'
    """
    paragraphs = [part.strip() for part in (text or "").strip().split("\n\n")]
    return "\n".join(f"<p>{escape(part, quote=False)}</p>" for part in paragraphs if part)
