"""Google Gemini provider using the generateContent REST endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from ..tracing import record_span_error, set_span_output, start_span
from .base import CompletionProvider

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(CompletionProvider):
    """Gemini-backed completion provider."""

    name = "gemini"

    async def complete(self, prompt: str, max_tokens: int, event: str = "llm_completion") -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.cfg.temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        with start_span(
            f"gemini.{event}",
            kind="llm",
            input_value=prompt,
            attributes={"llm.model": self.cfg.model, "llm.provider": self.name},
        ) as span:
            try:
                data = await self._post(payload)
            except httpx.HTTPError as exc:
                record_span_error(span, exc)
                self._log_llm_response(event, "provider_error", str(exc), prompt)
                raise
            content = _extract_text(data)
            set_span_output(span, content)
            self._log_llm_response(event, "ok", content, prompt)
            return content

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        base_url = (self.cfg.base_url or DEFAULT_BASE_URL).rstrip("/")
        url = f"{base_url}/v1beta/models/{self.cfg.model}:generateContent"
        async with self._client() as client:
            resp = await client.post(url, params={"key": self.api_key}, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""

    # Thinking models interleave "thought" parts with the answer.
    answer: list[str] = []
    everything: list[str] = []
    for part in parts:
        if not isinstance(part, dict) or not part.get("text"):
            continue
        text = str(part["text"])
        everything.append(text)
        if not part.get("thought"):
            answer.append(text)
    return "".join(answer or everything)
