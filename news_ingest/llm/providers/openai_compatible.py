"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

from typing import Any

import httpx

from ..tracing import record_span_error, set_span_output, start_span
from .base import CompletionProvider

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAICompatibleProvider(CompletionProvider):
    """Provider for any endpoint speaking the OpenAI chat completions API."""

    name = "openai"

    async def complete(self, prompt: str, max_tokens: int, event: str = "llm_completion") -> str:
        payload = {
            "model": self.cfg.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.cfg.temperature,
            "max_tokens": max_tokens,
        }
        with start_span(
            f"openai.{event}",
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
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with self._client() as client:
            resp = await client.post(f"{base_url}/chat/completions", headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""
