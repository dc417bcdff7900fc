"""Abstract interface for text-completion model providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...utils.logging import log_event, redact_text, truncate_text


class CompletionProvider(ABC):
    """Provider interface: one prompt in, one text completion out.

    Implementations raise ``httpx.HTTPError`` on transport or status errors
    and return "" when the response carries no text.
    """

    name = "base"

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError(f"Missing API key for provider {self.name} ({cfg.api_key_env})")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger
        self._transport = transport

    @abstractmethod
    async def complete(self, prompt: str, max_tokens: int, event: str = "llm_completion") -> str:
        """Return the model's text completion for a single user prompt."""
        raise NotImplementedError

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self._transport,
        )

    def _log_llm_response(self, event: str, status: str, content: str, prompt: str) -> None:
        if self.llm_logger is None:
            return
        detail = self.log_cfg.llm_log_detail
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": event,
            "status": status,
            "provider": self.name,
            "model": self.cfg.model,
        }
        if detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        if detail != "summary_only":
            payload["raw_response"] = truncate_text(redact_text(content, redaction))
        log_event(self.llm_logger, "LLM response", **payload)
