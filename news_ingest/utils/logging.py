"""
Logging setup for ingestion runs.

The console gets a rich handler with plain messages; the optional log
file gets one JSON object per line carrying every ``extra`` field passed
through :func:`log_event`. Model prompts and responses go to a separate
JSONL logger so they can be kept out of the run log.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


ROOT_LOGGER = "news_ingest"
LLM_LOGGER = "news_ingest_llm"

_URL_RE = re.compile(r"https?://\S+")
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message"}


def setup_logging(cfg: LoggingConfig) -> logging.Logger:
    """Configure the package logger from ``cfg`` and return it."""
    level = _level_from_string(cfg.level)
    handlers: list[logging.Handler] = []
    if cfg.console:
        console = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console)
    if cfg.file:
        formatter = JsonlFormatter() if cfg.format == "jsonl" else logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        handlers.append(_file_handler(Path(cfg.log_dir) / cfg.filename, formatter))
    return _install(ROOT_LOGGER, level, handlers)


def setup_llm_logger(cfg: LoggingConfig) -> logging.Logger | None:
    """Return a JSONL logger for model traffic, or None when disabled."""
    if not cfg.llm_log_enabled:
        return None
    handler = _file_handler(Path(cfg.log_dir) / cfg.llm_log_file, JsonlFormatter())
    return _install(LLM_LOGGER, _level_from_string(cfg.level), [handler])


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log ``message`` with structured fields.

    Fields other than ``event`` are echoed as ``key=value`` pairs so the
    console line stays readable; all of them reach the JSONL file.
    """
    if logger is None:
        return
    details = " ".join(f"{k}={v}" for k, v in fields.items() if k != "event")
    if details:
        message = f"{message} ({details})"
    logger.log(level, message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply a redaction mode: ``none``, ``redact_urls`` or ``redact_content``."""
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in record.__dict__.items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _install(name: str, level: int, handlers: list[logging.Handler]) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.FileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
