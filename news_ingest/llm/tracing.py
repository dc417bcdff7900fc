"""
Langfuse tracing for ingestion runs.

One span wraps the whole run and one wraps each model call, so prompt
changes can be compared against the classifications they produced.
Everything here is a no-op unless tracing is enabled, both keys are
available and the langfuse package is installed.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
import json
import logging
import os
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import redact_text, truncate_text

logger = logging.getLogger(__name__)


@dataclass
class _TracingState:
    client: Any = None
    cfg: LangfuseConfig | None = None


_STATE = _TracingState()


def setup_langfuse(cfg: LangfuseConfig) -> bool:
    """Initialize the Langfuse client. Returns True when tracing is active."""
    _STATE.cfg = cfg
    _STATE.client = None
    if not cfg.enabled:
        return False

    public_key = cfg.public_key or os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = cfg.secret_key or os.getenv("LANGFUSE_SECRET_KEY")
    if not (public_key and secret_key):
        logger.warning("Langfuse enabled but keys are missing, tracing disabled")
        return False
    try:
        from langfuse import Langfuse  # type: ignore
    except ImportError:
        logger.warning("Langfuse enabled but the langfuse package is not installed")
        return False

    _STATE.client = Langfuse(
        public_key=public_key,
        secret_key=secret_key,
        host=cfg.host or os.getenv("LANGFUSE_HOST"),
    )
    return True


def get_tracer():
    return _STATE.client


@contextmanager
def start_span(
    name: str,
    kind: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    """Open a span around the block, yielding None when tracing is off.

    Failures inside the tracing client never reach the caller.
    """
    client = _STATE.client
    if client is None:
        yield None
        return

    metadata = {"span.kind": kind}
    metadata.update(
        (key, value if isinstance(value, (str, int, float, bool)) else str(value))
        for key, value in (attributes or {}).items()
        if value is not None
    )
    with ExitStack() as stack:
        try:
            span = stack.enter_context(
                client.start_as_current_span(name=name, input=_payload(input_value), metadata=metadata)
            )
        except Exception:  # noqa: BLE001
            span = None
        yield span


def set_span_output(span: Any | None, output_value: Any) -> None:
    payload = _payload(output_value)
    if span is not None and payload is not None:
        _update(span, output=payload)


def record_span_error(span: Any | None, exc: Exception) -> None:
    if span is not None:
        _update(span, level="ERROR", status_message=str(exc))


def flush() -> None:
    """Send buffered traces before the process exits."""
    client = _STATE.client
    if client is None:
        return
    try:
        client.flush()
    except Exception:  # noqa: BLE001
        logger.debug("Langfuse flush failed", exc_info=True)


def _payload(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    cfg = _STATE.cfg
    if cfg is None:
        return text
    return truncate_text(redact_text(text, cfg.redaction), cfg.max_text_chars)


def _update(span: Any, **kwargs: Any) -> None:
    try:
        span.update(**kwargs)
    except Exception:  # noqa: BLE001
        logger.debug("Langfuse span update failed", exc_info=True)
