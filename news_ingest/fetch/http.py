"""Shared async HTTP client construction."""

from __future__ import annotations

import httpx

from ..config import FetchConfig


def build_client(cfg: FetchConfig) -> httpx.AsyncClient:
    """Build the client used for feeds, redirect resolution and article pages.

    Redirects are not followed by default; callers opt in per request.
    """
    return httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        headers={
            "User-Agent": cfg.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        },
        follow_redirects=False,
        trust_env=cfg.trust_env,
    )
