"""
News Ingest - RSS-to-database news pipeline with LLM classification.

This package fetches configured RSS/Atom feeds, resolves aggregator
redirects, scrapes article pages into clean structural markup, asks a
language model for a summary, region and tags (translating foreign
sources), drops near-duplicate stories and upserts the result into a
Supabase table keyed by article URL.

Main entry point is the CLI via `news-ingest run` command.

Example:
    $ news-ingest run -c config.yaml --batch-size 5
"""

__all__ = ["__version__", "run_pipeline", "AppConfig", "load_config", "RunResult"]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .core.types import RunResult
from .runner import run_pipeline
