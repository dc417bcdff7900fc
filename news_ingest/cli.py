"""
Command-line interface for the news ingestion pipeline.

Uses Typer to provide a CLI with options for the settings most often
changed per run. Supports loading .env files for API keys and store
credentials.
"""

from __future__ import annotations

from pathlib import Path
import json

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
import typer

from .config import AppConfig, load_config
from .core.types import FeedSource
from .llm.providers.factory import create_provider
from .llm.tracing import flush, setup_langfuse
from .runner import run_pipeline
from .store.supabase_store import SupabaseNewsStore
from .utils.logging import setup_llm_logger, setup_logging

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None) -> AppConfig:
    load_dotenv()
    return load_config(str(config) if config else None)


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    batch_size: int | None = typer.Option(
        None, "--batch-size", help="Maximum number of items processed this run."
    ),
    no_resolve: bool = typer.Option(
        False, "--no-resolve", help="Use feed links directly instead of resolving redirects."
    ),
    no_scrape: bool = typer.Option(
        False, "--no-scrape", help="Use feed-embedded content instead of fetching pages."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Override provider API key (or set it in the environment / .env)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Run every stage except the final upsert."
    ),
):
    """Fetch feeds, process new items and upsert them into the news table.

    Prints the run outcome as JSON and exits non-zero if the run failed.
    """
    cfg = _load(config)

    if batch_size is not None:
        cfg.run.batch_size = batch_size
    if no_resolve:
        cfg.resolve.enabled = False
    if no_scrape:
        cfg.scrape.enabled = False
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    if api_key:
        cfg.provider.api_key = api_key
    if dry_run:
        cfg.run.dry_run = True

    setup_logging(cfg.logging)
    llm_logger = setup_llm_logger(cfg.logging)
    setup_langfuse(cfg.langfuse)

    try:
        provider = create_provider(cfg.provider, cfg.logging, llm_logger)
        store = SupabaseNewsStore.from_config(cfg.store)
    except ValueError as exc:
        console.print_json(json.dumps({"error": str(exc), "detail": None}, ensure_ascii=False))
        raise typer.Exit(code=2) from exc

    result = run_pipeline(cfg, store, provider)
    console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))

    # Flush Langfuse traces before exit
    flush()

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def sources(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
):
    """List the enabled feed sources a run would fetch."""
    cfg = _load(config)
    if cfg.sources:
        entries = [FeedSource(**entry) for entry in cfg.sources]
    else:
        entries = SupabaseNewsStore.from_config(cfg.store).list_sources()

    table = Table("Name", "Language", "URL")
    for source in entries:
        if source.enabled:
            table.add_row(source.name, source.language, source.url)
    console.print(table)


if __name__ == "__main__":
    app()
