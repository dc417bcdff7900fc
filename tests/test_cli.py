"""Tests for the command-line interface wiring."""

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from news_ingest import cli
from news_ingest.core.types import RunResult


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger("news_ingest")
    logger.handlers = []
    logger.propagate = True


def _patch(monkeypatch, result: RunResult) -> dict:
    captured: dict = {}

    def fake_run_pipeline(cfg, store, provider):  # noqa: ANN001
        captured["cfg"] = cfg
        return result

    monkeypatch.setattr(cli, "create_provider", lambda *args, **kwargs: object())
    monkeypatch.setattr(cli.SupabaseNewsStore, "from_config", classmethod(lambda cls, cfg: object()))
    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)
    return captured


def test_run_applies_overrides_and_prints_result(monkeypatch):
    captured = _patch(monkeypatch, RunResult(success=True, processed=0, message="No new items"))

    outcome = CliRunner().invoke(
        cli.app,
        ["run", "--batch-size", "3", "--no-resolve", "--no-scrape", "--dry-run", "--no-log-file"],
    )

    assert outcome.exit_code == 0, outcome.output
    cfg = captured["cfg"]
    assert cfg.run.batch_size == 3
    assert cfg.resolve.enabled is False
    assert cfg.scrape.enabled is False
    assert cfg.run.dry_run is True
    assert json.loads(outcome.output)["message"] == "No new items"


def test_run_exits_non_zero_on_failure(monkeypatch):
    _patch(monkeypatch, RunResult(success=False, error="Upsert failed", detail="boom"))

    outcome = CliRunner().invoke(cli.app, ["run", "--no-log-file"])

    assert outcome.exit_code == 1
    assert json.loads(outcome.output) == {"error": "Upsert failed", "detail": "boom"}


def test_sources_lists_inline_sources(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "sources:\n"
        "  - name: CleanTechnica\n"
        "    url: https://cleantechnica.com/feed/\n"
        "    language: en\n",
        encoding="utf-8",
    )

    outcome = CliRunner().invoke(cli.app, ["sources", "--config", str(path)])

    assert outcome.exit_code == 0, outcome.output
    assert "CleanTechnica" in outcome.output
