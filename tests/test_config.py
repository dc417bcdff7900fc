"""Tests for YAML configuration loading."""

from __future__ import annotations

from news_ingest.config import AppConfig, get_api_key, get_store_credentials, load_config, ProviderConfig, StoreConfig


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert isinstance(cfg, AppConfig)
    assert cfg.run.batch_size == 5
    assert cfg.dedup.window_days == 30
    assert cfg.classify.regions == ["Taiwan", "Asia", "Global"]
    assert cfg.scrape.min_content_chars == 300
    assert cfg.store.news_table == "news"
    assert cfg.sources == []


def test_load_config_returns_fresh_instances():
    first = load_config(None)
    first.run.batch_size = 99
    first.scrape.strategies.append("custom")

    second = load_config(None)

    assert second.run.batch_size == 5
    assert "custom" not in second.scrape.strategies


def test_load_config_merges_yaml_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
provider:
  name: gemini
  model: gemini-2.0-flash
run:
  batch_size: 10
resolve:
  enabled: false
sources:
  - name: CleanTechnica
    url: https://cleantechnica.com/feed/
    language: en
unknown_section:
  anything: 1
""",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.provider.name == "gemini"
    assert cfg.provider.temperature == 0.3
    assert cfg.run.batch_size == 10
    assert cfg.resolve.enabled is False
    assert cfg.resolve.aggregator_hosts == ["news.google.com"]
    assert cfg.sources == [
        {"name": "CleanTechnica", "url": "https://cleantechnica.com/feed/", "language": "en"}
    ]


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == AppConfig()


def test_get_api_key_prefers_inline_value(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert get_api_key(ProviderConfig()) == "env-key"
    assert get_api_key(ProviderConfig(api_key="inline")) == "inline"


def test_get_store_credentials_reads_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")

    assert get_store_credentials(StoreConfig()) == ("https://project.supabase.co", "anon-key")
    assert get_store_credentials(StoreConfig(key="inline"))[1] == "inline"
