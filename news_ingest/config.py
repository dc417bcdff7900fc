"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: Language-model provider settings
- FetchConfig: HTTP fetching settings shared by feeds, redirects and pages
- ResolveConfig: Aggregator redirect resolution
- ScrapeConfig: Article scraping and content extraction
- ClassifyConfig: Classification/translation defaults and thresholds
- DedupConfig: Near-duplicate title window
- FilterConfig: Optional keyword/date filters on feed items
- RunConfig: Per-run batch cap
- StoreConfig: Persisted store (Supabase) settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the language-model provider.

    Attributes:
        name: Provider name ("openai", "openai_compatible" or "gemini")
        model: Model identifier
        api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API (provider default if unset)
        api_key: Optional inline API key (overrides env var)
        temperature: Sampling temperature for every call
        timeout_seconds: HTTP timeout for a single completion call
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str | None = None
    api_key: str | None = None
    temperature: float = 0.3
    timeout_seconds: float = 60.0
    trust_env: bool = True


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        concurrency: Maximum number of feeds or items processed at once
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    concurrency: int = 4
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class ResolveConfig:
    """Configuration for aggregator link resolution.

    Attributes:
        enabled: If False, feed links are used directly as canonical URLs
        aggregator_hosts: Hosts whose links are redirects to the real article
        url_param: Query parameter that may carry the embedded article URL
    """

    enabled: bool = True
    aggregator_hosts: list[str] = field(default_factory=lambda: ["news.google.com"])
    url_param: str = "url"


@dataclass
class ScrapeConfig:
    """Configuration for article scraping.

    Attributes:
        enabled: If False, trust the RSS-embedded content instead of fetching the page
        strategies: Ordered container strategies ("article", "main", "content_class", "readability")
        blocked_image_domains: Image hosts never used as the representative image
        min_paragraph_chars: Paragraphs inside the container must be longer than this
        fallback_trigger_chars: Below this markup length, sweep all page paragraphs
        fallback_paragraph_chars: Paragraphs in the sweep must be longer than this
        plain_text_max_chars: Cap for the plain-text projection sent to the model
        min_content_chars: Content gate threshold for the structured markup
    """

    enabled: bool = True
    strategies: list[str] = field(
        default_factory=lambda: ["article", "main", "content_class", "readability"]
    )
    blocked_image_domains: list[str] = field(default_factory=lambda: ["googleusercontent.com"])
    min_paragraph_chars: int = 20
    fallback_trigger_chars: int = 500
    fallback_paragraph_chars: int = 30
    plain_text_max_chars: int = 3000
    min_content_chars: int = 300


@dataclass
class ClassifyConfig:
    """Configuration for classification and translation.

    Attributes:
        publish_language: Language records are published in; other sources are translated
        regions: Closed set of region labels the model may return
        default_region: Region used when the model gives none or an unknown one
        default_tag: Coarse tag used when the model gives none
        default_tag_variant: Sub-tag used when the model gives none
        summary_fallback_chars: Length of the title prefix used as fallback summary
        classify_max_tokens: Output token cap for the classification call
        translate_min_chars: Plain text must be longer than this to be translated
        translate_max_tokens: Output token cap for the translation call
    """

    publish_language: str = "zh"
    regions: list[str] = field(default_factory=lambda: ["Taiwan", "Asia", "Global"])
    default_region: str = "Taiwan"
    default_tag: str = "再生能源"
    default_tag_variant: str = "General"
    summary_fallback_chars: int = 100
    classify_max_tokens: int = 400
    translate_min_chars: int = 100
    translate_max_tokens: int = 2000


@dataclass
class DedupConfig:
    """Configuration for near-duplicate detection.

    Attributes:
        window_days: How many days of persisted titles are compared against
    """

    window_days: int = 30


@dataclass
class FilterConfig:
    """Optional filters applied to fetched feed items.

    Attributes:
        keywords: Keep only items whose title or excerpt contains one of these
        published_after: ISO 8601 date; older items are dropped
    """

    keywords: list[str] = field(default_factory=list)
    published_after: str | None = None


@dataclass
class RunConfig:
    """Configuration for a single pipeline run.

    Attributes:
        batch_size: Maximum number of candidates fully processed per run
        dry_run: If True, everything runs except the final upsert
    """

    batch_size: int = 5
    dry_run: bool = False


@dataclass
class StoreConfig:
    """Configuration for the Supabase-backed store.

    Attributes:
        url_env: Environment variable holding the Supabase project URL
        key_env: Environment variable holding the service-role key
        url: Optional inline project URL
        key: Optional inline key
        news_table: Table receiving news records
        sources_table: Table listing feed sources
        in_chunk_size: Maximum number of keys per "in" query
    """

    url_env: str = "SUPABASE_URL"
    key_env: str = "SUPABASE_SERVICE_ROLE_KEY"
    url: str | None = None
    key: str | None = None
    news_table: str = "news"
    sources_table: str = "rss_sources"
    in_chunk_size: int = 100


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        log_dir: Directory receiving log files
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("summary_only", "response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    log_dir: str = "logs"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections.

    ``sources`` optionally lists feeds inline (dicts with name, url, language,
    enabled); when empty the store's source table is used.
    """

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)
    classify: ClassifyConfig = field(default_factory=ClassifyConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    run: RunConfig = field(default_factory=RunConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)
    sources: list[dict[str, Any]] = field(default_factory=list)


_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "fetch": FetchConfig,
    "resolve": ResolveConfig,
    "scrape": ScrapeConfig,
    "classify": ClassifyConfig,
    "dedup": DedupConfig,
    "filter": FilterConfig,
    "run": RunConfig,
    "store": StoreConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    A fresh AppConfig is built on every call so CLI overrides never leak
    between runs.
    """
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown top-level keys are ignored; unknown keys inside a section raise
    TypeError from the dataclass constructor.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    sections = {name: cls(**(data.get(name) or {})) for name, cls in _SECTIONS.items()}
    return AppConfig(sources=list(data.get("sources") or []), **sections)


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)


def get_store_credentials(cfg: StoreConfig) -> tuple[str | None, str | None]:
    """Get Supabase URL and key from inline config or environment variables."""
    url = cfg.url or os.getenv(cfg.url_env)
    key = cfg.key or os.getenv(cfg.key_env) or os.getenv("SUPABASE_KEY")
    return url, key
