"""Configuration loader for generate_feed."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from common.config import load_yaml
from generate_feed.models import FeedMetadata

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = "https://www.xchuxing.com/official"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

SHORT_NEWS_POLICIES = ("exclude", "dedupe")

# Environment variable for each config field
ENV_VARS = {
    "source_url": "SOURCE_URL",
    "feed_url": "FEED_URL",
    "site_url": "SITE_URL",
    "output_path": "OUTPUT_PATH",
    "max_items": "MAX_ITEMS",
    "timeout_ms": "TIMEOUT_MS",
    "retries": "RETRIES",
    "retry_base_delay_ms": "RETRY_BASE_DELAY_MS",
    "user_agent": "USER_AGENT",
    "short_news_policy": "SHORT_NEWS_POLICY",
    "feed_title": "FEED_TITLE",
    "feed_description": "FEED_DESCRIPTION",
    "language": "FEED_LANGUAGE",
    "ttl": "FEED_TTL",
}


@dataclass
class FeedConfig:
    source_url: str = DEFAULT_SOURCE_URL
    feed_url: str = ""
    site_url: str = ""  # empty means source_url
    output_path: str = "feed.xml"
    max_items: int = 50
    timeout_ms: int = 15000
    retries: int = 2
    retry_base_delay_ms: int = 800
    user_agent: str = DEFAULT_USER_AGENT
    short_news_policy: str = "exclude"  # "exclude" or "dedupe"
    feed_title: str = "新出行 - 官方频道"
    feed_description: str = "新出行官方频道最新资讯"
    language: str = "zh-CN"
    ttl: int = 60

    def __post_init__(self) -> None:
        if not self.site_url:
            self.site_url = self.source_url
        self.max_items = max(1, self.max_items)
        if self.short_news_policy not in SHORT_NEWS_POLICIES:
            raise ValueError(
                f"Invalid short_news_policy {self.short_news_policy!r}; "
                f"expected one of {', '.join(SHORT_NEWS_POLICIES)}"
            )

    def feed_metadata(self) -> FeedMetadata:
        return FeedMetadata(
            title=self.feed_title,
            description=self.feed_description,
            site_url=self.site_url,
            feed_url=self.feed_url,
            language=self.language,
            ttl=self.ttl,
        )


def _coerce(name: str, raw: Any, default: Any) -> Any:
    """Convert a raw setting to the type of its default, falling back on failure."""
    if isinstance(default, int):
        try:
            return int(str(raw).strip())
        except ValueError:
            logger.warning("Invalid %s=%r; falling back to %s", name, raw, default)
            return default
    return str(raw).strip()


def load_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> FeedConfig:
    """Load configuration from defaults, an optional YAML file and the environment.

    Args:
        config_path: YAML file with lower-case field names. If None, uses the
                     FEED_CONFIG env var when set.
        environ: Environment mapping (default: os.environ)

    Returns:
        Loaded FeedConfig object
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = environ.get("FEED_CONFIG") or None

    defaults = FeedConfig()
    values: dict[str, Any] = {}

    if config_path is not None:
        data = load_yaml(Path(config_path))
        known = {f.name for f in fields(FeedConfig)}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            if value is None:
                continue
            values[key] = _coerce(key, value, getattr(defaults, key))

    for name, env_var in ENV_VARS.items():
        raw = environ.get(env_var)
        if raw is None or not raw.strip():
            continue
        values[name] = _coerce(env_var, raw, getattr(defaults, name))

    # site_url default tracks the final source_url, not the built-in one
    if "site_url" not in values:
        values["site_url"] = ""

    return FeedConfig(**values)
