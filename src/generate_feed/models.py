"""Data models for generate_feed pipeline stage."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ContentType(Enum):
    """Logical content type of a raw list record."""

    ARTICLE = "article"
    VIDEO = "video"
    NUMBER_POWER_BRIEF = "number_power_brief"
    SHORT_NEWS_BRIEF = "short_news_brief"
    SINGLE_IMAGE_FEATURE = "single_image_feature"

    @property
    def is_brief(self) -> bool:
        return self in (ContentType.NUMBER_POWER_BRIEF, ContentType.SHORT_NEWS_BRIEF)


@dataclass
class RoutedArticle:
    """Raw list record paired with its resolved URL and content type."""
    article: dict[str, Any]
    url: str
    content_type: ContentType


@dataclass
class FeedItem:
    """Normalized, publishable feed entry."""
    title: str
    description: str
    url: str
    guid: str
    published_at: datetime


@dataclass
class FeedMetadata:
    """Channel-level fields of the generated feed."""
    title: str
    description: str
    site_url: str
    feed_url: str = ""
    language: str = "zh-CN"
    ttl: int = 60
