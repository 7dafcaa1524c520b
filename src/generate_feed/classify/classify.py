"""Content-type classification, URL routing and publishability rules."""

import logging
import re
from typing import Any, Iterable, Optional

from generate_feed.models import ContentType, RoutedArticle
from generate_feed.normalize.normalize import (
    SITE_ORIGIN,
    article_title,
    article_type,
    format_id,
    normalize_page_url,
    primary_id,
    raw_article_url,
)

logger = logging.getLogger(__name__)

VIDEO_TYPE = 2
NUMBER_POWER_TYPE = 12
SHORT_NEWS_TYPE = 13
BRIEF_TYPES = (NUMBER_POWER_TYPE, SHORT_NEWS_TYPE)

SKIP_TITLE_PREFIX_RE = re.compile(r"^\s*(每日简报|数字力系列)")
VIDEO_TITLE_PREFIX_RE = re.compile(r"^\s*新出行视频")
ONE_IMAGE_TITLE_PREFIX_RE = re.compile(r"^\s*新出行一图")
VOTE_URL_RE = re.compile(r"/vote/\d+", re.IGNORECASE)
BRIEF_URL_RE = re.compile(r"/(number-power|short-news)/", re.IGNORECASE)
SHORT_NEWS_URL_RE = re.compile(r"/short-news/", re.IGNORECASE)
VOTE_TOKEN = "投票"


def classify(article: Any) -> ContentType:
    title = article_title(article)
    type_ = article_type(article)
    if type_ == VIDEO_TYPE or VIDEO_TITLE_PREFIX_RE.match(title):
        return ContentType.VIDEO
    if type_ == NUMBER_POWER_TYPE:
        return ContentType.NUMBER_POWER_BRIEF
    if type_ == SHORT_NEWS_TYPE:
        return ContentType.SHORT_NEWS_BRIEF
    if ONE_IMAGE_TITLE_PREFIX_RE.match(title):
        return ContentType.SINGLE_IMAGE_FEATURE
    return ContentType.ARTICLE


def build_item_url(article: Any, source_url: str) -> str:
    """Canonical page URL for a record, routed by its content type."""
    content_type = classify(article)
    pid = primary_id(article)
    raw_url = raw_article_url(article)

    if content_type is ContentType.VIDEO:
        if pid:
            return f"{SITE_ORIGIN}/video/{format_id(pid)}"
        return raw_url or source_url

    if content_type is ContentType.NUMBER_POWER_BRIEF:
        return f"{SITE_ORIGIN}/number-power/{format_id(pid)}" if pid else source_url
    if content_type is ContentType.SHORT_NEWS_BRIEF:
        return f"{SITE_ORIGIN}/short-news/{format_id(pid)}" if pid else source_url

    if raw_url:
        return raw_url
    if not pid:
        return source_url
    return f"{SITE_ORIGIN}/article/{format_id(pid)}"


def is_vote_url(url: Any) -> bool:
    if not url or not isinstance(url, str):
        return False
    return bool(VOTE_URL_RE.search(url))


def rejection_reason(article: Any, url: str, short_news_policy: str = "exclude") -> Optional[str]:
    """
    Return why a record is not publishable, or None to accept it.

    With the "dedupe" policy, short-news briefs are not rejected here; the
    batch-level check in `filter_articles` decides them.
    """
    if not article or not isinstance(article, dict):
        return "empty record"

    type_ = article_type(article)
    keep_short_news = short_news_policy == "dedupe" and type_ == SHORT_NEWS_TYPE
    if type_ == NUMBER_POWER_TYPE:
        return "number-power brief"
    if type_ == SHORT_NEWS_TYPE and not keep_short_news:
        return "short-news brief"

    title = article_title(article)
    if SKIP_TITLE_PREFIX_RE.match(title):
        return "skipped title prefix"

    normalized_url = normalize_page_url(url)
    raw_url = raw_article_url(article)
    if is_vote_url(normalized_url) or is_vote_url(raw_url):
        return "vote page"

    for candidate in (normalized_url, raw_url):
        if not BRIEF_URL_RE.search(candidate):
            continue
        if keep_short_news and SHORT_NEWS_URL_RE.search(candidate):
            continue
        return "brief url"

    if VOTE_TOKEN in title:
        return "vote title"

    return None


def should_include_article(article: Any, url: str, short_news_policy: str = "exclude") -> bool:
    return rejection_reason(article, url, short_news_policy) is None


def short_news_urls(article: Any) -> list[str]:
    """Normalized URLs of a short-news record's sub-entries."""
    if not isinstance(article, dict):
        return []
    entries = article.get("short_content")
    if not isinstance(entries, list):
        return []
    urls = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        url = normalize_page_url(entry.get("url"))
        if url:
            urls.append(url)
    return urls


def is_duplicate_short_news(article: Any, claimed_urls: set[str]) -> bool:
    """True when every sub-entry URL is already claimed (and there is at least one)."""
    urls = short_news_urls(article)
    return bool(urls) and all(url in claimed_urls for url in urls)


def route_articles(articles: Iterable[Any], source_url: str) -> list[RoutedArticle]:
    return [
        RoutedArticle(
            article=article,
            url=build_item_url(article, source_url),
            content_type=classify(article),
        )
        for article in articles
    ]


def filter_articles(routed: list[RoutedArticle], short_news_policy: str = "exclude") -> list[RoutedArticle]:
    """
    Keep publishable records, in order.

    Under the "dedupe" policy the claimed-URL set is built from the accepted
    non-brief records of this same (already sorted and truncated) batch.
    """
    accepted = []
    for item in routed:
        reason = rejection_reason(item.article, item.url, short_news_policy)
        if reason is not None:
            logger.debug("Skipping %s: %s", item.url, reason)
            continue
        accepted.append(item)

    if short_news_policy != "dedupe":
        return accepted

    claimed_urls = {item.url for item in accepted if not item.content_type.is_brief}
    results = []
    for item in accepted:
        if item.content_type is ContentType.SHORT_NEWS_BRIEF and is_duplicate_short_news(
            item.article, claimed_urls
        ):
            logger.debug("Skipping %s: short-news entries already covered", item.url)
            continue
        results.append(item)
    return results
