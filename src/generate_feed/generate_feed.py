"""Build feed items from the official channel's list page."""

import html
import logging
from functools import partial
from typing import Any, Callable, Optional

from generate_feed.classify.classify import ONE_IMAGE_TITLE_PREFIX_RE, filter_articles, route_articles
from generate_feed.config import FeedConfig
from generate_feed.describe.describe import extract_description
from generate_feed.errors import SecondaryFetchError
from generate_feed.fetch_page.extract_payload import extract_payload
from generate_feed.fetch_page.fetch_page import fetch_page
from generate_feed.flat_graph.flat_graph import load_article_list
from generate_feed.models import FeedItem, RoutedArticle
from generate_feed.normalize.normalize import (
    article_date,
    article_title,
    article_type,
    format_id,
    normalize_image_url,
    primary_id,
    sort_timestamp,
)
from generate_feed.one_image.one_image import resolve_main_image

logger = logging.getLogger(__name__)

GUID_PREFIX = "xchuxing"

Fetch = Callable[[str], str]


def select_articles(articles: list[Any], max_items: int) -> list[dict[str, Any]]:
    """Drop empty entries, sort newest first by `created_at`, keep `max_items`."""
    present = [article for article in articles if article and isinstance(article, dict)]
    ordered = sorted(present, key=sort_timestamp, reverse=True)
    return ordered[: max(1, max_items)]


def build_guid(article: dict[str, Any], url: str) -> str:
    pid = primary_id(article)
    if not pid:
        return url
    return f"{GUID_PREFIX}:{article_type(article) or 0}:{format_id(pid)}"


def append_image(description: str, image_url: str) -> str:
    if not image_url or image_url in description:
        return description
    return f'{description}<br><img src="{html.escape(image_url)}">'


def build_feed_item(routed: RoutedArticle, fetch_secondary: Optional[Fetch] = None) -> FeedItem:
    article = routed.article
    title = article_title(article)
    description = extract_description(article)
    image_url = normalize_image_url(article.get("cover_path") or article.get("cover"))

    # Matched on the title alone, so a video record with this prefix qualifies too
    if ONE_IMAGE_TITLE_PREFIX_RE.match(title) and fetch_secondary is not None:
        try:
            extracted = resolve_main_image(routed.url, fetch_secondary)
        except SecondaryFetchError as e:
            logger.warning("Keeping cover image for %s: %s", routed.url, e)
            extracted = ""
        if extracted and extracted not in description:
            image_url = extracted

    return FeedItem(
        title=title,
        description=append_image(description, image_url),
        url=routed.url,
        guid=build_guid(article, routed.url),
        published_at=article_date(article),
    )


def build_feed_items(
    articles: list[Any],
    config: FeedConfig,
    fetch_secondary: Optional[Fetch] = None,
) -> list[FeedItem]:
    """Sort, cap, classify, filter and normalize raw list records."""
    selected = select_articles(articles, config.max_items)
    logger.info("Selected %d of %d list entries", len(selected), len(articles))

    routed = route_articles(selected, config.source_url)
    publishable = filter_articles(routed, config.short_news_policy)
    logger.info("%d entries publishable", len(publishable))

    # Secondary pages are fetched one at a time, in feed order
    return [build_feed_item(item, fetch_secondary) for item in publishable]


def generate_feed(config: FeedConfig, fetch: Optional[Fetch] = None) -> list[FeedItem]:
    """
    Fetch the list page and return its publishable items, newest first.

    Raises:
        TransientIOError: If the list page could not be fetched
        MalformedGraphError: If the embedded payload is missing or malformed
        ContentNotFoundError: If the payload has no article list
    """
    if fetch is None:
        fetch = partial(
            fetch_page,
            timeout_ms=config.timeout_ms,
            user_agent=config.user_agent,
            retries=config.retries,
            retry_base_delay_ms=config.retry_base_delay_ms,
        )
        fetch_secondary = partial(
            fetch_page,
            timeout_ms=config.timeout_ms,
            user_agent=config.user_agent,
            retries=0,
        )
    else:
        fetch_secondary = fetch

    logger.info("Fetching %s", config.source_url)
    page_html = fetch(config.source_url)
    cells = extract_payload(page_html)
    articles = load_article_list(cells)

    items = build_feed_items(articles, config, fetch_secondary)
    logger.info("Built %d feed items", len(items))
    return items
