"""Canonicalize loosely-typed fields of raw list records."""

import re
from datetime import datetime
from typing import Any, Optional

from common.datetime import parse_timestamp, to_number

SITE_ORIGIN = "https://www.xchuxing.com"
IMAGE_CDN = "https://s1.xchuxing.com"

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def _clean_string(value: Any) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.strip()


def normalize_image_url(value: Any) -> str:
    """Return an absolute CDN URL for an image path ('' for empty or non-string input)."""
    path = _clean_string(value)
    if not path:
        return ""
    if ABSOLUTE_URL_RE.match(path):
        return path
    if path.startswith("/"):
        path = path[1:]
    if path.startswith("article/"):
        return f"{IMAGE_CDN}/xchuxing/{path}"
    return f"{IMAGE_CDN}/{path}"


def normalize_page_url(value: Any) -> str:
    """Root-relative paths get the site origin; absolute and other values pass through."""
    url = _clean_string(value)
    if not url:
        return ""
    if ABSOLUTE_URL_RE.match(url):
        return url
    if url.startswith("/"):
        return f"{SITE_ORIGIN}{url}"
    return url


def article_title(article: Any) -> str:
    if not isinstance(article, dict):
        return ""
    title = article.get("title")
    if title is None:
        return ""
    if isinstance(title, str):
        return title.strip()
    if isinstance(title, bool):
        return "true" if title else "false"
    if isinstance(title, float) and title.is_integer():
        return str(int(title))
    return str(title).strip()


def article_date(article: Any) -> datetime:
    """Publish date from `created_at`, falling back to `updated_at`."""
    if not isinstance(article, dict):
        return parse_timestamp(None)
    value = article.get("created_at")
    if value is None:
        value = article.get("updated_at")
    return parse_timestamp(value)


def primary_id(article: Any) -> Any:
    """`object_id` if present, else `id`."""
    if not isinstance(article, dict):
        return None
    value = article.get("object_id")
    if value is None:
        value = article.get("id")
    return value


def format_id(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def article_type(article: Any) -> Optional[int]:
    """Numeric content-type discriminator, or None when absent or not numeric."""
    if not isinstance(article, dict):
        return None
    number = to_number(article.get("type"))
    if number is None or not number.is_integer():
        return None
    return int(number)


def raw_article_url(article: Any) -> str:
    if not isinstance(article, dict):
        return ""
    return normalize_page_url(article.get("url"))


def sort_timestamp(article: Any) -> float:
    """`created_at` as a number for ordering; missing or invalid sorts as 0."""
    if not isinstance(article, dict):
        return 0.0
    number = to_number(article.get("created_at"))
    return number if number is not None else 0.0
