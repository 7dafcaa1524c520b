"""Pick the main image of a single-image feature page."""

import logging
import re
from typing import Any, Callable, Optional

from lxml import etree
from lxml import html as lxml_html

from generate_feed.errors import SecondaryFetchError, TransientIOError
from generate_feed.normalize.normalize import normalize_image_url

logger = logging.getLogger(__name__)

FIGURE_IMAGES_XPATH = (
    '//figure[contains(concat(" ", normalize-space(@class), " "), " image ")]//img[@src]'
)
CONTENT_IMAGES_XPATH = (
    '//*[contains(concat(" ", normalize-space(@class), " "), " content ")]//img[@src]'
)

ICON_PATH_RE = re.compile(r"^/img/", re.IGNORECASE)
USER_PATH_RE = re.compile(r"/xchuxing/user/", re.IGNORECASE)
CAROUSEL_PATH_RE = re.compile(r"/xchuxing/carousel/", re.IGNORECASE)
ARTICLE_PATH_RE = re.compile(r"/xchuxing/article/", re.IGNORECASE)
RELATIVE_ARTICLE_PATH_RE = re.compile(r"^/?(?:xchuxing/)?article/", re.IGNORECASE)
ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_content_image(src: Any) -> bool:
    """True when an image path plausibly belongs to article content."""
    if not src or not isinstance(src, str):
        return False
    value = src.strip()
    if not value:
        return False
    if ICON_PATH_RE.search(value):
        return False
    if USER_PATH_RE.search(value) or CAROUSEL_PATH_RE.search(value):
        return False
    if ABSOLUTE_URL_RE.match(value):
        return bool(ARTICLE_PATH_RE.search(value))
    return bool(RELATIVE_ARTICLE_PATH_RE.match(value) or ARTICLE_PATH_RE.search(value))


def _dimension(node, primary: str, fallback: str) -> Optional[float]:
    raw = node.get(primary)
    if raw is None:
        raw = node.get(fallback)
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if value != value or value in (float("inf"), float("-inf")) or value <= 0:
        return None
    return value


def image_score(node) -> float:
    """Declared area, preferring data-width/data-height; 0 without usable dimensions."""
    width = _dimension(node, "data-width", "width")
    height = _dimension(node, "data-height", "height")
    if width is None or height is None:
        return 0.0
    return width * height


def extract_main_image_url(page_html: str) -> str:
    """
    Choose the main content image from a page.

    The largest figure image wins; the first figure image is kept when none
    declares dimensions. Falls back to the first content-area image.
    """
    try:
        tree = lxml_html.fromstring(page_html)
    except (etree.LxmlError, ValueError):
        return ""

    best_src = ""
    best_score = -1.0
    for node in tree.xpath(FIGURE_IMAGES_XPATH):
        src = node.get("src")
        if not is_content_image(src):
            continue
        score = image_score(node)
        if score > best_score:
            best_score = score
            best_src = src

    if best_src:
        return normalize_image_url(best_src)

    for node in tree.xpath(CONTENT_IMAGES_XPATH):
        src = node.get("src")
        if is_content_image(src):
            return normalize_image_url(src)

    return ""


def resolve_main_image(page_url: str, fetch: Callable[[str], str]) -> str:
    """
    Fetch a single-image feature page and return its main image URL ('' if none).

    Raises:
        SecondaryFetchError: If the page could not be fetched
    """
    try:
        page_html = fetch(page_url)
    except TransientIOError as e:
        raise SecondaryFetchError(f"Could not fetch single-image page: {e}", url=page_url) from e

    if not page_html or not page_html.strip():
        return ""

    image_url = extract_main_image_url(page_html)
    if image_url:
        logger.info("Resolved main image for %s: %s", page_url, image_url)
    return image_url
