"""Page fetching with retry."""

import logging
import time

import requests

from generate_feed.errors import TransientIOError

logger = logging.getLogger(__name__)

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def fetch_page(
    url: str,
    *,
    timeout_ms: int,
    user_agent: str,
    retries: int = 0,
    retry_base_delay_ms: int = 0,
) -> str:
    """
    Fetch a page body as text.

    Tries once plus `retries` more times, sleeping base * 2**attempt between
    attempts. Statuses outside 200..399 count as failures.

    Raises:
        TransientIOError: If every attempt failed
    """
    attempts = max(0, retries) + 1
    last_error: TransientIOError | None = None

    for attempt in range(attempts):
        try:
            return _get(url, timeout_ms, user_agent)
        except TransientIOError as e:
            last_error = e
            logger.warning("Fetch attempt %d/%d failed for %s: %s", attempt + 1, attempts, url, e)
            if attempt == attempts - 1:
                break
            delay_ms = retry_base_delay_ms * (2 ** attempt)
            if delay_ms > 0:
                time.sleep(delay_ms / 1000)

    raise last_error


def _get(url: str, timeout_ms: int, user_agent: str) -> str:
    try:
        response = requests.get(
            url,
            timeout=timeout_ms / 1000,
            headers={"User-Agent": user_agent, "Accept": ACCEPT_HTML},
        )
    except requests.RequestException as e:
        raise TransientIOError(f"Request failed: {e}", url=url) from e

    if not 200 <= response.status_code < 400:
        raise TransientIOError(
            f"Unexpected status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    # requests assumes ISO-8859-1 for text/* without a charset
    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = "utf-8"
    return response.text
