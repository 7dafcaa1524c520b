"""Extract the embedded flat-graph payload from a rendered page."""

import json
import logging
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from generate_feed.errors import MalformedGraphError

logger = logging.getLogger(__name__)

PAYLOAD_SCRIPT_ID = "__NUXT_DATA__"


def extract_script_text(page_html: str, script_id: str) -> str | None:
    """Return the text of the script element with the given id, if present."""
    if not page_html or not page_html.strip():
        return None
    try:
        tree = lxml_html.fromstring(page_html)
    except (etree.LxmlError, ValueError):
        return None
    nodes = tree.xpath("//script[@id=$script_id]", script_id=script_id)
    if not nodes:
        return None
    return nodes[0].text


def extract_payload(page_html: str) -> list[Any]:
    """
    Parse the embedded data script into its top-level cell list.

    Raises:
        MalformedGraphError: If the script is missing, empty, not JSON or not a list
    """
    text = extract_script_text(page_html, PAYLOAD_SCRIPT_ID)
    if not text or not text.strip():
        raise MalformedGraphError(f"Could not find {PAYLOAD_SCRIPT_ID} script")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedGraphError(f"Invalid JSON in {PAYLOAD_SCRIPT_ID}: {e}") from e

    if not isinstance(data, list):
        raise MalformedGraphError(
            f"Expected an array in {PAYLOAD_SCRIPT_ID}, got {type(data).__name__}"
        )

    logger.info("Extracted payload with %d cells", len(data))
    return data
