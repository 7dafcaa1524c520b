"""RSS 2.0 serialization of feed items."""

import logging
import re
from datetime import timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Sequence

from lxml import etree

from common.local_io import write_text_atomic
from generate_feed.models import FeedItem, FeedMetadata

logger = logging.getLogger(__name__)

GENERATOR = "generate-feed"

NSMAP = {
    "dc": "http://purl.org/dc/elements/1.1/",
    "content": "http://purl.org/rss/1.0/modules/content/",
    "atom": "http://www.w3.org/2005/Atom",
}
ATOM_LINK = f"{{{NSMAP['atom']}}}link"

# Characters outside the XML 1.0 Char production, plus lone surrogates
INVALID_XML_CHARS_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _rfc822(dt) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def _text(parent, tag: str, value, cdata: bool = False):
    text = INVALID_XML_CHARS_RE.sub("", str(value))
    element = etree.SubElement(parent, tag)
    # A CDATA section cannot contain its own terminator
    element.text = etree.CDATA(text) if cdata and "]]>" not in text else text
    return element


def build_rss(items: Sequence[FeedItem], metadata: FeedMetadata) -> str:
    """Render items as an RSS 2.0 document.

    lastBuildDate is the newest item date, so identical input renders
    identical output.
    """
    rss = etree.Element("rss", nsmap=NSMAP, version="2.0")
    channel = etree.SubElement(rss, "channel")

    _text(channel, "title", metadata.title, cdata=True)
    _text(channel, "description", metadata.description, cdata=True)
    _text(channel, "link", metadata.site_url)
    _text(channel, "generator", GENERATOR)
    if items:
        newest = max(item.published_at for item in items)
        _text(channel, "lastBuildDate", _rfc822(newest))
    if metadata.feed_url:
        etree.SubElement(
            channel,
            ATOM_LINK,
            href=metadata.feed_url,
            rel="self",
            type="application/rss+xml",
        )
    _text(channel, "language", metadata.language)
    _text(channel, "ttl", metadata.ttl)

    for item in items:
        entry = etree.SubElement(channel, "item")
        _text(entry, "title", item.title, cdata=True)
        _text(entry, "description", item.description, cdata=True)
        _text(entry, "link", item.url)
        guid = _text(entry, "guid", item.guid)
        guid.set("isPermaLink", "false")
        _text(entry, "pubDate", _rfc822(item.published_at))

    xml = etree.tostring(rss, pretty_print=True, xml_declaration=True, encoding="UTF-8")
    return xml.decode("utf-8")


def write_feed(items: Sequence[FeedItem], metadata: FeedMetadata, output_path: str | Path) -> Path:
    """Render and atomically write the feed."""
    xml = build_rss(items, metadata)
    path = write_text_atomic(output_path, xml)
    logger.info("Wrote %d items to %s", len(items), path)
    return path
