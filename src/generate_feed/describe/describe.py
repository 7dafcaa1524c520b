"""Display description for a raw list record."""

from typing import Any

MAX_SHORT_CONTENT_LINES = 5
LINE_BREAK = "<br>"


def _stripped(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def extract_description(article: Any) -> str:
    """
    Build an HTML description from the first usable source.

    Order:
    1. `summary` string
    2. `short_content` string
    3. `short_content` sub-entries, up to five "title：content" lines

    Returns '' if nothing matches.
    """
    if not isinstance(article, dict):
        return ""

    summary = _stripped(article.get("summary"))
    if summary:
        return summary

    short = article.get("short_content")
    if isinstance(short, str):
        return short.strip()

    if isinstance(short, list):
        lines = []
        for entry in short:
            if not isinstance(entry, dict):
                continue
            title = _stripped(entry.get("title"))
            content = _stripped(entry.get("content"))
            line = f"{title}：{content}" if title and content else content or title
            if line:
                lines.append(line)
            if len(lines) >= MAX_SHORT_CONTENT_LINES:
                break
        return LINE_BREAK.join(lines)

    return ""
