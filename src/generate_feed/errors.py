"""Error hierarchy for feed generation.

Fatal errors abort the run and leave the previously written feed in place.
SecondaryFetchError is the only non-fatal one; the assembler catches it and
keeps the record's own cover image.
"""

from typing import Optional


class FeedError(Exception):
    """Base exception for all feed generation errors."""

    category = "FeedError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransientIOError(FeedError):
    """Network error, timeout or unacceptable status while fetching a page."""

    category = "TransientIO"

    def __init__(self, message: str, url: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedGraphError(FeedError):
    """Embedded data script missing or not the expected flat-array shape."""

    category = "MalformedGraph"


class ContentNotFoundError(FeedError):
    """No list-bearing container found in the deserialized graph."""

    category = "ContentNotFound"


class SecondaryFetchError(FeedError):
    """Fetching or parsing a single-image page failed."""

    category = "SecondaryFetchFailure"

    def __init__(self, message: str, url: str) -> None:
        self.url = url
        super().__init__(message)
