"""Local file I/O utilities."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_text_atomic(path: str | Path, text: str, encoding: str = "utf-8") -> Path:
    """
    Write text to a file so readers never see a partial write.

    The content goes to a temporary file next to the target, which is then
    renamed over it. The temporary file is removed if anything fails.

    Args:
        path: Destination file path
        text: Content to write
        encoding: Text encoding (default: utf-8)

    Returns:
        Path to the written file.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(text)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    logger.debug("Wrote %d characters to %s", len(text), target)
    return target
