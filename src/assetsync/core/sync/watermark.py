"""
Install watermark persistence.

The watermark is the instant of the last successful install, stored as
whole seconds since the Unix epoch on a single line of a hidden marker
file. Units modified after it are installed on the next run.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from assetsync.utils.fs import set_hidden

logger = logging.getLogger(__name__)

FIRST_RUN = 0


def read_watermark(path: Path) -> int:
    """
    Read the watermark.

    Returns:
        Seconds since the epoch, or 0 if the file is absent or unreadable.
    """
    if not path.exists():
        return FIRST_RUN

    try:
        first_line = path.read_text(encoding="utf-8").splitlines()[0]
        return int(first_line.strip())
    except (OSError, IndexError, ValueError) as e:
        logger.warning("Failed to read watermark %s, treating as first run: %s", path, e)
        return FIRST_RUN


def write_watermark(path: Path, instant: float | None = None) -> int:
    """
    Persist the watermark.

    Args:
        path: Marker file to write.
        instant: Seconds since the epoch (defaults to now).

    Returns:
        The whole-second value written.
    """
    value = int(time.time() if instant is None else instant)

    # A hidden file can't be truncated on Windows
    if path.exists():
        set_hidden(path, False)

    path.write_text(f"{value}\n", encoding="utf-8")
    set_hidden(path, True)

    logger.debug("Wrote watermark %d to %s", value, path)
    return value
