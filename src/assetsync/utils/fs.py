"""
Filesystem helpers for staging content into an installation.

Errors are never collected or swallowed here: the first PermissionError
propagates so the caller can abort the run.
"""

from __future__ import annotations

import ctypes
import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

FILE_ATTRIBUTE_HIDDEN = 0x2
INVALID_FILE_ATTRIBUTES = 0xFFFFFFFF


def replace_file(source: Path, target: Path) -> None:
    """Delete ``target`` if present, then copy ``source`` to it."""
    target.unlink(missing_ok=True)
    shutil.copy2(source, target)


def copy_directory(source: Path, destination: Path) -> None:
    """
    Recursively copy a directory tree.

    Unlike shutil.copytree, a failed file copy raises its own OSError
    immediately instead of being folded into shutil.Error.

    Raises:
        FileNotFoundError: If ``source`` is not a directory.
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    # Cache children before creating anything in case destination is inside source
    children = list(source.iterdir())
    destination.mkdir(parents=True, exist_ok=True)

    for child in children:
        target = destination / child.name
        if child.is_dir():
            copy_directory(child, target)
        else:
            shutil.copy2(child, target)


def remove_directory(path: Path) -> None:
    """Remove a directory tree; a missing directory is not an error."""
    if path.exists():
        shutil.rmtree(path)


def write_atomically(path: Path, data: bytes) -> None:
    """
    Replace ``path`` with ``data`` via a temp file in the same directory.

    Readers see either the old or the new content, never a partial file.
    """
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        temp_path.replace(path)
    except OSError:
        # Clean up temp file on failure
        temp_path.unlink(missing_ok=True)
        raise


def set_hidden(path: Path, hidden: bool = True) -> None:
    """
    Set or clear the hidden attribute of a file.

    Only meaningful on Windows; elsewhere dot-prefixed names are already
    hidden and this does nothing.
    """
    if not IS_WINDOWS:
        return

    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    attributes = kernel32.GetFileAttributesW(str(path))
    if attributes == INVALID_FILE_ATTRIBUTES:
        return

    if hidden:
        attributes |= FILE_ATTRIBUTE_HIDDEN
    else:
        attributes &= ~FILE_ATTRIBUTE_HIDDEN

    if not kernel32.SetFileAttributesW(str(path), attributes):
        logger.debug("Could not change hidden attribute of %s", path)
