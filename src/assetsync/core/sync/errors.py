"""
Exceptions that abort an install run.

Store rejections for a single unit are handled inside the workflow; the
errors here end the whole run without persisting a new watermark.
"""

from __future__ import annotations

from pathlib import Path


class SyncError(Exception):
    """Base exception for fatal install failures."""


class StagingPermissionError(SyncError):
    """A file could not be copied into the installation for lack of permission."""

    def __init__(self, path: Path, cause: OSError | None = None) -> None:
        super().__init__(f"No permission to write {path}")
        self.path = path
        self.cause = cause


class SyncCancelledError(SyncError):
    """The user cancelled the run; it stopped at a unit boundary."""


class DaemonShutdownError(SyncError):
    """The indexing daemon could not be stopped."""
