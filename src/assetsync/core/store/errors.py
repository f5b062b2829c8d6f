"""
Exceptions raised by the store client.

A store call that produces no decisive line is not an error; callers
receive None/False instead.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for store protocol failures."""

    def __init__(self, message: str, command: list[str] | None = None) -> None:
        super().__init__(message)
        self.command = command


class StoreRejectedError(StoreError):
    """The store answered with a ``-`` line."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        line: str = "",
    ) -> None:
        super().__init__(message, command)
        self.line = line


class StoreTimeoutError(StoreError):
    """The store executable did not finish within the timeout."""


class ProcessLaunchError(StoreError):
    """The store executable could not be started."""
