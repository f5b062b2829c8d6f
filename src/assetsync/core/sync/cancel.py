"""
Cooperative cancellation for install runs.

The orchestrator checks a CancellationToken only between whole units, so
a file copy or store call in flight always completes before the run
stops. InterruptHandler wires SIGINT/SIGTERM to a token:

1. First interrupt: cancels the token (the run stops at the next unit boundary)
2. Second interrupt: force exits with SystemExit(130)

Usage:
    >>> token = CancellationToken()
    >>> handler = InterruptHandler(token)
    >>> handler.register()
    >>> try:
    ...     for event in SyncOrchestrator(..., cancel_token=token).execute():
    ...         ...
    ... finally:
    ...     handler.unregister()
"""

from __future__ import annotations

import signal
import sys
import threading
from typing import Any


class CancellationToken:
    """Flag set once by whoever wants the run to stop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


class InterruptHandler:
    """
    Translates SIGINT/SIGTERM into cancellation of a token.

    Attributes:
        token: The token cancelled on the first interrupt.
    """

    def __init__(self, token: CancellationToken | None = None) -> None:
        self.token = token or CancellationToken()
        self._original_sigint: Any = None
        self._original_sigterm: Any = None

    @property
    def interrupted(self) -> bool:
        return self.token.cancelled

    def register(self) -> None:
        """
        Register signal handlers for SIGINT and SIGTERM.

        Saves the original handlers so unregister() can restore them.
        """
        self._original_sigint = signal.signal(signal.SIGINT, self._handle_signal)
        self._original_sigterm = signal.signal(signal.SIGTERM, self._handle_signal)

    def unregister(self) -> None:
        """Restore original signal handlers."""
        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
            self._original_sigint = None

        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)
            self._original_sigterm = None

    def _handle_signal(self, signum: int, frame: object) -> None:
        """
        Two-stage interrupt model.

        - First call: cancels the token
        - Second call: Force exits with SystemExit(130)
        """
        if self.token.cancelled:
            self._write_to_stderr("\n[Force exiting...]\n")
            raise SystemExit(130)

        self.token.cancel()
        self._write_to_stderr(
            "\n[Cancelling installation, finishing the current unit. "
            "Press Ctrl+C again to force exit.]\n"
        )

    @staticmethod
    def _write_to_stderr(message: str) -> None:
        """Write to stderr without going through Rich (safe inside a signal handler)."""
        sys.stderr.write(message)
        sys.stderr.flush()
