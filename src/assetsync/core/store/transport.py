"""
Subprocess transport for the store's command-line utility.

Every protocol call spawns the executable once, waits for it to exit and
returns its captured standard output. The exit status carries no meaning
in this protocol and is not checked.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Protocol

from assetsync.core.store.errors import ProcessLaunchError, StoreTimeoutError

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

DEFAULT_TIMEOUT_SECONDS = 300


class StoreTransport(Protocol):
    """Anything that can run a protocol verb and return its stdout."""

    def run(self, verb: str, *args: str) -> str: ...


class SubprocessTransport:
    """
    Runs protocol verbs by spawning the store executable.

    Example:
        >>> transport = SubprocessTransport(Path("C:/Trainz/bin/TrainzUtil.exe"))
        >>> transport.run("echo", "hello")
        'hello\\n'
    """

    def __init__(
        self,
        executable: Path,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        cwd: Path | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            executable: Path to the store's command-line utility.
            timeout: Hard limit in seconds for a single call.
            cwd: Working directory for the spawned process.
        """
        self.executable = executable
        self.timeout = timeout
        self.cwd = cwd

    def run(self, verb: str, *args: str) -> str:
        """
        Run one protocol verb.

        Returns:
            Captured standard output (undecodable bytes replaced).

        Raises:
            StoreTimeoutError: If the call exceeds the timeout.
            ProcessLaunchError: If the executable cannot be started.
        """
        cmd = [str(self.executable), verb, *args]

        kwargs: dict[str, Any] = {}
        if IS_WINDOWS:
            # Keep the utility from flashing a console window
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW  # type: ignore[attr-defined]
        else:
            # Own session: a terminal Ctrl+C must not reach an in-flight call
            kwargs["start_new_session"] = True

        logger.debug("Running store command: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                **kwargs,
            )
        except subprocess.TimeoutExpired as e:
            raise StoreTimeoutError(
                f"Store command timed out after {self.timeout:g}s: {verb}",
                command=cmd,
            ) from e
        except OSError as e:
            raise ProcessLaunchError(
                f"Could not start store executable {self.executable}: {e}",
                command=cmd,
            ) from e

        if result.stderr:
            logger.debug("Store stderr for %s: %s", verb, result.stderr.strip())

        return result.stdout or ""
