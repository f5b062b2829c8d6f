"""
Control of companion processes by name.

The store's indexing daemon holds script files open, so it must be
stopped before scripts are replaced; the store restarts it on the next
protocol call. The host application itself must not be running at all
while installing.
"""

from __future__ import annotations

import logging

import psutil

from assetsync.core.sync.errors import DaemonShutdownError

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    name = name.lower()
    return name[:-4] if name.endswith(".exe") else name


def find_processes(name: str) -> list[psutil.Process]:
    """
    Find running processes by executable name.

    Matching is case-insensitive and ignores a trailing ``.exe``.
    """
    wanted = _normalize(name)
    found: list[psutil.Process] = []

    for proc in psutil.process_iter(["name"]):
        proc_name = proc.info.get("name")
        if proc_name and _normalize(proc_name) == wanted:
            found.append(proc)

    return found


def is_running(name: str) -> bool:
    """Check whether any process with this name is running."""
    return bool(find_processes(name))


def stop_and_wait(name: str) -> int:
    """
    Ask every process with this name to terminate and block until they exit.

    The wait is unbounded: the daemon is expected to exit promptly once
    asked, and staging cannot start while it runs.

    Returns:
        Number of processes that were stopped.

    Raises:
        DaemonShutdownError: If termination is refused.
    """
    procs = find_processes(name)
    if not procs:
        return 0

    for proc in procs:
        try:
            logger.debug("Terminating %s (pid %d)", name, proc.pid)
            proc.terminate()
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as e:
            raise DaemonShutdownError(f"Not allowed to stop {name} (pid {proc.pid})") from e

    psutil.wait_procs(procs)
    logger.info("Stopped %d %s process(es)", len(procs), name)
    return len(procs)


class DaemonController:
    """Handle on a named companion process."""

    def __init__(self, process_name: str) -> None:
        self.process_name = process_name

    def is_running(self) -> bool:
        return is_running(self.process_name)

    def stop(self) -> int:
        return stop_and_wait(self.process_name)
