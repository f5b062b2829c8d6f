"""
Standardized error handling and exit codes for the assetsync CLI.

This module provides consistent error messaging with actionable guidance
and distinct exit codes for every way an install can end.
"""

from enum import IntEnum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for assetsync operations."""

    SUCCESS = 0
    """Install completed and every asset was committed."""

    GENERAL_ERROR = 1
    """Unexpected fault (store timeout, store not startable, ...)."""

    USER_ERROR = 2
    """Configuration or environment problem the user can fix."""

    NOTHING_TO_DO = 3
    """No script or asset changed since the last install."""

    FAILURES_RECORDED = 4
    """Install completed but some assets are still open for edit."""

    PERMISSION_DENIED = 5
    """The installation directory is not writable."""

    SIGINT = 130
    """Cancelled by the user (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Store executable not found",
        ...     reason="Looked for C:/Trainz/bin/TrainzUtil.exe",
        ...     solution="assetsync install <INSTALL_PATH>",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_no_install_path_error() -> None:
    """Print error when no installation path was given or configured."""
    print_error(
        "No installation path",
        reason="The product installation directory is not configured",
        solution="assetsync install <INSTALL_PATH>  # or set ASSETSYNC_INSTALL_PATH",
    )


def print_installation_not_found_error(executable: Path) -> None:
    """Print error when the store's command-line utility is missing."""
    print_error(
        "Installation not found",
        reason=f"The store utility {executable} does not exist",
        solution="Check the installation path, or reinstall the product and try again",
    )


def print_blocking_process_error(process_name: str) -> None:
    """Print error when the host application is still running."""
    print_error(
        f"{process_name} is running",
        reason="The application must be closed before content can be installed",
        solution=f"Close {process_name} and run the install again",
    )


def print_permission_error(path: Path) -> None:
    """Print error when files can't be written into the installation."""
    print_error(
        "No permission to copy files",
        reason=f"Could not write {path}",
        solution="Run the install again from an account that can write to the installation",
    )


def print_store_error(error: Exception) -> None:
    """Print error when the store utility failed outright."""
    print_error(
        "Store command failed",
        reason=str(error),
        solution="Make sure the store utility runs on its own, then try again",
    )


__all__ = [
    "ExitCode",
    "console",
    "print_error",
    "print_no_install_path_error",
    "print_installation_not_found_error",
    "print_blocking_process_error",
    "print_permission_error",
    "print_store_error",
]
