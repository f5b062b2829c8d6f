"""
Helpers shared by assetsync commands: logging setup, configuration
resolution and store client construction.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from assetsync.cli.errors import (
    ExitCode,
    print_error,
    print_installation_not_found_error,
    print_no_install_path_error,
)
from assetsync.core.config import SyncConfig, load_config
from assetsync.core.config.env import load_layered_env
from assetsync.core.store import StoreClient, SubprocessTransport


def setup_logging(debug: bool = False) -> None:
    """
    Configure stdlib logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def resolve_config(source: Path, install_path: Path | None = None) -> SyncConfig:
    """
    Load configuration for a source root, applying a command-line install path.

    The source root's .env is loaded first (OS env > source .env > user .env).
    An explicit install path beats every configured one.
    """
    load_layered_env(source_dir=source)
    try:
        config = load_config(source)
    except ValidationError as e:
        print_error(
            "Invalid configuration",
            reason=str(e),
            solution=f"Fix {source / '.assetsync.json'} or ~/.config/assetsync/config.json",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    if install_path is None:
        return config
    target = config.target.model_copy(update={"install_path": install_path})
    return config.model_copy(update={"target": target})


def require_install_path(config: SyncConfig) -> Path:
    """Return the configured install path or exit with USER_ERROR."""
    if config.target.install_path is None:
        print_no_install_path_error()
        raise typer.Exit(ExitCode.USER_ERROR)
    return Path(config.target.install_path)


def store_executable(config: SyncConfig) -> Path:
    """Path of the store's command-line utility."""
    return require_install_path(config) / config.store.executable


def build_client(config: SyncConfig) -> StoreClient:
    """
    Build a store client for the configured installation.

    Exits with USER_ERROR if the store utility doesn't exist.
    """
    executable = store_executable(config)
    if not executable.is_file():
        print_installation_not_found_error(executable)
        raise typer.Exit(ExitCode.USER_ERROR)

    transport = SubprocessTransport(
        executable,
        timeout=config.store.timeout_seconds,
        cwd=executable.parent,
    )
    return StoreClient(transport)
