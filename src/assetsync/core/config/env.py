"""Environment file loading.

ASSETSYNC_* settings may live in .env files so that an install path or a
longer store timeout can be pinned per machine or per content package.

Precedence:
  os.environ (pre-existing) > source root .env > user .env

A value exported in the shell is never overwritten by a file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def default_env_paths(source_dir: Path) -> list[Path]:
    """Return the .env files consulted, lowest precedence first."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return [xdg_home / "assetsync" / ".env", source_dir / ".env"]


def load_layered_env(
    *,
    source_dir: Path | None = None,
    env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """Load variables from .env files into os.environ.

    Later files in ``env_paths`` override earlier ones, but nothing
    overrides a variable that was already set when this was called.

    Args:
        source_dir: content source root (defaults to cwd)
        env_paths: explicit file list, lowest precedence first

    Returns:
        The keys and values this call placed into os.environ.
    """
    if env_paths is None:
        env_paths = default_env_paths(source_dir or Path.cwd())

    preexisting = set(os.environ)
    applied: dict[str, str] = {}

    for path in env_paths:
        if not Path(path).exists():
            continue
        for key, value in dotenv_values(path).items():
            if key is None or value is None or key in preexisting:
                continue
            applied[key] = value

    os.environ.update(applied)
    return applied
