"""
Finalization steps run after all units are staged.

Copies settings override files into the installation and applies the
line-offset patch to the product's module configuration file.

The patch is textual: the line ``line_offset`` lines below
every line containing the marker gets its first ``0`` turned into ``1``.
Every other byte of the file is left as it was.
"""

from __future__ import annotations

import logging
from pathlib import Path

from assetsync.utils.fs import replace_file, write_atomically

logger = logging.getLogger(__name__)


def copy_settings(source_dir: Path, target_dir: Path) -> list[Path]:
    """
    Copy every file in ``source_dir`` into ``target_dir``.

    Existing targets are deleted first. A missing source directory copies
    nothing.

    Returns:
        Target paths written, in name order.

    Raises:
        PermissionError: If a target cannot be replaced.
    """
    if not source_dir.is_dir():
        return []

    target_dir.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []

    for source in sorted(p for p in source_dir.iterdir() if p.is_file()):
        target = target_dir / source.name
        replace_file(source, target)
        copied.append(target)

    return copied


def patch_lines(
    lines: list[str],
    marker: str,
    line_offset: int = 2,
    old: str = "0",
    new: str = "1",
) -> tuple[list[str], list[int]]:
    """
    Apply the marker patch to a list of lines.

    Lines keep their terminators, so joining the result reproduces the
    untouched lines byte for byte.

    Returns:
        The patched lines and the zero-based indexes that changed.
    """
    patched = list(lines)
    targets = sorted({i + line_offset for i, line in enumerate(lines) if marker in line})
    changed: list[int] = []

    for index in targets:
        if index >= len(patched):
            continue
        replaced = patched[index].replace(old, new, 1)
        if replaced != patched[index]:
            patched[index] = replaced
            changed.append(index)

    return patched, changed


def patch_config_file(path: Path, marker: str, line_offset: int = 2) -> list[int]:
    """
    Patch a configuration file in place, atomically.

    Args:
        path: File to patch.
        marker: Text identifying marker lines.
        line_offset: Distance from a marker line to the line patched.

    Returns:
        Zero-based indexes of the lines that changed (empty if the file
        is missing or nothing matched).

    Raises:
        PermissionError: If the file cannot be replaced.
    """
    if not path.is_file():
        logger.warning("Config file %s not found, skipping patch", path)
        return []

    with path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        lines = f.readlines()

    patched, changed = patch_lines(lines, marker, line_offset)
    if not changed:
        logger.info("No '%s' line to patch in %s", marker, path)
        return []

    write_atomically(path, "".join(patched).encode("utf-8", errors="surrogateescape"))
    logger.info("Patched %s at line(s) %s", path, ", ".join(str(i + 1) for i in changed))
    return changed
