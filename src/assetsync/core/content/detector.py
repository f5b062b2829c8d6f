"""
Change detection against the install watermark.

Finds the scripts and asset bundles modified after the last successful
install. Detection only reads the filesystem.

Usage:
    >>> from assetsync.core.content.detector import detect_changes
    >>> changes = detect_changes(Path("scripts"), Path("UserData/editing"), watermark)
    >>> for asset in changes.assets:
    ...     print(asset.label())
"""

from __future__ import annotations

import logging
from pathlib import Path

from assetsync.core.content.descriptor import read_descriptor
from assetsync.core.content.models import AssetUnit, ChangeSet, ScriptUnit

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTOR = "config.txt"


def _modified_after(path: Path, watermark: float) -> bool:
    return path.stat().st_mtime > watermark


def contains_files_newer_than(directory: Path, watermark: float) -> bool:
    """Check whether any file beneath ``directory`` was modified after the watermark."""
    return any(
        _modified_after(path, watermark) for path in directory.rglob("*") if path.is_file()
    )


def find_updated_scripts(scripts_dir: Path, watermark: float) -> list[ScriptUnit]:
    """
    List script files modified after the watermark.

    Only regular files directly under ``scripts_dir`` are considered.

    Returns:
        Script units with absolute paths, in lexicographic order.
    """
    if not scripts_dir.is_dir():
        return []

    updated = [
        ScriptUnit(path=path.resolve())
        for path in scripts_dir.iterdir()
        if path.is_file() and _modified_after(path, watermark)
    ]
    return sorted(updated, key=lambda unit: str(unit.path))


def find_updated_assets(
    assets_dir: Path,
    watermark: float,
    descriptor_name: str = DEFAULT_DESCRIPTOR,
) -> list[AssetUnit]:
    """
    List asset bundles containing any file modified after the watermark.

    Bundles are enumerated in directory-name order. Bundles without a
    descriptor, or whose descriptor has no identifier, are skipped. When
    two bundles share an identifier the first one wins.

    Returns:
        Asset units sorted case-insensitively by display name.
    """
    if not assets_dir.is_dir():
        return []

    by_identifier: dict[str, AssetUnit] = {}

    for directory in sorted(p for p in assets_dir.iterdir() if p.is_dir()):
        if not contains_files_newer_than(directory, watermark):
            continue

        descriptor_path = directory / descriptor_name
        if not descriptor_path.is_file():
            logger.debug("Skipping %s: no %s", directory, descriptor_name)
            continue

        try:
            descriptor = read_descriptor(descriptor_path)
        except OSError as e:
            logger.debug("Skipping %s: unreadable descriptor (%s)", directory, e)
            continue

        if descriptor.identifier is None:
            logger.debug("Skipping %s: descriptor has no identifier", directory)
            continue

        if descriptor.identifier in by_identifier:
            continue

        by_identifier[descriptor.identifier] = AssetUnit(
            identifier=descriptor.identifier,
            name=descriptor.name if descriptor.name is not None else directory.name,
            path=directory.resolve(),
        )

    return sorted(by_identifier.values(), key=lambda unit: unit.name.lower())


def detect_changes(
    scripts_dir: Path,
    assets_dir: Path,
    watermark: float,
    *,
    descriptor_name: str = DEFAULT_DESCRIPTOR,
) -> ChangeSet:
    """
    Build the ChangeSet of units modified strictly after ``watermark``.

    Args:
        scripts_dir: Directory of flat script files.
        assets_dir: Directory whose immediate subdirectories are bundles.
        watermark: Seconds since the epoch; files at exactly this instant
            are considered already installed.
        descriptor_name: Descriptor file name inside each bundle.

    Returns:
        ChangeSet with ordered scripts and assets.
    """
    changes = ChangeSet(
        scripts=find_updated_scripts(scripts_dir, watermark),
        assets=find_updated_assets(assets_dir, watermark, descriptor_name),
    )
    logger.info(
        "Detected %d changed scripts and %d changed assets since %s",
        len(changes.scripts),
        len(changes.assets),
        watermark,
    )
    return changes
