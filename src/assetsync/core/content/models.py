"""
Content unit models.

A content unit is either a flat script file or an asset bundle directory.
A ChangeSet is the ordered collection of units modified since the last
install, built fresh on every run and never persisted.

Usage:
    >>> from assetsync.core.content.models import ChangeSet
    >>> changes = ChangeSet(scripts=[...], assets=[...])
    >>> changes.total_units
    3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class AssetDescriptor:
    """
    Fields read from an asset bundle's descriptor file.

    Either field is None when the descriptor doesn't carry it.
    """

    identifier: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class ScriptUnit:
    """A script file, identified by its file name."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class AssetUnit:
    """
    An asset bundle directory.

    Attributes:
        identifier: Store-assigned unique key (the value between < and >).
        name: Human-readable display name.
        path: Absolute path of the bundle directory.
    """

    identifier: str
    name: str
    path: Path

    def label(self) -> str:
        """Display form used in progress messages."""
        return f'"{self.name}" <{self.identifier}>'


@dataclass
class ChangeSet:
    """
    Units modified after the watermark.

    Scripts are in lexicographic path order, assets in case-insensitive
    display name order.
    """

    scripts: list[ScriptUnit] = field(default_factory=list)
    assets: list[AssetUnit] = field(default_factory=list)

    @property
    def total_units(self) -> int:
        """All scripts count as a single unit, each asset as one."""
        return len(self.assets) + 1 if self.scripts else len(self.assets)

    @property
    def is_empty(self) -> bool:
        return self.total_units == 0
