"""
Asset descriptor parsing.

Each asset bundle carries a line-oriented descriptor (``config.txt``)
whose first token on a line is the key. Only two things are read from it:

    kuid                  <kuid:123456:100>
    username              "Class 66 Freight"

``asset-filename`` is accepted in place of ``username``. Values are taken
from between the delimiters; everything else on the line is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from assetsync.core.content.models import AssetDescriptor

logger = logging.getLogger(__name__)

IDENTIFIER_KEY = "kuid"
NAME_KEYS = ("username", "asset-filename")


def _keyed_lines(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield (first token, line) for every non-blank line.

    Indented lines belong to nested containers and have an empty key.
    """
    for raw in lines:
        line = raw.rstrip()
        if not line.strip():
            continue
        key = "" if line[0].isspace() else line.split()[0]
        yield key, line


def _between(text: str, opening: str, closing: str) -> str | None:
    start = text.find(opening)
    if start < 0:
        return None
    end = text.find(closing, start + 1)
    if end < 0:
        return None
    return text[start + 1 : end]


def parse_identifier(lines: Iterable[str]) -> str | None:
    """Return the identifier from the first ``kuid`` line, if any."""
    for key, line in _keyed_lines(lines):
        if key == IDENTIFIER_KEY:
            return _between(line, "<", ">")
    return None


def parse_name(lines: Iterable[str]) -> str | None:
    """Return the quoted display name from the first name line with content."""
    for key, line in _keyed_lines(lines):
        if key in NAME_KEYS and line[len(key):]:
            return _between(line, '"', '"')
    return None


def read_descriptor(path: Path) -> AssetDescriptor:
    """
    Read identifier and display name from a descriptor file.

    Args:
        path: Path to the descriptor file.

    Returns:
        AssetDescriptor with None for any field that is absent.

    Raises:
        OSError: If the file cannot be read.
    """
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    descriptor = AssetDescriptor(identifier=parse_identifier(lines), name=parse_name(lines))
    logger.debug("Descriptor %s: %s", path, descriptor)
    return descriptor
