"""
Reconciliation of assets left open for editing.

A failed commit leaves the asset's directory in the store's "open for
edit" area. This pass retries the commit for every such directory and
records the assets the store still refuses to take back.

A successful commit is observed by the store removing the directory;
the return value of commit() is not trusted for that.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from assetsync.core.content.descriptor import read_descriptor
from assetsync.core.content.detector import DEFAULT_DESCRIPTOR
from assetsync.core.store.client import StoreClient
from assetsync.core.store.errors import StoreRejectedError
from assetsync.core.sync.models import FailureLedger

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_ATTEMPTS = 5


def commit_until_closed(
    client: StoreClient,
    identifier: str,
    directory: Path,
    attempts: int = DEFAULT_COMMIT_ATTEMPTS,
    name: str | None = None,
) -> bool:
    """
    Commit an asset until its edit directory disappears.

    Args:
        client: Store client.
        identifier: Asset identifier.
        directory: The asset's directory in the open-for-edit area.
        attempts: Maximum commit calls.
        name: Display name for diagnostics.

    Returns:
        True once the directory is gone, False if it survived every attempt.
    """
    for attempt in range(1, attempts + 1):
        try:
            client.commit(identifier)
        except StoreRejectedError as e:
            logger.warning(
                'Failed to commit asset "%s" <%s> (attempt %d/%d): %s',
                name or directory.name,
                identifier,
                attempt,
                attempts,
                e,
            )

        if not directory.exists():
            return True

    return False


def reconcile_open_edits(
    open_edits_root: Path,
    client: StoreClient,
    *,
    attempts: int = DEFAULT_COMMIT_ATTEMPTS,
    descriptor_name: str = DEFAULT_DESCRIPTOR,
    on_failure: Callable[[str, str | None], None] | None = None,
) -> FailureLedger:
    """
    Retry commits for every asset left in the open-for-edit area.

    Args:
        open_edits_root: The store's open-for-edit directory.
        client: Store client.
        attempts: Commit attempts per asset.
        descriptor_name: Descriptor file name inside each directory.
        on_failure: Called with (identifier, name) for each ledger entry.

    Returns:
        FailureLedger of assets still open after all attempts.
    """
    ledger = FailureLedger()

    if not open_edits_root.is_dir():
        return ledger

    for directory in sorted(p for p in open_edits_root.iterdir() if p.is_dir()):
        descriptor_path = directory / descriptor_name
        if not descriptor_path.is_file():
            continue

        try:
            descriptor = read_descriptor(descriptor_path)
        except OSError as e:
            logger.debug("Skipping %s: unreadable descriptor (%s)", directory, e)
            continue

        if descriptor.identifier is None:
            logger.debug("Skipping %s: descriptor has no identifier", directory)
            continue

        if commit_until_closed(client, descriptor.identifier, directory, attempts, descriptor.name):
            logger.info("Committed leftover asset <%s>", descriptor.identifier)
            continue

        ledger.record(descriptor.identifier, descriptor.name)
        if on_failure is not None:
            on_failure(descriptor.identifier, descriptor.name)

    return ledger
