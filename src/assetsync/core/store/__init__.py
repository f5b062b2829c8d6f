"""
Client for the content store's command-line protocol.

Example:
    >>> from assetsync.core.store import StoreClient, SubprocessTransport
    >>> client = StoreClient(SubprocessTransport(executable))
    >>> client.echo("ping")
    True
"""

from assetsync.core.store.client import StoreClient
from assetsync.core.store.errors import (
    ProcessLaunchError,
    StoreError,
    StoreRejectedError,
    StoreTimeoutError,
)
from assetsync.core.store.models import OutcomeKind, StoreOutcome
from assetsync.core.store.transport import StoreTransport, SubprocessTransport

__all__ = [
    "OutcomeKind",
    "ProcessLaunchError",
    "StoreClient",
    "StoreError",
    "StoreOutcome",
    "StoreRejectedError",
    "StoreTimeoutError",
    "StoreTransport",
    "SubprocessTransport",
]
