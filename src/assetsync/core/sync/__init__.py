"""
Install workflow: stage changed content into the store and commit it.

Example:
    >>> from assetsync.core.sync import SyncOrchestrator
    >>> orchestrator = SyncOrchestrator(config=config, source_dir=Path("."), client=client)
    >>> for event in orchestrator.execute():
    ...     print(event.event_type, event.message)
    >>> orchestrator.get_result().summary()
    'Scripts: 2, Assets: 5'
"""

from assetsync.core.sync.cancel import CancellationToken, InterruptHandler
from assetsync.core.sync.errors import (
    DaemonShutdownError,
    StagingPermissionError,
    SyncCancelledError,
    SyncError,
)
from assetsync.core.sync.models import (
    FailureLedger,
    SyncEvent,
    SyncEventType,
    SyncOutcome,
    SyncPhase,
    SyncResult,
)
from assetsync.core.sync.orchestrator import SyncLayout, SyncOrchestrator
from assetsync.core.sync.reconcile import reconcile_open_edits

__all__ = [
    "CancellationToken",
    "DaemonShutdownError",
    "FailureLedger",
    "InterruptHandler",
    "StagingPermissionError",
    "SyncCancelledError",
    "SyncError",
    "SyncEvent",
    "SyncEventType",
    "SyncLayout",
    "SyncOrchestrator",
    "SyncOutcome",
    "SyncPhase",
    "SyncResult",
    "reconcile_open_edits",
]
