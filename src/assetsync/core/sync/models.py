"""
Sync run phase, event and result models.

Provides typed models for observing the install workflow, separated from
CLI/rendering concerns:

- SyncPhase: States of the orchestrator state machine
- SyncEvent: Events yielded by SyncOrchestrator.execute()
- FailureLedger: Assets that stayed open for edit after reconciliation
- SyncResult: Final outcome of a complete run

Usage:
    >>> for event in orchestrator.execute():
    ...     if event.event_type == SyncEventType.PROGRESS:
    ...         bar.update(completed=event.completed, total=event.total)
    >>> result = orchestrator.get_result()
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# ===========================================================================
# SyncPhase - Orchestrator states
# ===========================================================================


class SyncPhase(str, Enum):
    """
    States of a single install run.

    Runs advance through these in declaration order; AWAITING_DAEMON_SHUTDOWN
    is skipped when no scripts changed or the daemon isn't running.
    CANCELLING is entered from a staging phase when the user cancels.
    """

    IDLE = "idle"
    LOADING_WATERMARK = "loading_watermark"
    DETECTING = "detecting"
    AWAITING_DAEMON_SHUTDOWN = "awaiting_daemon_shutdown"
    STAGING_SCRIPTS = "staging_scripts"
    STAGING_ASSETS = "staging_assets"
    FINALIZING_SETTINGS = "finalizing_settings"
    PATCHING_CONFIG = "patching_config"
    RECONCILING_OPEN_EDITS = "reconciling_open_edits"
    PERSISTING_WATERMARK = "persisting_watermark"
    DONE = "done"
    CANCELLING = "cancelling"


# ===========================================================================
# SyncEventType - Everything the orchestrator reports
# ===========================================================================


class SyncEventType(str, Enum):
    """Discriminator for sync events."""

    # Lifecycle
    RUN_STARTED = "run_started"
    PHASE_CHANGED = "phase_changed"
    NOTHING_TO_DO = "nothing_to_do"
    RUN_COMPLETED = "run_completed"
    CANCELLED = "cancelled"

    # Progress
    PROGRESS = "progress"

    # Scripts
    DAEMON_STOPPED = "daemon_stopped"
    SCRIPT_STAGED = "script_staged"
    ECHO_RESULT = "echo_result"

    # Assets
    ASSET_STARTED = "asset_started"
    ASSET_COPIED = "asset_copied"
    ASSET_INSTALLED = "asset_installed"
    ASSET_INSTALL_REJECTED = "asset_install_rejected"
    ASSET_COMMITTED = "asset_committed"
    ASSET_COMMIT_FAILED = "asset_commit_failed"

    # Finalization
    SETTINGS_COPIED = "settings_copied"
    CONFIG_PATCHED = "config_patched"
    RECONCILE_FAILED = "reconcile_failed"
    WATERMARK_SAVED = "watermark_saved"


@dataclass
class SyncEvent:
    """
    Event yielded by the orchestrator.

    Attributes:
        event_type: Discriminator for switching on event kind.
        message: Human-readable description of the event.
        phase: Phase the orchestrator was in when the event was produced.
        identifier: Asset identifier or script file name (if applicable).
        name: Asset display name (if applicable).
        completed: Units completed so far (PROGRESS events).
        total: Units in this run (PROGRESS events).
        error: Error message (if applicable).
        data: Arbitrary extra data for the event.
        timestamp: When the event occurred.
    """

    event_type: SyncEventType
    message: str = ""
    phase: SyncPhase = SyncPhase.IDLE
    identifier: str | None = None
    name: str | None = None
    completed: int = 0
    total: int = 0
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


# ===========================================================================
# FailureLedger
# ===========================================================================


@dataclass
class FailureLedger:
    """
    Assets that could not be committed after exhausting retries.

    Keeps insertion order; recording the same identifier twice is a no-op.
    """

    entries: dict[str, str | None] = field(default_factory=dict)

    def record(self, identifier: str, name: str | None = None) -> None:
        self.entries.setdefault(identifier, name)

    @property
    def identifiers(self) -> list[str]:
        return list(self.entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# ===========================================================================
# SyncResult
# ===========================================================================


class SyncOutcome(str, Enum):
    """How a run ended (cancelled and fatal runs raise instead)."""

    NOTHING_TO_DO = "nothing_to_do"
    COMPLETED = "completed"
    COMPLETED_WITH_FAILURES = "completed_with_failures"


@dataclass
class SyncResult:
    """
    Final result of an install run.

    Attributes:
        outcome: How the run ended.
        scripts_staged: Number of script files copied.
        assets_staged: Number of assets processed.
        install_rejections: Identifiers whose fallback install was refused.
        commit_failures: Identifiers whose staging commit was refused.
        ledger: Assets still open for edit after reconciliation.
        previous_watermark: Watermark the run started from.
        new_watermark: Watermark written at the end (None if not written).
        events: All events produced during the run.
    """

    outcome: SyncOutcome = SyncOutcome.NOTHING_TO_DO
    scripts_staged: int = 0
    assets_staged: int = 0
    install_rejections: list[str] = field(default_factory=list)
    commit_failures: list[str] = field(default_factory=list)
    ledger: FailureLedger = field(default_factory=FailureLedger)
    previous_watermark: int = 0
    new_watermark: int | None = None
    events: list[SyncEvent] = field(default_factory=list)

    def summary(self) -> str:
        """Generate the end-of-run summary line."""
        if self.outcome == SyncOutcome.NOTHING_TO_DO:
            return "Nothing new to install."
        return f"Scripts: {self.scripts_staged}, Assets: {self.assets_staged}"
