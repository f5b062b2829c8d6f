"""
Structured JSONL run log for assetsync.

Provides a RunLogger class that writes one JSON line per noteworthy
install event. Logs are written to
~/.local/share/assetsync/logs/{session}.jsonl

Each log line is valid JSON with the format:
{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "asset_commit_failed",
  "data": { ... event-specific data ... }
}
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from assetsync.core.sync.models import SyncEvent, SyncEventType

logger = logging.getLogger(__name__)

# Events worth keeping after the run; progress and phase chatter is not
RECORDED_EVENTS = frozenset(
    {
        SyncEventType.RUN_STARTED,
        SyncEventType.NOTHING_TO_DO,
        SyncEventType.DAEMON_STOPPED,
        SyncEventType.SCRIPT_STAGED,
        SyncEventType.ECHO_RESULT,
        SyncEventType.ASSET_COPIED,
        SyncEventType.ASSET_INSTALLED,
        SyncEventType.ASSET_INSTALL_REJECTED,
        SyncEventType.ASSET_COMMITTED,
        SyncEventType.ASSET_COMMIT_FAILED,
        SyncEventType.SETTINGS_COPIED,
        SyncEventType.CONFIG_PATCHED,
        SyncEventType.RECONCILE_FAILED,
        SyncEventType.WATERMARK_SAVED,
        SyncEventType.RUN_COMPLETED,
        SyncEventType.CANCELLED,
    }
)


class LogEntry(BaseModel):
    """A single structured log entry in JSONL format."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    event_type: str = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


def get_log_dir() -> Path:
    """Return the run log directory under XDG_DATA_HOME."""
    xdg_data_home = os.environ.get("XDG_DATA_HOME") or os.path.expanduser("~/.local/share")
    return Path(xdg_data_home) / "assetsync" / "logs"


class RunLogger:
    """
    JSONL logger for install runs.

    Example:
        run_log = RunLogger.init("20260115-123456")
        for event in orchestrator.execute():
            run_log.log_sync_event(event)
        run_log.log_error("Permission denied", path="C:/Trainz/scripts")
    """

    def __init__(self, log_file: Path):
        """
        Initialize logger with a log file path.

        Args:
            log_file: Path to the JSONL log file (will be created if needed)
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def init(session_id: str) -> RunLogger:
        """
        Initialize a logger for one install session.

        Raises:
            ValueError: If session_id is empty
        """
        if not session_id:
            raise ValueError("session_id cannot be empty")
        return RunLogger(get_log_dir() / f"{session_id}.jsonl")

    def log_event(self, event_type: str, data: dict[str, Any] | None = None) -> None:
        """
        Append one entry to the log file.

        Write failures are reported through stdlib logging and otherwise
        ignored so the run log can never stop an install.
        """
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            event_type=event_type,
            data=data or {},
        )
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(entry.model_dump_json(exclude_none=True) + "\n")
        except OSError as e:
            logger.warning("Failed to write to run log %s: %s", self.log_file, e)

    def log_sync_event(self, event: SyncEvent) -> None:
        """Record an orchestrator event if it's one worth keeping."""
        if event.event_type not in RECORDED_EVENTS:
            return

        data: dict[str, Any] = {"phase": event.phase.value, "message": event.message}
        if event.identifier is not None:
            data["identifier"] = event.identifier
        if event.name is not None:
            data["name"] = event.name
        if event.error is not None:
            data["error"] = event.error
        data.update(event.data)

        self.log_event(event.event_type.value, data)

    def log_error(self, message: str, **details: Any) -> None:
        """Record a fatal error that ended the run."""
        self.log_event("error", {"message": message, **details})
