"""
Install workflow state machine.

Implements a complete install run as a generator that yields SyncEvent
objects. All workflow logic lives here; signal handling, Rich rendering,
and CLI concerns stay in cli/install.py.

A run:
    1. Loads the watermark and detects changed units
    2. Stops the indexing daemon if scripts changed
    3. Copies changed scripts into the installation
    4. Stages each changed asset through edit/install and commit
    5. Copies settings overrides and patches the module config
    6. Retries commits for assets left open for edit
    7. Persists the new watermark

Usage:
    >>> orchestrator = SyncOrchestrator(config=config, source_dir=Path("."), client=client)
    >>> for event in orchestrator.execute():
    ...     handle(event)
    >>> result = orchestrator.get_result()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path

from assetsync.core.config.models import SyncConfig
from assetsync.core.content.detector import detect_changes
from assetsync.core.content.models import AssetUnit, ScriptUnit
from assetsync.core.store.client import StoreClient
from assetsync.core.store.errors import StoreRejectedError
from assetsync.core.sync.cancel import CancellationToken
from assetsync.core.sync.daemon import DaemonController
from assetsync.core.sync.errors import StagingPermissionError, SyncCancelledError
from assetsync.core.sync.finalize import copy_settings, patch_config_file
from assetsync.core.sync.models import (
    SyncEvent,
    SyncEventType,
    SyncOutcome,
    SyncPhase,
    SyncResult,
)
from assetsync.core.sync.reconcile import reconcile_open_edits
from assetsync.core.sync.watermark import read_watermark, write_watermark
from assetsync.utils.fs import copy_directory, remove_directory, replace_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncLayout:
    """Resolved source and installation paths for one run."""

    source_dir: Path
    install_dir: Path
    scripts_dir: Path
    assets_dir: Path
    settings_dir: Path
    watermark_file: Path
    target_scripts_dir: Path
    target_editing_dir: Path
    target_settings_dir: Path
    patch_file: Path

    @classmethod
    def from_config(cls, config: SyncConfig, source_dir: Path) -> SyncLayout:
        """
        Resolve all paths from configuration.

        Raises:
            ValueError: If no install path is configured.
        """
        if config.target.install_path is None:
            raise ValueError("No install path configured")

        source = source_dir.resolve()
        install = Path(config.target.install_path).resolve()
        return cls(
            source_dir=source,
            install_dir=install,
            scripts_dir=source / config.source.scripts_dir,
            assets_dir=source / config.source.assets_dir,
            settings_dir=source / config.source.settings_dir,
            watermark_file=source / config.source.watermark_file,
            target_scripts_dir=install / config.target.scripts_dir,
            target_editing_dir=install / config.target.editing_dir,
            target_settings_dir=install / config.target.settings_dir,
            patch_file=install / config.target.patch_file,
        )


class SyncOrchestrator:
    """
    Drives a single install run.

    Scripts are always staged before assets, one unit at a time. The
    cancellation token is checked only after each script file and after
    each asset; cancelling raises SyncCancelledError without persisting
    the watermark. A PermissionError while writing into the installation
    raises StagingPermissionError and ends the run the same way.

    Attributes:
        config: Loaded configuration.
        layout: Resolved paths.
        client: Store protocol client.
        daemon: Indexing daemon handle (None to skip the daemon barrier).
        cancel_token: Cancellation flag checked between units.
    """

    def __init__(
        self,
        *,
        config: SyncConfig,
        source_dir: Path,
        client: StoreClient,
        daemon: DaemonController | None = None,
        cancel_token: CancellationToken | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Configuration (target.install_path must be set).
            source_dir: Root of the content being installed.
            client: Store protocol client.
            daemon: Indexing daemon handle.
            cancel_token: Cancellation flag (a private one if None).
            clock: Source of the wall-clock instant written as watermark.
        """
        self.config = config
        self.layout = SyncLayout.from_config(config, source_dir)
        self.client = client
        self.daemon = daemon
        self.cancel_token = cancel_token or CancellationToken()
        self._clock = clock

        self._phase = SyncPhase.IDLE
        self._completed = 0
        self._total = 0
        self._result = SyncResult()

    @property
    def phase(self) -> SyncPhase:
        return self._phase

    def get_result(self) -> SyncResult:
        """Result of the run; complete once execute() is exhausted."""
        return self._result

    # ------------------------------------------------------------------
    # Event helpers
    # ------------------------------------------------------------------

    def _make_event(
        self,
        event_type: SyncEventType,
        message: str = "",
        **kwargs: object,
    ) -> SyncEvent:
        """Create a SyncEvent with the current phase baked in."""
        event = SyncEvent(
            event_type=event_type,
            message=message,
            phase=self._phase,
            **kwargs,  # type: ignore[arg-type]
        )
        self._result.events.append(event)
        return event

    def _enter(self, phase: SyncPhase) -> SyncEvent:
        logger.debug("Phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase
        return self._make_event(SyncEventType.PHASE_CHANGED, phase.value)

    def _progress(self) -> SyncEvent:
        self._completed += 1
        return self._make_event(
            SyncEventType.PROGRESS,
            f"{self._completed}/{self._total}",
            completed=self._completed,
            total=self._total,
        )

    def _checkpoint(self) -> Generator[SyncEvent, None, None]:
        """Stop the run here if cancellation was requested."""
        if not self.cancel_token.cancelled:
            return
        yield self._enter(SyncPhase.CANCELLING)
        yield self._make_event(SyncEventType.CANCELLED, "Installation cancelled")
        raise SyncCancelledError("Installation cancelled by user")

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def execute(self) -> Generator[SyncEvent, None, None]:
        """
        Execute the install run, yielding events.

        Raises:
            SyncCancelledError: If cancellation was observed at a checkpoint.
            StagingPermissionError: If the installation is not writable.
            StoreTimeoutError: If a store call exceeded its timeout.
            ProcessLaunchError: If the store executable could not start.
        """
        layout = self.layout
        yield self._make_event(SyncEventType.RUN_STARTED, str(layout.source_dir))

        yield self._enter(SyncPhase.LOADING_WATERMARK)
        watermark = read_watermark(layout.watermark_file)
        self._result.previous_watermark = watermark

        yield self._enter(SyncPhase.DETECTING)
        changes = detect_changes(
            layout.scripts_dir,
            layout.assets_dir,
            watermark,
            descriptor_name=self.config.source.descriptor_name,
        )
        self._total = changes.total_units

        if changes.is_empty:
            yield self._make_event(SyncEventType.NOTHING_TO_DO, "Nothing new to install")
            yield self._enter(SyncPhase.DONE)
            self._result.outcome = SyncOutcome.NOTHING_TO_DO
            return

        yield self._make_event(SyncEventType.PROGRESS, completed=0, total=self._total)

        if changes.scripts:
            if self.daemon is not None and self.daemon.is_running():
                yield self._enter(SyncPhase.AWAITING_DAEMON_SHUTDOWN)
                stopped = self.daemon.stop()
                yield self._make_event(
                    SyncEventType.DAEMON_STOPPED,
                    f"Stopped {self.daemon.process_name}",
                    data={"processes": stopped},
                )

            yield self._enter(SyncPhase.STAGING_SCRIPTS)
            yield from self._stage_scripts(changes.scripts)
            yield self._progress()

        if changes.assets:
            yield self._enter(SyncPhase.STAGING_ASSETS)
            for asset in changes.assets:
                yield from self._stage_asset(asset)
                yield from self._checkpoint()
                yield self._progress()

        yield self._enter(SyncPhase.FINALIZING_SETTINGS)
        yield from self._copy_settings()

        if self.config.patch.enabled:
            yield self._enter(SyncPhase.PATCHING_CONFIG)
            yield from self._patch_config()

        yield self._enter(SyncPhase.RECONCILING_OPEN_EDITS)
        ledger = reconcile_open_edits(
            layout.target_editing_dir,
            self.client,
            attempts=self.config.store.commit_attempts,
            descriptor_name=self.config.source.descriptor_name,
        )
        self._result.ledger = ledger
        for identifier, name in ledger.entries.items():
            yield self._make_event(
                SyncEventType.RECONCILE_FAILED,
                f"Asset could not be committed: <{identifier}>",
                identifier=identifier,
                name=name,
            )

        yield self._enter(SyncPhase.PERSISTING_WATERMARK)
        self._result.new_watermark = write_watermark(layout.watermark_file, self._clock())
        yield self._make_event(
            SyncEventType.WATERMARK_SAVED,
            str(self._result.new_watermark),
            data={"watermark": self._result.new_watermark},
        )

        self._result.outcome = (
            SyncOutcome.COMPLETED_WITH_FAILURES if ledger else SyncOutcome.COMPLETED
        )
        yield self._enter(SyncPhase.DONE)
        yield self._make_event(SyncEventType.RUN_COMPLETED, self._result.summary())

    def _stage_scripts(self, scripts: list[ScriptUnit]) -> Generator[SyncEvent, None, None]:
        """Copy each script into the installation, then ping the store."""
        target_dir = self.layout.target_scripts_dir

        for script in scripts:
            target = target_dir / script.name
            try:
                target_dir.mkdir(parents=True, exist_ok=True)
                replace_file(script.path, target)
            except PermissionError as e:
                raise StagingPermissionError(target, e) from e

            self._result.scripts_staged += 1
            yield self._make_event(SyncEventType.SCRIPT_STAGED, script.name, identifier=script.name)
            yield from self._checkpoint()

        # The store restarts the daemon on its next call; wait for that here
        echo_text = self.config.store.echo_text
        confirmed = self.client.echo(echo_text)
        logger.info("Store echo %s: %s", "confirmed" if confirmed else "not confirmed", echo_text)
        yield self._make_event(
            SyncEventType.ECHO_RESULT,
            echo_text,
            data={"confirmed": confirmed},
        )

    def _apply_asset(self, asset: AssetUnit) -> list[SyncEvent]:
        """Open the asset for edit and overwrite it, or install it fresh."""
        events: list[SyncEvent] = []

        try:
            edit_dir = self.client.open_for_edit(asset.identifier)
        except StoreRejectedError as e:
            logger.info("Asset %s not in store (%s), installing from path", asset.label(), e)
            edit_dir = None

        if edit_dir is not None:
            try:
                remove_directory(edit_dir)
                copy_directory(asset.path, edit_dir)
            except PermissionError as e:
                raise StagingPermissionError(edit_dir, e) from e
            events.append(
                self._make_event(
                    SyncEventType.ASSET_COPIED,
                    str(edit_dir),
                    identifier=asset.identifier,
                    name=asset.name,
                )
            )
            return events

        try:
            installed = self.client.install_from_path(asset.path)
        except StoreRejectedError as e:
            logger.warning("Store refused to install %s: %s", asset.label(), e)
            self._result.install_rejections.append(asset.identifier)
            events.append(
                self._make_event(
                    SyncEventType.ASSET_INSTALL_REJECTED,
                    f"Install refused for {asset.label()}",
                    identifier=asset.identifier,
                    name=asset.name,
                    error=str(e),
                )
            )
        else:
            events.append(
                self._make_event(
                    SyncEventType.ASSET_INSTALLED,
                    installed or "",
                    identifier=asset.identifier,
                    name=asset.name,
                )
            )
        return events

    def _commit_asset(self, asset: AssetUnit) -> SyncEvent:
        """Commit a staged asset; a refusal is logged and left to reconciliation."""
        try:
            committed = self.client.commit(asset.identifier)
            error = None if committed else "store returned no result"
        except StoreRejectedError as e:
            committed = False
            error = str(e)

        if committed:
            return self._make_event(
                SyncEventType.ASSET_COMMITTED,
                asset.label(),
                identifier=asset.identifier,
                name=asset.name,
            )

        logger.warning("Commit of %s failed: %s", asset.label(), error)
        self._result.commit_failures.append(asset.identifier)
        return self._make_event(
            SyncEventType.ASSET_COMMIT_FAILED,
            asset.label(),
            identifier=asset.identifier,
            name=asset.name,
            error=error,
        )

    def _stage_asset(self, asset: AssetUnit) -> Generator[SyncEvent, None, None]:
        yield self._make_event(
            SyncEventType.ASSET_STARTED,
            f"Installing asset {asset.label()}...",
            identifier=asset.identifier,
            name=asset.name,
        )

        # The commit runs even when staging raised
        try:
            events = self._apply_asset(asset)
        finally:
            commit_event = self._commit_asset(asset)

        self._result.assets_staged += 1
        yield from events
        yield commit_event

    def _copy_settings(self) -> Generator[SyncEvent, None, None]:
        try:
            copied = copy_settings(self.layout.settings_dir, self.layout.target_settings_dir)
        except PermissionError as e:
            raise StagingPermissionError(self.layout.target_settings_dir, e) from e

        if copied:
            yield self._make_event(
                SyncEventType.SETTINGS_COPIED,
                f"Copied {len(copied)} settings file(s)",
                data={"files": [p.name for p in copied]},
            )

    def _patch_config(self) -> Generator[SyncEvent, None, None]:
        patch = self.config.patch
        try:
            changed = patch_config_file(self.layout.patch_file, patch.marker, patch.line_offset)
        except PermissionError as e:
            raise StagingPermissionError(self.layout.patch_file, e) from e

        if changed:
            yield self._make_event(
                SyncEventType.CONFIG_PATCHED,
                str(self.layout.patch_file),
                data={"lines": [i + 1 for i in changed]},
            )
