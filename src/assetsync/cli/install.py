"""
Assetsync CLI - Install command.

Copies changed scripts and assets into the product installation, drives
the content store through edit/install/commit for each asset, and
persists the watermark so the next run only picks up newer changes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)

from assetsync.cli.common import build_client, resolve_config
from assetsync.cli.errors import (
    ExitCode,
    print_blocking_process_error,
    print_error,
    print_permission_error,
    print_store_error,
)
from assetsync.core.config import SyncConfig
from assetsync.core.store import StoreError
from assetsync.core.sync import (
    InterruptHandler,
    StagingPermissionError,
    SyncCancelledError,
    SyncEvent,
    SyncEventType,
    SyncOrchestrator,
    SyncOutcome,
    SyncResult,
)
from assetsync.core.sync.daemon import DaemonController, is_running
from assetsync.core.sync.errors import DaemonShutdownError
from assetsync.utils.logging import RunLogger

logger = logging.getLogger(__name__)

console = Console()


def check_blocking_processes(config: SyncConfig) -> None:
    """Exit with USER_ERROR if the host application is running."""
    for name in config.daemon.blocking_processes:
        if is_running(name):
            print_blocking_process_error(name)
            raise typer.Exit(ExitCode.USER_ERROR)


def _open_run_log(config: SyncConfig) -> RunLogger | None:
    if not config.logging.run_log:
        return None
    session_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    try:
        return RunLogger.init(session_id)
    except OSError as e:
        logger.warning("Run log disabled: %s", e)
        return None


def _render_event(event: SyncEvent, progress: Progress, task_id: TaskID) -> None:
    """Reflect one orchestrator event in the progress display."""
    etype = event.event_type
    out = progress.console

    if etype == SyncEventType.PROGRESS:
        progress.update(task_id, completed=event.completed, total=event.total or None)
    elif etype == SyncEventType.ASSET_STARTED:
        progress.update(task_id, description=event.message)
    elif etype == SyncEventType.DAEMON_STOPPED:
        out.print(f"[dim]{event.message}[/dim]")
    elif etype == SyncEventType.ECHO_RESULT and not event.data.get("confirmed"):
        out.print(f"[yellow]Store did not echo back:[/yellow] {event.message}")
    elif etype == SyncEventType.ASSET_INSTALL_REJECTED:
        out.print(f"[yellow]Install refused:[/yellow] {event.message} ({event.error})")
    elif etype == SyncEventType.ASSET_COMMIT_FAILED:
        out.print(f"[yellow]Commit failed:[/yellow] {event.message} ({event.error})")
    elif etype == SyncEventType.PHASE_CHANGED:
        progress.update(task_id, description=event.message.replace("_", " ").capitalize())


def print_summary(result: SyncResult) -> None:
    """Print the end-of-run summary and any assets left open for edit."""
    if result.outcome == SyncOutcome.NOTHING_TO_DO:
        console.print(f"[dim]{result.summary()}[/dim]")
        return

    console.print(f"[green]✓[/green] {result.summary()}")

    if result.ledger:
        console.print(
            f"[yellow]Warning:[/yellow] {len(result.ledger)} asset(s) could not be committed "
            "and are still open for edit:"
        )
        for identifier, name in result.ledger.entries.items():
            label = f'"{name}" <{identifier}>' if name else f"<{identifier}>"
            console.print(f"  {label}")


def exit_code_for(result: SyncResult) -> ExitCode:
    if result.outcome == SyncOutcome.NOTHING_TO_DO:
        return ExitCode.NOTHING_TO_DO
    if result.outcome == SyncOutcome.COMPLETED_WITH_FAILURES:
        return ExitCode.FAILURES_RECORDED
    return ExitCode.SUCCESS


def install(
    install_path: Path | None = typer.Argument(
        None,
        help="Product installation directory (defaults to the configured one)",
    ),
    source: Path = typer.Option(
        Path("."),
        "--source",
        "-s",
        help="Root of the content to install",
    ),
) -> None:
    """
    Install changed scripts and assets into the content store.

    Only content modified since the last successful install is staged.
    Press Ctrl+C once to stop after the current unit.

    Examples:
        assetsync install "C:/Games/Trainz"
        assetsync install --source ./content
    """
    config = resolve_config(source, install_path)
    client = build_client(config)
    check_blocking_processes(config)

    orchestrator = SyncOrchestrator(
        config=config,
        source_dir=source,
        client=client,
        daemon=DaemonController(config.daemon.process_name),
    )
    handler = InterruptHandler(orchestrator.cancel_token)
    run_log = _open_run_log(config)

    handler.register()
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Starting...", total=None)
            for event in orchestrator.execute():
                if run_log is not None:
                    run_log.log_sync_event(event)
                _render_event(event, progress, task_id)
    except SyncCancelledError:
        console.print("[yellow]Installation cancelled.[/yellow] The watermark was not updated.")
        raise typer.Exit(ExitCode.SIGINT)
    except StagingPermissionError as e:
        if run_log is not None:
            run_log.log_error(str(e), path=str(e.path))
        print_permission_error(e.path)
        raise typer.Exit(ExitCode.PERMISSION_DENIED)
    except DaemonShutdownError as e:
        if run_log is not None:
            run_log.log_error(str(e))
        print_error(
            "Could not stop the indexing daemon",
            reason=str(e),
            solution=f"Close {config.daemon.process_name} manually and try again",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except StoreError as e:
        if run_log is not None:
            run_log.log_error(str(e), command=e.command)
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    finally:
        handler.unregister()

    result = orchestrator.get_result()
    print_summary(result)
    raise typer.Exit(exit_code_for(result))
