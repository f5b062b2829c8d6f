"""
Assetsync CLI - Reconcile command.

Retries commits for assets left open for edit by an earlier install,
without staging anything new.
"""

from pathlib import Path

import typer
from rich.console import Console

from assetsync.cli.common import build_client, require_install_path, resolve_config
from assetsync.cli.errors import ExitCode, print_store_error
from assetsync.core.store import StoreError
from assetsync.core.sync import reconcile_open_edits

console = Console()


def reconcile(
    install_path: Path | None = typer.Argument(
        None,
        help="Product installation directory (defaults to the configured one)",
    ),
    attempts: int | None = typer.Option(
        None,
        "--attempts",
        "-n",
        min=1,
        help="Commit attempts per asset (defaults to store.commit_attempts)",
    ),
) -> None:
    """
    Commit every asset still open for edit in the installation.

    Exits with code 4 if some assets could not be committed.
    """
    config = resolve_config(Path("."), install_path)
    client = build_client(config)
    open_edits_root = require_install_path(config) / config.target.editing_dir

    try:
        ledger = reconcile_open_edits(
            open_edits_root,
            client,
            attempts=attempts or config.store.commit_attempts,
            descriptor_name=config.source.descriptor_name,
        )
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if not ledger:
        console.print("[green]✓[/green] No assets left open for edit.")
        return

    console.print(f"[yellow]{len(ledger)} asset(s) could not be committed:[/yellow]")
    for identifier, name in ledger.entries.items():
        console.print(f'  "{name}" <{identifier}>' if name else f"  <{identifier}>")
    raise typer.Exit(ExitCode.FAILURES_RECORDED)
