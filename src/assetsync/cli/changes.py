"""
Assetsync CLI - Changes command.

Shows what the next install would stage without touching the store.
"""

from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from assetsync.cli.common import resolve_config
from assetsync.cli.errors import ExitCode
from assetsync.core.content import detect_changes
from assetsync.core.sync.watermark import FIRST_RUN, read_watermark

console = Console()


def changes(
    source: Path = typer.Option(
        Path("."),
        "--source",
        "-s",
        help="Root of the content to inspect",
    ),
) -> None:
    """
    List scripts and assets changed since the last install.

    Exits with code 3 when there is nothing to install.
    """
    config = resolve_config(source)
    source_dir = source.resolve()

    watermark = read_watermark(source_dir / config.source.watermark_file)
    change_set = detect_changes(
        source_dir / config.source.scripts_dir,
        source_dir / config.source.assets_dir,
        watermark,
        descriptor_name=config.source.descriptor_name,
    )

    if watermark == FIRST_RUN:
        console.print("[dim]No previous install recorded; everything is new.[/dim]")
    else:
        since = datetime.fromtimestamp(watermark).strftime("%Y-%m-%d %H:%M:%S")
        console.print(f"[dim]Last install: {since}[/dim]")

    if change_set.is_empty:
        console.print("Nothing new to install.")
        raise typer.Exit(ExitCode.NOTHING_TO_DO)

    table = Table(title="Pending Changes")
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("Identifier", style="dim")

    for script in change_set.scripts:
        table.add_row("script", script.name, "")
    for asset in change_set.assets:
        table.add_row("asset", asset.name, asset.identifier)

    console.print(table)
    console.print(
        f"Scripts: {len(change_set.scripts)}, Assets: {len(change_set.assets)}"
    )
