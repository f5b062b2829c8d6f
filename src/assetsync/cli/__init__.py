"""
Assetsync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from assetsync import __version__
from assetsync.cli import changes, install, reconcile, store
from assetsync.cli.common import setup_logging

# Help panel names for command grouping
PANEL_KEY = "Key Commands"
PANEL_RECOVERY = "Recover an Installation"

app = typer.Typer(
    name="assetsync",
    help="Incremental installer for store-managed content",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"assetsync version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version_flag: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Assetsync - install changed scripts and assets into a content store.

    Each run stages only what changed since the last successful install,
    then commits every asset and records the new install time.

    Quick Start:
        assetsync changes                    # See what would be installed
        assetsync install "C:/Games/Trainz"  # Install it

    Recovery:
        assetsync reconcile                  # Commit assets left open for edit
        assetsync store commit <KUID>        # Commit a single asset
    """
    setup_logging(debug)
    ctx.obj = {"debug": debug}


app.command(name="install", rich_help_panel=PANEL_KEY)(install.install)
app.command(name="changes", rich_help_panel=PANEL_KEY)(changes.changes)
app.command(name="reconcile", rich_help_panel=PANEL_RECOVERY)(reconcile.reconcile)
app.add_typer(store.app, name="store", rich_help_panel=PANEL_RECOVERY)


@app.command()
def version() -> None:
    """Show assetsync version and exit."""
    console.print(f"assetsync version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
