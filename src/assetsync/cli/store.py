"""
Assetsync CLI - Store commands.

Single protocol calls against the content store, for inspecting or
recovering an installation by hand.
"""

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

from assetsync.cli.common import build_client, resolve_config
from assetsync.cli.errors import ExitCode, print_error, print_store_error
from assetsync.core.store import StoreClient, StoreError, StoreRejectedError

app = typer.Typer(
    name="store",
    help="Run single content store commands",
    no_args_is_help=True,
)

console = Console()

InstallPathOption = typer.Option(
    None,
    "--install-path",
    "-i",
    help="Product installation directory (defaults to the configured one)",
)


def _client(install_path: Path | None) -> StoreClient:
    return build_client(resolve_config(Path("."), install_path))


def _report_rejection(e: StoreRejectedError) -> NoReturn:
    print_error("Store refused the command", reason=str(e))
    raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def echo(
    text: str = typer.Argument(..., help="Text the store should print back"),
    install_path: Path | None = InstallPathOption,
) -> None:
    """Check that the store is responsive by echoing text through it."""
    client = _client(install_path)
    try:
        confirmed = client.echo(text)
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if not confirmed:
        print_error("Store did not echo the text back", reason=text)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(text)


@app.command()
def edit(
    identifier: str = typer.Argument(..., help="Asset identifier, e.g. 123456:1001"),
    install_path: Path | None = InstallPathOption,
) -> None:
    """Open an asset for edit and print its edit directory."""
    client = _client(install_path)
    try:
        edit_dir = client.open_for_edit(identifier)
    except StoreRejectedError as e:
        _report_rejection(e)
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if edit_dir is None:
        print_error(f"Store gave no edit directory for <{identifier}>")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(str(edit_dir), soft_wrap=True)


@app.command()
def commit(
    identifier: str = typer.Argument(..., help="Asset identifier"),
    install_path: Path | None = InstallPathOption,
) -> None:
    """Commit an asset that is open for edit."""
    client = _client(install_path)
    try:
        committed = client.commit(identifier)
    except StoreRejectedError as e:
        _report_rejection(e)
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if not committed:
        print_error(f"Store gave no result committing <{identifier}>")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(f"[green]✓[/green] Committed <{identifier}>")


@app.command()
def revert(
    identifier: str = typer.Argument(..., help="Asset identifier"),
    install_path: Path | None = InstallPathOption,
) -> None:
    """Discard pending edits to an asset."""
    client = _client(install_path)
    try:
        client.revert(identifier)
    except StoreRejectedError as e:
        _report_rejection(e)
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(f"[green]✓[/green] Reverted <{identifier}>")


@app.command(name="install")
def install_from_path(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Asset bundle directory"),
    install_path: Path | None = InstallPathOption,
) -> None:
    """Install an asset bundle directly from a directory."""
    client = _client(install_path)
    try:
        installed = client.install_from_path(path.resolve())
    except StoreRejectedError as e:
        _report_rejection(e)
    except StoreError as e:
        print_store_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(f"[green]✓[/green] Installed {installed or path.name}")
