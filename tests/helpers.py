"""
Test helpers: content builders with controlled mtimes and FakeStore, an
in-memory stand-in for the store's command-line utility.
"""

import os
import shutil
from collections.abc import Callable
from pathlib import Path

# Fixed instants used instead of "now" so mtime comparisons are exact
OLD_MTIME = 1_600_000_000
WATERMARK = 1_650_000_000
NEW_MTIME = 1_700_000_000
RUN_CLOCK = 1_750_000_000


def set_mtime(path: Path, mtime: float) -> None:
    """Set the mtime of a file, or of every file beneath a directory."""
    targets = [p for p in path.rglob("*") if p.is_file()] if path.is_dir() else [path]
    for target in targets:
        os.utime(target, (mtime, mtime))


def descriptor_text(identifier: str | None, name: str | None = None) -> str:
    lines = []
    if identifier is not None:
        lines.append(f"kuid                                    <{identifier}>")
    if name is not None:
        lines.append(f'username                                "{name}"')
    lines.append('kind                                    "traincar"')
    return "\n".join(lines) + "\n"


def make_asset(
    assets_dir: Path,
    dirname: str,
    identifier: str | None,
    name: str | None = None,
    *,
    mtime: float = NEW_MTIME,
    files: dict[str, str] | None = None,
) -> Path:
    """Create an asset bundle directory with a descriptor and payload files."""
    bundle = assets_dir / dirname
    bundle.mkdir(parents=True, exist_ok=True)
    (bundle / "config.txt").write_text(descriptor_text(identifier, name))
    for rel, content in (files or {"body.im": "mesh"}).items():
        path = bundle / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    set_mtime(bundle, mtime)
    return bundle


def make_script(scripts_dir: Path, name: str, *, mtime: float = NEW_MTIME) -> Path:
    scripts_dir.mkdir(parents=True, exist_ok=True)
    path = scripts_dir / name
    path.write_text(f"// {name}\n")
    set_mtime(path, mtime)
    return path


class FakeStore:
    """
    In-memory content store speaking the line protocol.

    Attributes:
        editing_dir: The installation's open-for-edit area.
        installed: Identifiers the store knows about.
        refuse_commit: Identifiers whose commit is always refused.
        refuse_install: Identifiers whose installfrompath is refused.
        committed: Identifier -> sorted relative file names at commit time.
        calls: Every (verb, *args) tuple received, in order.
        overrides: Verb -> callable(args) -> stdout, replacing default handling.
    """

    def __init__(self, editing_dir: Path, installed: set[str] | None = None) -> None:
        self.editing_dir = editing_dir
        self.installed = set(installed or ())
        self.refuse_commit: set[str] = set()
        self.refuse_install: set[str] = set()
        self.committed: dict[str, list[str]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.overrides: dict[str, Callable[[tuple[str, ...]], str]] = {}

    def calls_for(self, verb: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == verb]

    def edit_dir_for(self, identifier: str) -> Path:
        return self.editing_dir / identifier.replace(":", "_")

    def open_edit(self, identifier: str, files: dict[str, str] | None = None) -> Path:
        """Put an asset into the open-for-edit area as the store would."""
        directory = self.edit_dir_for(identifier)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "config.txt").write_text(descriptor_text(identifier, "Stale"))
        for rel, content in (files or {}).items():
            (directory / rel).write_text(content)
        return directory

    # StoreTransport
    def run(self, verb: str, *args: str) -> str:
        self.calls.append((verb, *args))
        if verb in self.overrides:
            return self.overrides[verb](args)
        return getattr(self, f"_{verb}")(*args)

    def _echo(self, text: str) -> str:
        return f"{text}\n"

    def _edit(self, identifier: str) -> str:
        if identifier not in self.installed:
            return f"- <{identifier}>: Asset is not installed\n"
        directory = self.open_edit(identifier)
        return f"Opening asset\n+ <{identifier}>: {directory}\n"

    def _installfrompath(self, path: str) -> str:
        descriptor = Path(path) / "config.txt"
        identifier = descriptor.read_text().split("<", 1)[1].split(">", 1)[0]
        if identifier in self.refuse_install:
            return f"- <{identifier}>: Install failed\n"
        self.installed.add(identifier)
        return f"+ <{identifier}>: Installed\n"

    def _commit(self, identifier: str) -> str:
        if identifier in self.refuse_commit:
            return f"- <{identifier}>: Asset has errors\n"
        directory = self.edit_dir_for(identifier)
        if directory.exists():
            self.committed[identifier] = sorted(
                p.relative_to(directory).as_posix() for p in directory.rglob("*") if p.is_file()
            )
            shutil.rmtree(directory)
        return f"+ <{identifier}>: Committed\n"

    def _revert(self, identifier: str) -> str:
        shutil.rmtree(self.edit_dir_for(identifier), ignore_errors=True)
        return f"+ <{identifier}>: Reverted\n"
