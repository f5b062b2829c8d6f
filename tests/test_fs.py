"""
Tests for filesystem staging helpers.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from assetsync.utils.fs import (
    copy_directory,
    remove_directory,
    replace_file,
    set_hidden,
    write_atomically,
)


class TestReplaceFile:
    def test_creates_and_overwrites(self, tmp_path: Path) -> None:
        source = tmp_path / "a.gs"
        target = tmp_path / "out" / "a.gs"
        target.parent.mkdir()
        source.write_text("new")

        replace_file(source, target)
        assert target.read_text() == "new"

        source.write_text("newer")
        replace_file(source, target)
        assert target.read_text() == "newer"


class TestCopyDirectory:
    def test_recursive_copy(self, tmp_path: Path) -> None:
        source = tmp_path / "bundle"
        (source / "textures").mkdir(parents=True)
        (source / "config.txt").write_text("kuid <kuid:1:1>")
        (source / "textures" / "body.texture").write_text("pixels")

        copy_directory(source, tmp_path / "copy")

        assert (tmp_path / "copy" / "config.txt").read_text() == "kuid <kuid:1:1>"
        assert (tmp_path / "copy" / "textures" / "body.texture").read_text() == "pixels"

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            copy_directory(tmp_path / "nope", tmp_path / "copy")

    def test_permission_error_propagates(self, tmp_path: Path) -> None:
        source = tmp_path / "bundle"
        source.mkdir()
        (source / "a").write_text("a")

        with patch("assetsync.utils.fs.shutil.copy2", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                copy_directory(source, tmp_path / "copy")


class TestRemoveDirectory:
    def test_removes_tree(self, tmp_path: Path) -> None:
        target = tmp_path / "edit"
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "f").write_text("x")

        remove_directory(target)

        assert not target.exists()

    def test_missing_is_fine(self, tmp_path: Path) -> None:
        remove_directory(tmp_path / "nope")


class TestWriteAtomically:
    def test_replaces_content(self, tmp_path: Path) -> None:
        path = tmp_path / "globalmodule.txt"
        path.write_bytes(b"old")

        write_atomically(path, b"new")

        assert path.read_bytes() == b"new"
        assert [p.name for p in tmp_path.iterdir()] == ["globalmodule.txt"]

    def test_failed_replace_cleans_up(self, tmp_path: Path) -> None:
        path = tmp_path / "globalmodule.txt"
        path.write_bytes(b"old")

        with patch.object(Path, "replace", side_effect=PermissionError("locked")):
            with pytest.raises(PermissionError):
                write_atomically(path, b"new")

        assert path.read_bytes() == b"old"
        assert [p.name for p in tmp_path.iterdir()] == ["globalmodule.txt"]


class TestSetHidden:
    def test_noop_off_windows(self, tmp_path: Path) -> None:
        path = tmp_path / ".lastinstall"
        path.write_text("1\n")

        with patch("assetsync.utils.fs.IS_WINDOWS", False):
            set_hidden(path)
            set_hidden(path, False)

        assert path.read_text() == "1\n"
