"""
Tests for change detection against the install watermark.
"""

from pathlib import Path

from helpers import NEW_MTIME, OLD_MTIME, WATERMARK, make_asset, make_script, set_mtime

from assetsync.core.content.detector import (
    detect_changes,
    find_updated_assets,
    find_updated_scripts,
)
from assetsync.core.content.models import ChangeSet, ScriptUnit


class TestFindUpdatedScripts:
    def test_strict_mtime_boundary(self, tmp_path: Path) -> None:
        scripts = tmp_path / "scripts"
        make_script(scripts, "at.gs", mtime=WATERMARK)
        make_script(scripts, "before.gs", mtime=WATERMARK - 1)
        make_script(scripts, "after.gs", mtime=WATERMARK + 1)

        updated = find_updated_scripts(scripts, WATERMARK)

        assert [s.name for s in updated] == ["after.gs"]

    def test_sorted_lexicographically(self, tmp_path: Path) -> None:
        scripts = tmp_path / "scripts"
        for name in ["zeta.gs", "Alpha.gs", "beta.gs"]:
            make_script(scripts, name)

        updated = find_updated_scripts(scripts, WATERMARK)

        assert [s.name for s in updated] == ["Alpha.gs", "beta.gs", "zeta.gs"]

    def test_subdirectories_are_not_scripts(self, tmp_path: Path) -> None:
        scripts = tmp_path / "scripts"
        make_script(scripts, "top.gs")
        make_script(scripts / "nested", "deep.gs")

        updated = find_updated_scripts(scripts, WATERMARK)

        assert [s.name for s in updated] == ["top.gs"]

    def test_paths_are_absolute(self, tmp_path: Path) -> None:
        scripts = tmp_path / "scripts"
        make_script(scripts, "a.gs")

        (unit,) = find_updated_scripts(scripts, WATERMARK)

        assert unit.path.is_absolute()

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert find_updated_scripts(tmp_path / "nope", 0) == []


class TestFindUpdatedAssets:
    def test_any_newer_file_marks_bundle_changed(self, tmp_path: Path) -> None:
        bundle = make_asset(tmp_path, "loco", "kuid:1:1", "Loco", mtime=OLD_MTIME)
        nested = bundle / "textures" / "body.texture"
        nested.parent.mkdir()
        nested.write_text("pixels")
        set_mtime(nested, NEW_MTIME)

        updated = find_updated_assets(tmp_path, WATERMARK)

        assert [a.identifier for a in updated] == ["kuid:1:1"]

    def test_unchanged_bundle_excluded(self, tmp_path: Path) -> None:
        make_asset(tmp_path, "loco", "kuid:1:1", "Loco", mtime=WATERMARK)

        assert find_updated_assets(tmp_path, WATERMARK) == []

    def test_bundle_without_identifier_excluded(self, tmp_path: Path) -> None:
        make_asset(tmp_path, "broken", None, "Broken")
        make_asset(tmp_path, "good", "kuid:1:1", "Good")

        updated = find_updated_assets(tmp_path, WATERMARK)

        assert [a.name for a in updated] == ["Good"]

    def test_bundle_without_descriptor_excluded(self, tmp_path: Path) -> None:
        bare = tmp_path / "bare"
        bare.mkdir()
        (bare / "mesh.im").write_text("mesh")
        set_mtime(bare, NEW_MTIME)

        assert find_updated_assets(tmp_path, WATERMARK) == []

    def test_duplicate_identifier_first_bundle_wins(self, tmp_path: Path) -> None:
        first = make_asset(tmp_path, "a_first", "kuid:1:1", "First")
        make_asset(tmp_path, "b_second", "kuid:1:1", "Second")

        updated = find_updated_assets(tmp_path, WATERMARK)

        assert len(updated) == 1
        assert updated[0].name == "First"
        assert updated[0].path == first.resolve()

    def test_sorted_by_name_case_insensitive(self, tmp_path: Path) -> None:
        make_asset(tmp_path, "d1", "kuid:1:1", "charlie")
        make_asset(tmp_path, "d2", "kuid:1:2", "Bravo")
        make_asset(tmp_path, "d3", "kuid:1:3", "alpha")

        updated = find_updated_assets(tmp_path, WATERMARK)

        assert [a.name for a in updated] == ["alpha", "Bravo", "charlie"]

    def test_missing_name_falls_back_to_directory(self, tmp_path: Path) -> None:
        make_asset(tmp_path, "unnamed_loco", "kuid:1:1")

        (unit,) = find_updated_assets(tmp_path, WATERMARK)

        assert unit.name == "unnamed_loco"

    def test_custom_descriptor_name(self, tmp_path: Path) -> None:
        bundle = make_asset(tmp_path, "loco", "kuid:1:1", "Loco")
        (bundle / "config.txt").rename(bundle / "asset.txt")

        assert find_updated_assets(tmp_path, WATERMARK) == []
        assert len(find_updated_assets(tmp_path, WATERMARK, "asset.txt")) == 1


class TestDetectChanges:
    def test_first_run_detects_everything(self, tmp_path: Path) -> None:
        make_script(tmp_path / "scripts", "a.gs", mtime=OLD_MTIME)
        make_asset(tmp_path / "assets", "loco", "kuid:1:1", "Loco", mtime=OLD_MTIME)

        changes = detect_changes(tmp_path / "scripts", tmp_path / "assets", 0)

        assert len(changes.scripts) == 1
        assert len(changes.assets) == 1
        assert changes.total_units == 2

    def test_nothing_changed(self, tmp_path: Path) -> None:
        make_script(tmp_path / "scripts", "a.gs", mtime=OLD_MTIME)

        changes = detect_changes(tmp_path / "scripts", tmp_path / "assets", WATERMARK)

        assert changes.is_empty


class TestChangeSet:
    def test_scripts_count_as_one_unit(self, tmp_path: Path) -> None:
        changes = ChangeSet(scripts=[ScriptUnit(tmp_path / "a"), ScriptUnit(tmp_path / "b")])

        assert changes.total_units == 1
        assert not changes.is_empty

    def test_empty(self) -> None:
        assert ChangeSet().total_units == 0
        assert ChangeSet().is_empty
