"""
Tests for configuration models and layered loading.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from assetsync.core.config import SyncConfig, TargetConfig, clear_cache, load_config
from assetsync.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_project_config_path,
    get_user_config_path,
    load_json_file,
)


def write_user_config(data: dict) -> Path:
    path = get_user_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


class TestModels:
    def test_defaults(self) -> None:
        config = SyncConfig()

        assert config.target.install_path is None
        assert config.source.watermark_file == ".lastinstall"
        assert config.store.executable == "bin/TrainzUtil.exe"
        assert config.store.timeout_seconds == 300
        assert config.store.commit_attempts == 5
        assert config.store.echo_text == "TADDaemon started!"
        assert config.daemon.process_name == "TADDaemon"
        assert config.daemon.blocking_processes == ["trainz"]
        assert config.patch.marker == "legacy-support-mode"
        assert config.patch.line_offset == 2
        assert config.logging.run_log is True

    def test_bare_target_path(self) -> None:
        config = SyncConfig(target="C:/Games/Trainz")

        assert config.target.install_path == Path("C:/Games/Trainz")

    def test_target_model(self, tmp_path: Path) -> None:
        config = SyncConfig(target=TargetConfig(install_path=tmp_path))

        assert config.target.install_path == tmp_path

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(store={"timeout_seconds": 0})

    def test_unknown_keys_allowed(self) -> None:
        config = SyncConfig(future_feature={"on": True})

        assert config.model_extra == {"future_feature": {"on": True}}


class TestHelpers:
    def test_deep_merge(self) -> None:
        merged = deep_merge({"a": 1, "b": {"x": 10, "y": 20}}, {"b": {"y": 30}, "c": 3})

        assert merged == {"a": 1, "b": {"x": 10, "y": 30}, "c": 3}

    def test_load_json_file_missing(self, tmp_path: Path) -> None:
        assert load_json_file(tmp_path / "none.json") is None

    def test_load_json_file_invalid(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        assert load_json_file(path) is None
        assert "Failed to parse config" in caplog.text

    def test_load_json_file_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        assert load_json_file(path) is None

    def test_user_config_path_follows_xdg(self, tmp_path: Path) -> None:
        assert get_user_config_path() == tmp_path / "xdg-config" / "assetsync" / "config.json"

    def test_project_config_path(self, tmp_path: Path) -> None:
        assert get_project_config_path(tmp_path) == tmp_path / ".assetsync.json"


class TestEnvOverrides:
    def test_install_path(self, monkeypatch) -> None:
        monkeypatch.setenv("ASSETSYNC_INSTALL_PATH", "/opt/trainz")

        result = apply_env_overrides({"target": {"scripts_dir": "s"}})

        assert result["target"] == {"scripts_dir": "s", "install_path": "/opt/trainz"}

    def test_numeric_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("ASSETSYNC_STORE_TIMEOUT", "60")
        monkeypatch.setenv("ASSETSYNC_COMMIT_ATTEMPTS", "8")

        result = apply_env_overrides({})

        assert result["store"] == {"timeout_seconds": 60, "commit_attempts": 8}

    def test_invalid_numbers_ignored(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv("ASSETSYNC_STORE_TIMEOUT", "soon")
        monkeypatch.setenv("ASSETSYNC_COMMIT_ATTEMPTS", "0")

        assert apply_env_overrides({}) == {}
        assert "Invalid ASSETSYNC_STORE_TIMEOUT" in caplog.text
        assert "ASSETSYNC_COMMIT_ATTEMPTS must be >= 1" in caplog.text

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("1", True)])
    def test_run_log(self, monkeypatch, value: str, expected: bool) -> None:
        monkeypatch.setenv("ASSETSYNC_RUN_LOG", value)

        assert apply_env_overrides({})["logging"] == {"run_log": expected}


class TestLoadConfig:
    def test_defaults_only(self, tmp_path: Path) -> None:
        config = load_config(tmp_path, use_cache=False)

        assert config == SyncConfig()

    def test_precedence(self, tmp_path: Path, monkeypatch) -> None:
        write_user_config({"store": {"timeout_seconds": 100, "commit_attempts": 2}})
        (tmp_path / ".assetsync.json").write_text(json.dumps({"store": {"timeout_seconds": 200}}))
        monkeypatch.setenv("ASSETSYNC_COMMIT_ATTEMPTS", "9")

        config = load_config(tmp_path, use_cache=False)

        assert config.store.timeout_seconds == 200
        assert config.store.commit_attempts == 9

    def test_nested_merge_keeps_defaults(self, tmp_path: Path) -> None:
        (tmp_path / ".assetsync.json").write_text(
            json.dumps({"target": {"install_path": str(tmp_path / "install")}})
        )

        config = load_config(tmp_path, use_cache=False)

        assert config.target.install_path == tmp_path / "install"
        assert config.target.editing_dir == "UserData/editing"

    def test_cache(self, tmp_path: Path) -> None:
        first = load_config(tmp_path)
        (tmp_path / ".assetsync.json").write_text(json.dumps({"store": {"timeout_seconds": 5}}))

        assert load_config(tmp_path) is first

        clear_cache()
        assert load_config(tmp_path).store.timeout_seconds == 5

    def test_cache_is_per_source_root(self, tmp_path: Path) -> None:
        first_root = tmp_path / "first"
        second_root = tmp_path / "second"
        first_root.mkdir()
        second_root.mkdir()
        (second_root / ".assetsync.json").write_text(
            json.dumps({"store": {"timeout_seconds": 5}})
        )

        first = load_config(first_root)
        second = load_config(second_root)

        assert first.store.timeout_seconds == 300
        assert second.store.timeout_seconds == 5
        assert load_config(first_root) is first

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        (tmp_path / ".assetsync.json").write_text(json.dumps({"patch": {"line_offset": 0}}))

        with pytest.raises(ValidationError):
            load_config(tmp_path, use_cache=False)
