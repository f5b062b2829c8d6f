"""
Pytest configuration and shared fixtures.

Provides isolated XDG/env settings, temp source and installation trees,
and a FakeStore-backed StoreClient.
"""

import os

import pytest
from helpers import FakeStore

from assetsync.core.config import SyncConfig, TargetConfig, clear_cache
from assetsync.core.store import StoreClient

ENV_KEYS = (
    "ASSETSYNC_INSTALL_PATH",
    "ASSETSYNC_STORE_TIMEOUT",
    "ASSETSYNC_COMMIT_ATTEMPTS",
    "ASSETSYNC_RUN_LOG",
)

# ==============================================================================
# Environment isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real user config, data dir and ASSETSYNC_* vars."""
    for key in {*ENV_KEYS, *(k for k in os.environ if k.startswith("ASSETSYNC_"))}:
        # setenv first so values loaded from .env files are removed on teardown
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def source_root(tmp_path):
    """
    Provide a content source tree.

    Creates:
    - scripts/
    - UserData/editing/
    - UserData/settings/
    """
    root = tmp_path / "source"
    (root / "scripts").mkdir(parents=True)
    (root / "UserData" / "editing").mkdir(parents=True)
    (root / "UserData" / "settings").mkdir(parents=True)
    return root


@pytest.fixture
def install_root(tmp_path):
    """
    Provide a product installation tree.

    Creates:
    - bin/TrainzUtil.exe (empty placeholder)
    - scripts/
    - UserData/editing/
    - UserData/settings/
    """
    root = tmp_path / "install"
    (root / "bin").mkdir(parents=True)
    (root / "bin" / "TrainzUtil.exe").write_text("")
    (root / "scripts").mkdir()
    (root / "UserData" / "editing").mkdir(parents=True)
    (root / "UserData" / "settings").mkdir(parents=True)
    return root


@pytest.fixture
def sync_config(install_root):
    """SyncConfig pointing at install_root with defaults for everything else."""
    return SyncConfig(target=TargetConfig(install_path=install_root))


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def fake_store(install_root):
    """FakeStore bound to install_root's open-for-edit area."""
    return FakeStore(install_root / "UserData" / "editing")


@pytest.fixture
def store_client(fake_store):
    return StoreClient(fake_store)
