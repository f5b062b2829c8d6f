"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import SyncConfig

logger = logging.getLogger(__name__)

# Per-session cache, keyed by resolved source root
_config_cache: dict[Path, SyncConfig] = {}


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/assetsync/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "assetsync" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Source root to search from (defaults to current directory)

    Returns:
        Path to .assetsync.json in the source root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".assetsync.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {"a": 1, "b": {"x": 10, "y": 30}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _env_int(name: str, minimum: int = 1) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s value '%s', ignoring", name, raw)
        return None
    if value < minimum:
        logger.warning("%s must be >= %d, got %d, ignoring", name, minimum, value)
        return None
    return value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        ASSETSYNC_INSTALL_PATH - overrides target.install_path
        ASSETSYNC_STORE_TIMEOUT - overrides store.timeout_seconds
        ASSETSYNC_COMMIT_ATTEMPTS - overrides store.commit_attempts
        ASSETSYNC_RUN_LOG - overrides logging.run_log

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if install_path := os.environ.get("ASSETSYNC_INSTALL_PATH"):
        result["target"] = deep_merge(result.get("target", {}), {"install_path": install_path})

    if (timeout := _env_int("ASSETSYNC_STORE_TIMEOUT")) is not None:
        result["store"] = deep_merge(result.get("store", {}), {"timeout_seconds": timeout})

    if (attempts := _env_int("ASSETSYNC_COMMIT_ATTEMPTS")) is not None:
        result["store"] = deep_merge(result.get("store", {}), {"commit_attempts": attempts})

    if run_log_str := os.environ.get("ASSETSYNC_RUN_LOG"):
        run_log = run_log_str.lower() not in ("false", "0", "")
        result["logging"] = deep_merge(result.get("logging", {}), {"run_log": run_log})

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Model defaults cover everything else; this only pins the values that
    must never silently drift.
    """
    return {
        "store": {"timeout_seconds": 300, "commit_attempts": 5},
        "patch": {"marker": "legacy-support-mode", "line_offset": 2},
    }


def load_config(source_dir: Path | None = None, use_cache: bool = True) -> SyncConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (ASSETSYNC_*)
        2. Project config (.assetsync.json in the source root)
        3. User config (~/.config/assetsync/config.json)
        4. Hardcoded defaults

    Args:
        source_dir: Source root to load .assetsync.json from (defaults to cwd)
        use_cache: If True, return the config cached for this source root

    Returns:
        Validated SyncConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    cache_key = (source_dir or Path.cwd()).resolve()
    if use_cache and cache_key in _config_cache:
        return _config_cache[cache_key]

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(source_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = SyncConfig(**merged)
    _config_cache[cache_key] = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    _config_cache.clear()
