"""
Configuration data models for assetsync.

These models define the structure of .assetsync.json and
~/.config/assetsync/config.json files, with validation and type safety
via Pydantic.
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceConfig(BaseModel):
    """
    Layout of the local content being installed.

    All paths are relative to the source root (the directory the
    installer runs from).
    """
    scripts_dir: str = Field(
        default="scripts",
        description="Directory of flat script files"
    )
    assets_dir: str = Field(
        default="UserData/editing",
        description="Directory whose subdirectories are asset bundles"
    )
    settings_dir: str = Field(
        default="UserData/settings",
        description="Directory of settings override files"
    )
    watermark_file: str = Field(
        default=".lastinstall",
        description="Hidden marker file holding the last install timestamp"
    )
    descriptor_name: str = Field(
        default="config.txt",
        description="Descriptor file name inside each asset bundle"
    )


class TargetConfig(BaseModel):
    """
    Layout of the product installation that owns the content store.

    Paths other than install_path are relative to install_path.
    """
    install_path: Optional[Path] = Field(
        default=None,
        description="Root of the product installation"
    )
    scripts_dir: str = Field(
        default="scripts",
        description="Where script files are copied to"
    )
    editing_dir: str = Field(
        default="UserData/editing",
        description="The store's 'open for edit' area"
    )
    settings_dir: str = Field(
        default="UserData/settings",
        description="Where settings override files are copied to"
    )
    patch_file: str = Field(
        default="UserData/settings/globalmodule.txt",
        description="Configuration file patched after staging"
    )


class StoreConfig(BaseModel):
    """
    Store command-line utility configuration.

    Controls how the store's protocol executable is invoked.
    """
    executable: str = Field(
        default="bin/TrainzUtil.exe",
        description="Protocol executable, relative to the install path"
    )
    timeout_seconds: int = Field(
        default=300,
        ge=1,
        description="Hard timeout for a single protocol call"
    )
    commit_attempts: int = Field(
        default=5,
        ge=1,
        description="Commit attempts per leftover asset during reconciliation"
    )
    echo_text: str = Field(
        default="TADDaemon started!",
        description="Text echoed through the store after scripts are staged"
    )


class DaemonConfig(BaseModel):
    """
    Companion processes the installer must coordinate with.
    """
    process_name: str = Field(
        default="TADDaemon",
        description="Indexing daemon stopped before scripts are copied"
    )
    blocking_processes: list[str] = Field(
        default_factory=lambda: ["trainz"],
        description="Processes that must not be running when installing"
    )


class PatchConfig(BaseModel):
    """
    Line-offset configuration patch applied during finalization.
    """
    enabled: bool = Field(
        default=True,
        description="Apply the configuration patch"
    )
    marker: str = Field(
        default="legacy-support-mode",
        description="Text identifying the marker line"
    )
    line_offset: int = Field(
        default=2,
        ge=1,
        description="Distance from the marker line to the patched line"
    )


class LoggingConfig(BaseModel):
    """Structured run log settings."""
    run_log: bool = Field(
        default=True,
        description="Write a JSONL run log under the XDG data directory"
    )


class SyncConfig(BaseModel):
    """
    Top-level assetsync configuration.

    This is the root configuration model that encompasses all settings.
    It's loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = SyncConfig(
        ...     target=TargetConfig(install_path=Path("C:/Games/Trainz")),
        ...     store=StoreConfig(timeout_seconds=120),
        ... )
        >>> config.store.commit_attempts
        5
    """
    source: SourceConfig = Field(
        default_factory=SourceConfig,
        description="Local content layout"
    )
    target: TargetConfig = Field(
        default_factory=TargetConfig,
        description="Product installation layout"
    )
    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Store protocol executable"
    )
    daemon: DaemonConfig = Field(
        default_factory=DaemonConfig,
        description="Companion processes"
    )
    patch: PatchConfig = Field(
        default_factory=PatchConfig,
        description="Configuration patch"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Run log settings"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,  # Validate on field assignment
    )

    @field_validator('target', mode='before')
    @classmethod
    def validate_target(
        cls, v: Union[str, Path, dict, TargetConfig]
    ) -> Union[dict, TargetConfig]:
        """Convert a bare install path to TargetConfig."""
        if isinstance(v, (str, Path)):
            return {"install_path": v}
        return v
