"""
assetsync - Incremental content installer

A CLI tool that stages locally-authored scripts and asset bundles into a
managed content store, committing each unit through the store's
command-line protocol.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from assetsync.core.config.models import SyncConfig
from assetsync.core.content.models import AssetUnit, ChangeSet, ScriptUnit

__all__ = ["AssetUnit", "ChangeSet", "ScriptUnit", "SyncConfig", "__version__"]
