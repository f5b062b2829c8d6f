"""
Local content discovery.

Reads asset descriptors and finds the scripts and asset bundles that
changed since the last install.
"""

from assetsync.core.content.descriptor import read_descriptor
from assetsync.core.content.detector import detect_changes
from assetsync.core.content.models import AssetDescriptor, AssetUnit, ChangeSet, ScriptUnit

__all__ = [
    "AssetDescriptor",
    "AssetUnit",
    "ChangeSet",
    "ScriptUnit",
    "detect_changes",
    "read_descriptor",
]
