"""Utility modules for assetsync.

The run log lives in ``assetsync.utils.logging`` and is imported from
there directly; it depends on the sync event models.
"""

from .fs import copy_directory, remove_directory, replace_file, set_hidden, write_atomically

__all__ = [
    "copy_directory",
    "remove_directory",
    "replace_file",
    "set_hidden",
    "write_atomically",
]
