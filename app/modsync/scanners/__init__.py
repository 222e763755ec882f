"""Local inventory scanners.

This module exports the scanner classes for finding installed packages.
"""

from modsync.scanners.base import Scanner
from modsync.scanners.metadata import (
    EmbeddedVersionReader,
    SidecarVersionReader,
    VersionReader,
    VersionReadError,
    get_version_reader,
)
from modsync.scanners.plugins import PluginScanner, find_artifact

__all__ = [
    "EmbeddedVersionReader",
    "PluginScanner",
    "Scanner",
    "SidecarVersionReader",
    "VersionReadError",
    "VersionReader",
    "find_artifact",
    "get_version_reader",
]
