"""Data models for modsync.

This module exports the core data structures used throughout the application.
"""

from modsync.models.action import (
    BatchResult,
    FailureReason,
    ItemResult,
    ProgressCallback,
    ProgressEvent,
    SyncStage,
)
from modsync.models.package import (
    MISSING_VERSION,
    LocalPackage,
    PackageDescriptor,
    PackageKind,
    package_key,
)

__all__ = [
    "MISSING_VERSION",
    "BatchResult",
    "FailureReason",
    "ItemResult",
    "LocalPackage",
    "PackageDescriptor",
    "PackageKind",
    "ProgressCallback",
    "ProgressEvent",
    "SyncStage",
    "package_key",
]
