"""Operations that change the local installation.

This module exports the package sync and removal executors, the config
synchroniser and the platform updater.
"""

from modsync.sync.archive import ArchiveError
from modsync.sync.configs import ConfigSynchronizer, ConfigSyncError, plan_config_sync
from modsync.sync.executor import SyncExecutor
from modsync.sync.platform import PlatformStatus, PlatformUpdateError, PlatformUpdater
from modsync.sync.removal import RemovalExecutor

__all__ = [
    "ArchiveError",
    "ConfigSyncError",
    "ConfigSynchronizer",
    "PlatformStatus",
    "PlatformUpdateError",
    "PlatformUpdater",
    "RemovalExecutor",
    "SyncExecutor",
    "plan_config_sync",
]
