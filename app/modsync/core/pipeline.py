"""Refresh, decide and apply.

A SyncSession ties the pieces together: it fetches the manifest, scans
the plugins directory and reconciles the two (refresh), decides what the
user should do next (primary action), and performs the combined apply:
config sync first, then package sync, then orphan removal, then a fresh
refresh to confirm convergence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from modsync.core.paths import GameLayout, StartupError, get_game_root
from modsync.core.reconcile import ReconcileResult, reconcile
from modsync.core.settings import AppSettings
from modsync.models.action import BatchResult, ProgressCallback
from modsync.remote.client import ServerClient
from modsync.scanners.base import Scanner
from modsync.scanners.metadata import VersionReader, get_version_reader
from modsync.scanners.plugins import PluginScanner
from modsync.sync.configs import ConfigSynchronizer
from modsync.sync.executor import SyncExecutor
from modsync.sync.platform import PlatformStatus, PlatformUpdater
from modsync.sync.removal import RemovalExecutor
from modsync.utils.shell import spawn_detached

logger = logging.getLogger(__name__)


class PrimaryAction(str, Enum):
    """What the user should do next.

    Attributes:
        PLATFORM_UPDATE: The server runs a newer platform; update it first.
        UPDATE: Packages differ from the manifest; sync them.
        LAUNCH: Everything matches; start the game.
        OFFLINE: The server did not provide a manifest.
    """

    PLATFORM_UPDATE = "platform-update"
    UPDATE = "update"
    LAUNCH = "launch"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class RefreshResult:
    """Snapshot of both sides at one point in time.

    Attributes:
        online: Whether the server provided a non-empty manifest.
        reconcile: Reconciliation of manifest and local install.
        platform: Platform version comparison.
    """

    online: bool
    reconcile: ReconcileResult
    platform: PlatformStatus

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "online": self.online,
            "platform": self.platform.to_dict(),
            **self.reconcile.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of a combined apply.

    Attributes:
        configs: Config files written by the config sync.
        sync: Results of installing and updating packages.
        removal: Results of removing orphaned packages.
        after: Refresh taken after all changes.
    """

    configs: tuple[str, ...] = ()
    sync: BatchResult = field(default_factory=BatchResult)
    removal: BatchResult = field(default_factory=BatchResult)
    after: RefreshResult | None = None

    @property
    def success(self) -> bool:
        """True if every package operation succeeded."""
        return self.sync.success and self.removal.success

    @property
    def converged(self) -> bool:
        """True if the follow-up refresh found nothing left to do."""
        return self.after is not None and self.after.reconcile.is_fully_synced


def primary_action(refresh: RefreshResult) -> PrimaryAction:
    """Decide the next step; the platform gate is checked first."""
    if refresh.platform.update_available:
        return PrimaryAction.PLATFORM_UPDATE
    if not refresh.online:
        return PrimaryAction.OFFLINE
    if not refresh.reconcile.is_fully_synced:
        return PrimaryAction.UPDATE
    return PrimaryAction.LAUNCH


class SyncSession:
    """One client session against one server and one game install.

    Args:
        settings: Loaded client settings.
        client: Mod server client. Built from the settings when None.
        scanner: Local inventory scanner. Built from the settings when None.
        game_root: Game root directory. Defaults to get_game_root().
        version_reader: Version reader for plugins and the core binary.
        temp_dir: Scratch directory for package downloads.
        on_progress: Optional subscriber for progress events.
    """

    def __init__(
        self,
        settings: AppSettings,
        client: ServerClient | None = None,
        scanner: Scanner | None = None,
        *,
        game_root: Path | None = None,
        version_reader: VersionReader | None = None,
        temp_dir: Path | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.settings = settings
        self.layout = GameLayout(game_root or get_game_root())
        self.client = client or ServerClient(settings.base_url)
        self.reader = version_reader or get_version_reader(settings.version_source)
        self.scanner = scanner or PluginScanner(
            self.layout.plugins_dir,
            excluded_names=settings.excluded_packages,
            excluded_folders=settings.excluded_folders,
            version_reader=self.reader,
        )
        self.temp_dir = temp_dir
        self.on_progress = on_progress

        if client is None and settings.platform_base_url != settings.base_url:
            self.platform_client = ServerClient(settings.platform_base_url)
        else:
            self.platform_client = self.client

    def refresh(self) -> RefreshResult:
        """Fetch the manifest, scan the install and reconcile.

        An empty manifest means the server is offline; the reconciliation
        still runs, so every installed package shows up as orphaned.
        """
        remote = self.client.fetch_manifest(self.settings.manifest_paths)
        local = list(self.scanner.scan())
        result = reconcile(remote, local)
        platform = self.platform_updater().check()
        logger.debug(
            "Refreshed: %d remote, %d local, %d changes",
            len(remote),
            len(local),
            result.total_changes,
        )
        return RefreshResult(online=bool(remote), reconcile=result, platform=platform)

    def primary_action(self, refresh: RefreshResult) -> PrimaryAction:
        """Decide the next step for a refresh."""
        return primary_action(refresh)

    def platform_updater(self) -> PlatformUpdater:
        """Build a platform updater for this install."""
        return PlatformUpdater(
            self.platform_client,
            self.layout.root,
            version_reader=self.reader,
            on_progress=self.on_progress,
        )

    def apply(self, refresh: RefreshResult, *, remove_orphans: bool = True) -> ApplyResult:
        """Run the combined apply for a refresh.

        Nothing is changed while offline; an empty manifest would
        otherwise turn every installed package into a removal.

        Args:
            refresh: Refresh the apply is based on.
            remove_orphans: Whether to delete packages the server no
                longer lists.

        Returns:
            ApplyResult including a follow-up refresh.

        Raises:
            ConfigSyncError: If a config file fails to sync. No package
                has been touched in that case.
        """
        if not refresh.online:
            logger.warning("Server offline, nothing applied")
            return ApplyResult(after=refresh)

        configs = ConfigSynchronizer(
            self.client,
            self.layout.config_dir,
            self.settings.excluded_configs,
        ).sync()

        executor = SyncExecutor(
            self.client,
            self.layout.plugins_dir,
            manifest_paths=self.settings.manifest_paths,
            temp_dir=self.temp_dir,
            on_progress=self.on_progress,
        )
        sync_result = executor.run(refresh.reconcile.pending)

        removal_result = BatchResult()
        if remove_orphans and refresh.reconcile.orphaned:
            remover = RemovalExecutor(self.layout.plugins_dir, on_progress=self.on_progress)
            removal_result = remover.remove(refresh.reconcile.orphaned)

        return ApplyResult(
            configs=tuple(configs),
            sync=sync_result,
            removal=removal_result,
            after=self.refresh(),
        )

    def close(self) -> None:
        """Close the server sessions."""
        self.client.close()
        if self.platform_client is not self.client:
            self.platform_client.close()


def launch_client(path: Path) -> int:
    """Start the game client without waiting for it.

    Args:
        path: Launcher executable.

    Returns:
        Process id of the started client.

    Raises:
        StartupError: If the executable is missing or cannot be started.
    """
    if not path.is_file():
        raise StartupError(f"{path.name} not found in {path.parent}")

    result = spawn_detached(path)
    if not result.success:
        logger.error("Failed to start %s: %s", path, result.error)
        raise StartupError(f"Failed to start {path.name}: {result.error}")

    logger.info("Started %s (pid %s)", path, result.pid)
    return result.pid
