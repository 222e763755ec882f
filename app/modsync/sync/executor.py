"""Sync executor for installing and updating packages.

Each pending package goes through the same sequence: resolve the manifest
entry, stream the archive to a unique temporary file, extract it into a
unique temporary directory, locate the payload, preserve the package's
configuration folder, replace the installed copy, restore the
configuration folder, and clean up. Packages are processed one at a time
in list order; a failing package is reported and the batch continues.
"""

import logging
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path

from modsync.core.reconcile import ReconciliationEntry
from modsync.core.settings import DEFAULT_MANIFEST_PATHS
from modsync.models.action import (
    BatchResult,
    FailureReason,
    ItemResult,
    ProgressCallback,
    ProgressEvent,
    SyncStage,
)
from modsync.models.package import PackageDescriptor, PackageKind
from modsync.remote.client import RemoteError, ServerClient
from modsync.scanners.plugins import DEFAULT_ARTIFACT_SUFFIXES
from modsync.sync.archive import (
    ArchiveError,
    PayloadNotFoundError,
    backup_config_dir,
    bundle_folder_names,
    extract_archive,
    install_bundle,
    install_single_file,
    locate_bundle_root,
    locate_single_file,
    remove_path,
    restore_config_dir,
)
from modsync.sync.download import DEFAULT_CHUNK_SIZE, download_to_file, unique_temp_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR_NAME = "config"


class _StepFailed(Exception):
    """Carries the failure category of a single package out of a step."""

    def __init__(self, reason: FailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class SyncExecutor:
    """Installs or updates packages from the server.

    Args:
        client: Server client used for manifest lookups and downloads.
        install_root: The plugins directory.
        manifest_paths: Manifest candidates used when an entry has no
            usable manifest descriptor.
        temp_dir: Directory for archives and extraction folders. Defaults
            to the system temp directory.
        config_dir_name: Name of a bundle's configuration subfolder.
        chunk_size: Download chunk size in bytes.
        artifact_suffixes: File suffixes recognised as plugin binaries.
        on_progress: Optional subscriber for progress events.
    """

    def __init__(
        self,
        client: ServerClient,
        install_root: Path,
        *,
        manifest_paths: Sequence[str] = DEFAULT_MANIFEST_PATHS,
        temp_dir: Path | None = None,
        config_dir_name: str = DEFAULT_CONFIG_DIR_NAME,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        artifact_suffixes: tuple[str, ...] = DEFAULT_ARTIFACT_SUFFIXES,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._client = client
        self._root = install_root
        self._manifest_paths = tuple(manifest_paths)
        self._temp_dir = temp_dir
        self._config_dir_name = config_dir_name
        self._chunk_size = chunk_size
        self._suffixes = artifact_suffixes
        self._on_progress = on_progress

    def run(self, entries: Iterable[ReconciliationEntry]) -> BatchResult:
        """Sync every entry, strictly in order.

        Args:
            entries: Entries that need an install or update.

        Returns:
            BatchResult with one ItemResult per entry.
        """
        results = [self.sync_one(entry) for entry in entries]
        return BatchResult(items=tuple(results))

    def sync_one(self, entry: ReconciliationEntry) -> ItemResult:
        """Bring one package to the server's version.

        Never raises for per-package problems; they are returned as a
        failed ItemResult.

        Args:
            entry: Entry to sync.

        Returns:
            ItemResult describing the outcome.
        """
        self._emit(entry.name, SyncStage.PREPARING)

        descriptor = self._resolve_descriptor(entry)
        if descriptor is None:
            return self._fail(
                entry.name,
                FailureReason.NOT_IN_MANIFEST,
                f"{entry.name} is not listed in the server manifest",
            )

        temp_root = self._temp_dir or Path(tempfile.gettempdir())
        archive_path = unique_temp_path(temp_root, descriptor.name, ".zip")
        extract_dir = unique_temp_path(temp_root, f"{descriptor.name}_extract")
        backup_dir = unique_temp_path(temp_root, f"{descriptor.name}_config")

        try:
            temp_root.mkdir(parents=True, exist_ok=True)
            self._download(entry.name, descriptor, archive_path)
            self._extract(entry.name, archive_path, extract_dir)
            self._install(entry, descriptor, extract_dir, backup_dir)
        except _StepFailed as e:
            return self._fail(entry.name, e.reason, str(e))
        except OSError as e:
            return self._fail(entry.name, FailureReason.DOWNLOAD_FAILED, str(e))
        except Exception as e:
            logger.exception("Unexpected error while syncing %s", entry.name)
            return self._fail(entry.name, FailureReason.INSTALL_FAILED, str(e) or type(e).__name__)
        finally:
            self._cleanup(archive_path, extract_dir)

        logger.info("Installed %s %s", descriptor.name, descriptor.version)
        self._emit(entry.name, SyncStage.UP_TO_DATE, percent=100)
        return ItemResult(name=entry.name, success=True, version=descriptor.version)

    def _resolve_descriptor(self, entry: ReconciliationEntry) -> PackageDescriptor | None:
        """Use the entry's descriptor, re-fetching the manifest when stale."""
        descriptor = entry.descriptor
        if descriptor is not None and (descriptor.archive_locator or descriptor.download_url):
            return descriptor
        fresh = self._client.find_descriptor(entry.name, self._manifest_paths)
        return fresh or descriptor

    def _download(self, name: str, descriptor: PackageDescriptor, archive_path: Path) -> None:
        url = self._client.resolve_archive_url(descriptor)
        self._emit(name, SyncStage.DOWNLOADING)

        def report(percent: int | None) -> None:
            self._emit(name, SyncStage.DOWNLOADING, percent=percent)

        try:
            download_to_file(
                self._client,
                url,
                archive_path,
                chunk_size=self._chunk_size,
                on_percent=report,
            )
        except (RemoteError, OSError) as e:
            raise _StepFailed(FailureReason.DOWNLOAD_FAILED, str(e)) from e

    def _extract(self, name: str, archive_path: Path, extract_dir: Path) -> None:
        self._emit(name, SyncStage.EXTRACTING)
        try:
            extract_archive(archive_path, extract_dir)
            archive_path.unlink()
        except (ArchiveError, OSError) as e:
            raise _StepFailed(FailureReason.EXTRACT_FAILED, str(e)) from e

    def _install(
        self,
        entry: ReconciliationEntry,
        descriptor: PackageDescriptor,
        extract_dir: Path,
        backup_dir: Path,
    ) -> None:
        self._emit(entry.name, SyncStage.INSTALLING)
        try:
            if descriptor.kind == PackageKind.DIRECTORY_BUNDLE:
                payload = locate_bundle_root(extract_dir, bundle_folder_names(descriptor))
            else:
                payload = locate_single_file(extract_dir, self._suffixes)
        except PayloadNotFoundError as e:
            raise _StepFailed(FailureReason.PAYLOAD_NOT_FOUND, str(e)) from e

        local = entry.local
        if descriptor.kind == PackageKind.DIRECTORY_BUNDLE:
            folder_name = descriptor.name
            if local is not None and local.is_bundle:
                folder_name = local.install_folder_name or local.path.name
            destination = self._root / folder_name
        else:
            destination = self._root / payload.name

        backup: Path | None = None
        try:
            if descriptor.kind == PackageKind.DIRECTORY_BUNDLE:
                existing = local.path if local is not None and local.is_bundle else destination
                backup = backup_config_dir(existing, self._config_dir_name, backup_dir)

            # A previous install under another name or kind would be scanned twice
            if local is not None and local.path != destination:
                remove_path(local.path)

            if descriptor.kind == PackageKind.DIRECTORY_BUNDLE:
                install_bundle(payload, destination)
            else:
                install_single_file(payload, destination)

            if backup is not None:
                restore_config_dir(backup, destination, self._config_dir_name)
                backup = None
        except OSError as e:
            if backup is not None:
                self._rescue_config(backup, destination)
            raise _StepFailed(FailureReason.INSTALL_FAILED, str(e)) from e

    def _rescue_config(self, backup: Path, destination: Path) -> None:
        """Put a preserved config folder back after a failed install."""
        try:
            restore_config_dir(backup, destination, self._config_dir_name)
        except OSError as e:
            logger.error(
                "Could not restore configuration of %s from %s: %s", destination, backup, e
            )

    def _cleanup(self, *paths: Path) -> None:
        for path in paths:
            try:
                remove_path(path)
            except OSError as e:
                logger.warning("Could not remove temporary path %s: %s", path, e)

    def _fail(self, name: str, reason: FailureReason, message: str) -> ItemResult:
        logger.error("Sync failed for %s (%s): %s", name, reason.value, message)
        self._emit(name, SyncStage.FAILED, message=message)
        return ItemResult(name=name, success=False, reason=reason, error=message)

    def _emit(
        self,
        name: str,
        stage: SyncStage,
        *,
        percent: int | None = None,
        message: str | None = None,
    ) -> None:
        if self._on_progress is not None:
            self._on_progress(
                ProgressEvent(package=name, stage=stage, percent=percent, message=message)
            )
