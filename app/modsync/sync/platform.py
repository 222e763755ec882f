"""Platform version gate and updater.

The platform (the game's modding runtime) is versioned separately from
the mod packages. Its installed version is read from the core binary and
compared numerically with the version the server reports. When the
server is ahead, the full platform archive is downloaded and extracted
over the game root; every file it overwrites is backed up first and put
back if anything goes wrong.
"""

import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path

from modsync.core.paths import GameLayout
from modsync.core.versions import is_platform_update_available
from modsync.models.action import ProgressCallback, ProgressEvent, SyncStage
from modsync.remote.client import RemoteError, ServerClient
from modsync.scanners.metadata import EmbeddedVersionReader, VersionReader, VersionReadError
from modsync.sync.archive import member_target, remove_path
from modsync.sync.download import DEFAULT_CHUNK_SIZE, download_to_file

logger = logging.getLogger(__name__)

# Loader shim that must never be overwritten while the game may hold it open
DEFAULT_SKIP_FILES: tuple[str, ...] = ("winhttp.dll",)

PLATFORM_PACKAGE = "platform"
UPDATE_ARCHIVE_NAME = "spt_update.zip"
BACKUP_DIR_NAME = "backup"


class PlatformUpdateError(Exception):
    """Raised when the platform update cannot be completed."""


@dataclass(frozen=True, slots=True)
class PlatformStatus:
    """Installed and advertised platform versions.

    Attributes:
        local_version: Version of the installed core binary, None if unreadable.
        remote_version: Version reported by the server, None if unavailable.
        update_available: True if the server version is strictly greater.
    """

    local_version: str | None
    remote_version: str | None
    update_available: bool

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "local_version": self.local_version,
            "remote_version": self.remote_version,
            "update_available": self.update_available,
        }


class PlatformUpdater:
    """Checks and installs platform updates.

    Args:
        client: Client for the platform server.
        game_root: Game root directory.
        version_reader: Reader for the core binary's version.
        skip_files: File names (case-insensitive) never extracted.
        chunk_size: Download chunk size in bytes.
        on_progress: Optional subscriber for progress events.
    """

    def __init__(
        self,
        client: ServerClient,
        game_root: Path,
        *,
        version_reader: VersionReader | None = None,
        skip_files: tuple[str, ...] = DEFAULT_SKIP_FILES,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._client = client
        self._layout = GameLayout(game_root)
        self._reader = version_reader or EmbeddedVersionReader()
        self._skip = {name.casefold() for name in skip_files}
        self._chunk_size = chunk_size
        self._on_progress = on_progress

    def local_version(self) -> str | None:
        """Read the installed platform version, None if unreadable."""
        try:
            return self._reader.read(self._layout.core_binary)
        except VersionReadError as e:
            logger.debug("Cannot read platform version: %s", e)
            return None

    def check(self) -> PlatformStatus:
        """Compare the installed platform with the server's."""
        local = self.local_version()
        remote = self._client.fetch_platform_version()
        return PlatformStatus(
            local_version=local,
            remote_version=remote,
            update_available=is_platform_update_available(local, remote),
        )

    def update(self) -> list[str]:
        """Download and install the platform archive.

        Returns:
            Archive members written, relative to the game root.

        Raises:
            PlatformUpdateError: If the download, backup or extraction
                fails. Overwritten files have been restored by then.
        """
        temp_dir = self._layout.temp_dir
        archive = temp_dir / UPDATE_ARCHIVE_NAME
        backup_dir = temp_dir / BACKUP_DIR_NAME

        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
            self._emit(SyncStage.DOWNLOADING)
            download_to_file(
                self._client,
                self._client.platform_update_url(),
                archive,
                chunk_size=self._chunk_size,
                on_percent=lambda p: self._emit(SyncStage.DOWNLOADING, percent=p),
            )
        except (RemoteError, OSError) as e:
            self._fail(str(e))
            raise PlatformUpdateError(f"Platform download failed: {e}") from e

        self._emit(SyncStage.EXTRACTING)
        backed_up: list[str] = []
        written: list[str] = []
        try:
            with zipfile.ZipFile(archive) as zf:
                members = self._members(zf)
                self._emit(SyncStage.INSTALLING)
                for member in members:
                    target = self._layout.root / member
                    if target.is_file():
                        backup = backup_dir / member
                        backup.parent.mkdir(parents=True, exist_ok=True)
                        shutil.copy2(target, backup)
                        backed_up.append(member)
                for member in members:
                    target = self._layout.root / member
                    target.parent.mkdir(parents=True, exist_ok=True)
                    written.append(member)
                    with zf.open(member) as src, target.open("wb") as dst:
                        shutil.copyfileobj(src, dst, self._chunk_size)
        except Exception as e:
            # Also covers unsupported compression and encrypted members
            if self._restore(backup_dir, backed_up, written):
                self._cleanup(archive, backup_dir, temp_dir)
            self._fail(str(e) or type(e).__name__)
            raise PlatformUpdateError(f"Platform update failed: {e}") from e

        self._cleanup(archive, backup_dir, temp_dir)
        logger.info("Platform updated: %d files written", len(written))
        self._emit(SyncStage.UP_TO_DATE, percent=100)
        return written

    def _members(self, zf: zipfile.ZipFile) -> list[str]:
        """List the file members to extract, validating every path."""
        root = self._layout.root.resolve()
        members: list[str] = []
        for info in zf.infolist():
            member_target(root, info.filename)
            if info.is_dir():
                continue
            if Path(info.filename).name.casefold() in self._skip:
                logger.debug("Skipping %s", info.filename)
                continue
            members.append(info.filename)
        return members

    def _restore(self, backup_dir: Path, backed_up: list[str], written: list[str]) -> bool:
        """Undo a partial extraction.

        Returns:
            True if every file was put back, False if the backup must be kept.
        """
        complete = True
        restored = set(backed_up)
        for member in backed_up:
            try:
                shutil.copy2(backup_dir / member, self._layout.root / member)
            except OSError as e:
                logger.error("Could not restore %s: %s", member, e)
                complete = False
        for member in written:
            if member in restored:
                continue
            try:
                (self._layout.root / member).unlink(missing_ok=True)
            except OSError as e:
                logger.error("Could not remove partially installed %s: %s", member, e)
                complete = False
        return complete

    def _cleanup(self, archive: Path, backup_dir: Path, temp_dir: Path) -> None:
        for path in (archive, backup_dir):
            try:
                remove_path(path)
            except OSError as e:
                logger.warning("Could not remove %s: %s", path, e)
        try:
            temp_dir.rmdir()
        except OSError:
            logger.debug("Leaving non-empty %s in place", temp_dir)

    def _fail(self, message: str) -> None:
        logger.error("Platform update failed: %s", message)
        self._emit(SyncStage.FAILED, message=message)

    def _emit(
        self,
        stage: SyncStage,
        *,
        percent: int | None = None,
        message: str | None = None,
    ) -> None:
        if self._on_progress is not None:
            self._on_progress(
                ProgressEvent(
                    package=PLATFORM_PACKAGE,
                    stage=stage,
                    percent=percent,
                    message=message,
                )
            )
