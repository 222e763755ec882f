"""Synchronisation of loose configuration files.

Config files are compared by name and modification time instead of by
version. The plan is a pure function; the synchroniser downloads what the
plan asks for and stamps the server's modification time on every file it
writes, so the next comparison sees the two sides as equal.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from tempfile import NamedTemporaryFile

from modsync.configs.excluded import DEFAULT_EXCLUDED_CONFIGS, is_excluded_config
from modsync.configs.models import ConfigFileRecord
from modsync.configs.scanner import ConfigScanner
from modsync.remote.client import RemoteError, ServerClient

logger = logging.getLogger(__name__)


class ConfigSyncError(Exception):
    """Raised when a configuration file cannot be synced.

    Any failure aborts the whole apply operation before packages are
    touched.
    """


def plan_config_sync(
    remote: Iterable[ConfigFileRecord],
    local: Iterable[ConfigFileRecord],
    excluded: Iterable[str] = DEFAULT_EXCLUDED_CONFIGS,
) -> list[ConfigFileRecord]:
    """Decide which server config files must be downloaded.

    After dropping excluded names on both sides:

    - when the counts differ, every server file missing locally is
      downloaded;
    - in every case, enforced files that are missing locally or whose
      local timestamp differs from the server's are downloaded again.

    Non-enforced files that exist locally are never overwritten.

    Args:
        remote: Files listed by the server.
        local: Files found in the local config directory.
        excluded: File names ignored on both sides.

    Returns:
        Server records to download, in server order, without duplicates.
    """
    excluded = tuple(excluded)
    remote_files = [r for r in remote if _is_synced(r, excluded)]
    local_files = [r for r in local if _is_synced(r, excluded)]

    local_index: dict[str, ConfigFileRecord] = {}
    for record in local_files:
        local_index.setdefault(record.key, record)

    counts_differ = len(remote_files) != len(local_files)
    planned: dict[str, ConfigFileRecord] = {}

    for record in remote_files:
        if record.key in planned:
            continue
        existing = local_index.get(record.key)
        if existing is None:
            if counts_differ or record.is_enforced:
                planned[record.key] = record
            continue
        if record.is_enforced and not record.same_timestamp(existing):
            planned[record.key] = record

    return list(planned.values())


def _is_synced(record: ConfigFileRecord, excluded: tuple[str, ...]) -> bool:
    return bool(record.file_name) and not is_excluded_config(record.file_name, excluded)


class ConfigSynchronizer:
    """Brings the local config directory in line with the server.

    Args:
        client: Server client.
        config_root: Local config directory.
        excluded: File names ignored on both sides.
    """

    def __init__(
        self,
        client: ServerClient,
        config_root: Path,
        excluded: Iterable[str] = DEFAULT_EXCLUDED_CONFIGS,
    ) -> None:
        self._client = client
        self._root = config_root
        self._excluded = tuple(excluded)

    def plan(self) -> list[ConfigFileRecord]:
        """Fetch the server list and compute the files to download."""
        remote = self._client.fetch_config_list()
        local = ConfigScanner(self._root, self._excluded).scan()
        return plan_config_sync(remote, local, self._excluded)

    def sync(self) -> list[str]:
        """Download every planned file.

        Returns:
            Names of the files written.

        Raises:
            ConfigSyncError: On the first file that cannot be downloaded
                or written.
        """
        written: list[str] = []
        for record in self.plan():
            try:
                content = self._client.download_config(record.file_name)
                self._write(record, content)
            except (RemoteError, OSError) as e:
                logger.error("Config sync failed for %s: %s", record.file_name, e)
                raise ConfigSyncError(f"Failed to sync {record.file_name}: {e}") from e
            logger.info("Synced config %s", record.file_name)
            written.append(record.file_name)
        return written

    def _write(self, record: ConfigFileRecord, content: bytes) -> None:
        """Atomically replace a config file and stamp the server mtime."""
        target = self._root / Path(record.file_name).name
        self._root.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(mode="wb", dir=self._root, delete=False, suffix=".tmp") as f:
                tmp_path = Path(f.name)
                f.write(content)
            os.replace(str(tmp_path), str(target))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise

        stamp = record.last_modified_utc.timestamp()
        os.utime(target, (stamp, stamp))
