"""Scanner for loose plugin configuration files.

Lists the top-level files of the BepInEx config directory together with
their modification times. Nested directories are plugin-private and are
not synced.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from pathlib import Path

from modsync.configs.excluded import DEFAULT_EXCLUDED_CONFIGS, is_excluded_config
from modsync.configs.models import ConfigFileRecord

logger = logging.getLogger(__name__)

# Left behind by interrupted atomic writes
TEMP_SUFFIX = ".tmp"


class ConfigScanner:
    """Scans a config directory for configuration files.

    Args:
        config_root: The config directory.
        excluded: File names that are never reported.
    """

    def __init__(
        self,
        config_root: Path,
        excluded: Iterable[str] = DEFAULT_EXCLUDED_CONFIGS,
    ) -> None:
        self._root = config_root
        self._excluded = tuple(excluded)

    def is_available(self) -> bool:
        """Check if the config directory exists."""
        return self._root.is_dir()

    def scan(self) -> Iterator[ConfigFileRecord]:
        """Yield one record per non-excluded config file.

        Yields:
            ConfigFileRecord with the file's mtime in UTC.
        """
        if not self.is_available():
            return

        try:
            entries = sorted(self._root.iterdir(), key=lambda p: p.name.casefold())
        except OSError as e:
            logger.warning("Cannot list config directory %s: %s", self._root, e)
            return

        for entry in entries:
            if entry.name.startswith(".") or entry.suffix.lower() == TEMP_SUFFIX:
                continue
            if not entry.is_file():
                continue
            if is_excluded_config(entry.name, self._excluded):
                continue
            try:
                mtime = entry.stat().st_mtime
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry, e)
                continue
            yield ConfigFileRecord(
                file_name=entry.name,
                last_modified_utc=datetime.fromtimestamp(mtime, tz=UTC),
            )
