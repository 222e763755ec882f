"""Abstract base class for package scanners.

This module defines the Scanner interface that all local inventory
scanners must implement.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from modsync.models.package import LocalPackage


class Scanner(ABC):
    """Abstract base class for all package scanners.

    Scanners inspect an installation and yield the packages found there.

    Example:
        >>> scanner = PluginScanner(Path("BepInEx/plugins"))
        >>> if scanner.is_available():
        ...     for pkg in scanner.scan():
        ...         print(f"{pkg.name}: {pkg.version}")
    """

    @abstractmethod
    def scan(self) -> Iterator[LocalPackage]:
        """Scan and yield all installed packages.

        Yields:
            LocalPackage instances for each installed package.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the scanned location exists.

        Returns:
            True if there is anything to scan, False otherwise.
        """
