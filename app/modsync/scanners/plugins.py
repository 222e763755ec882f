"""Plugin directory scanner.

Walks the plugins directory and reports installed packages in both
supported shapes: directory bundles (a folder holding one or more DLLs)
and single files (a DLL placed directly in the plugins root).
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from modsync.models.package import LocalPackage, PackageKind, package_key
from modsync.scanners.base import Scanner
from modsync.scanners.metadata import EmbeddedVersionReader, VersionReader, VersionReadError

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_SUFFIXES: tuple[str, ...] = (".dll",)


class PluginScanner(Scanner):
    """Scans a plugins directory for installed packages.

    Folders are scanned first; a name produced by the folder pass is never
    produced again by the single-file pass. Unreadable artifacts are skipped
    so that one broken plugin never aborts the scan.

    Args:
        install_root: The plugins directory.
        excluded_names: Package names to ignore (case-insensitive).
        excluded_folders: Top-level folder names to ignore (case-insensitive).
        version_reader: Strategy used to read artifact versions.
        artifact_suffixes: File suffixes recognised as plugin binaries.
    """

    def __init__(
        self,
        install_root: Path,
        *,
        excluded_names: Iterable[str] = (),
        excluded_folders: Iterable[str] = (),
        version_reader: VersionReader | None = None,
        artifact_suffixes: tuple[str, ...] = DEFAULT_ARTIFACT_SUFFIXES,
    ) -> None:
        self._root = install_root
        self._excluded_names = {package_key(n) for n in excluded_names}
        self._excluded_folders = {package_key(n) for n in excluded_folders}
        self._reader = version_reader or EmbeddedVersionReader()
        self._suffixes = tuple(s.lower() for s in artifact_suffixes)

    @property
    def install_root(self) -> Path:
        """The scanned plugins directory."""
        return self._root

    def is_available(self) -> bool:
        """Check if the plugins directory exists."""
        return self._root.is_dir()

    def scan(self) -> Iterator[LocalPackage]:
        """Scan the plugins directory and yield installed packages.

        A missing directory yields nothing.

        Yields:
            LocalPackage for every recognised package.
        """
        if not self.is_available():
            logger.debug("Plugins directory does not exist: %s", self._root)
            return

        try:
            children = sorted(self._root.iterdir(), key=lambda p: p.name.casefold())
        except OSError as e:
            logger.warning("Cannot list plugins directory %s: %s", self._root, e)
            return

        seen: set[str] = set()

        for child in children:
            if not child.is_dir():
                continue
            pkg = self._scan_bundle(child)
            if pkg is None or pkg.key in seen:
                continue
            seen.add(pkg.key)
            yield pkg

        for child in children:
            if not self._is_artifact(child):
                continue
            pkg = self._scan_single_file(child)
            if pkg is None or pkg.key in seen:
                continue
            seen.add(pkg.key)
            yield pkg

    def _scan_bundle(self, folder: Path) -> LocalPackage | None:
        """Build a package from a plugin folder.

        Args:
            folder: Immediate subdirectory of the plugins root.

        Returns:
            LocalPackage, or None when the folder is excluded, holds no
            artifact, or its first artifact is unreadable.
        """
        name = folder.name
        key = package_key(name)
        if key in self._excluded_folders or key in self._excluded_names:
            return None

        artifacts = self._find_artifacts(folder)
        if not artifacts:
            return None

        version = self._read_version(artifacts[0])
        if version is None:
            return None

        return LocalPackage(
            name=name,
            version=version,
            kind=PackageKind.DIRECTORY_BUNDLE,
            path=folder,
        )

    def _scan_single_file(self, artifact: Path) -> LocalPackage | None:
        """Build a package from a plugin placed directly in the root.

        Args:
            artifact: Plugin binary in the plugins root.

        Returns:
            LocalPackage, or None when excluded or unreadable.
        """
        name = artifact.stem
        if package_key(name) in self._excluded_names:
            return None

        version = self._read_version(artifact)
        if version is None:
            return None

        return LocalPackage(
            name=name,
            version=version,
            kind=PackageKind.SINGLE_FILE,
            path=artifact,
        )

    def _find_artifacts(self, folder: Path) -> list[Path]:
        """Find plugin binaries anywhere under a folder, in stable order."""
        try:
            found = [p for p in folder.rglob("*") if self._is_artifact(p)]
        except OSError as e:
            logger.debug("Cannot walk %s: %s", folder, e)
            return []
        return sorted(found, key=lambda p: (len(p.relative_to(folder).parts), str(p).casefold()))

    def _is_artifact(self, path: Path) -> bool:
        return path.suffix.lower() in self._suffixes and path.is_file()

    def _read_version(self, artifact: Path) -> str | None:
        try:
            return self._reader.read(artifact)
        except VersionReadError as e:
            logger.debug("Skipping unreadable plugin %s: %s", artifact, e)
            return None


def find_artifact(root: Path, suffixes: tuple[str, ...] = DEFAULT_ARTIFACT_SUFFIXES) -> Path | None:
    """Find the first plugin binary anywhere under ``root``.

    Shallower files come first, ties broken by case-insensitive path.

    Args:
        root: Directory to search.
        suffixes: File suffixes recognised as plugin binaries.

    Returns:
        Path to the artifact, or None if there is none.
    """
    lowered = tuple(s.lower() for s in suffixes)
    candidates = [p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in lowered]
    if not candidates:
        return None
    candidates.sort(key=lambda p: (len(p.relative_to(root).parts), str(p).casefold()))
    return candidates[0]
