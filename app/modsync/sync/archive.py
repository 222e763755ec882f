"""Archive extraction and install-folder manipulation.

Helpers used by the sync executor to unpack a package archive, find the
files that actually need installing, and replace an installed package
while keeping the user's configuration folder.
"""

import logging
import shutil
import zipfile
import zlib
from pathlib import Path

from modsync.models.package import PackageDescriptor
from modsync.scanners.metadata import sidecar_path
from modsync.scanners.plugins import find_artifact

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when an archive cannot be extracted."""


class PayloadNotFoundError(Exception):
    """Raised when an extracted archive holds nothing installable."""


def member_target(root: Path, member: str) -> Path:
    """Resolve where an archive member lands under ``root``.

    Raises:
        ArchiveError: If the member would land outside ``root``.
    """
    target = (root / member).resolve()
    if target != root and root not in target.parents:
        raise ArchiveError(f"Archive member escapes extraction directory: {member}")
    return target


def extract_archive(archive: Path, destination: Path) -> None:
    """Extract a zip archive into a new directory.

    Args:
        archive: Zip file to extract.
        destination: Directory to create and fill.

    Raises:
        ArchiveError: If the archive is corrupt or contains unsafe paths.
    """
    destination.mkdir(parents=True, exist_ok=False)
    root = destination.resolve()
    try:
        with zipfile.ZipFile(archive) as zf:
            for member in zf.namelist():
                member_target(root, member)
            zf.extractall(destination)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, zlib.error) as e:
        raise ArchiveError(f"Corrupt archive {archive.name}: {e}") from e
    except (NotImplementedError, RuntimeError) as e:
        # Unsupported compression method or encrypted member
        raise ArchiveError(f"Cannot extract {archive.name}: {e}") from e


def locate_bundle_root(extract_dir: Path, expected_names: tuple[str, ...]) -> Path:
    """Find the payload root of a directory-bundle archive.

    If exactly one top-level directory is named like the package, the
    archive was packed with the package folder itself and that directory
    is the payload root. Otherwise the extraction root is.

    Args:
        extract_dir: Extraction directory.
        expected_names: Acceptable folder names (package name, install folder).

    Returns:
        Directory whose contents are installed.

    Raises:
        PayloadNotFoundError: If the archive is empty.
    """
    children = list(extract_dir.iterdir())
    if not children:
        raise PayloadNotFoundError("Archive is empty")

    wanted = {name.casefold() for name in expected_names if name}
    matches = [c for c in children if c.is_dir() and c.name.casefold() in wanted]
    if len(matches) == 1:
        return matches[0]
    return extract_dir


def locate_single_file(extract_dir: Path, suffixes: tuple[str, ...]) -> Path:
    """Find the plugin binary of a single-file archive.

    Raises:
        PayloadNotFoundError: If the archive holds no plugin binary.
    """
    artifact = find_artifact(extract_dir, suffixes)
    if artifact is None:
        raise PayloadNotFoundError("Archive contains no plugin binary")
    return artifact


def remove_path(path: Path) -> None:
    """Delete a file, symlink, or directory tree if it exists."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def find_child_dir(folder: Path, name: str) -> Path | None:
    """Find an immediate subdirectory by case-insensitive name."""
    if not folder.is_dir():
        return None
    key = name.casefold()
    for child in folder.iterdir():
        if child.is_dir() and child.name.casefold() == key:
            return child
    return None


def backup_config_dir(install_folder: Path, config_dir_name: str, backup_path: Path) -> Path | None:
    """Move a package's configuration folder out of the way.

    Args:
        install_folder: Existing install folder of the package.
        config_dir_name: Name of the configuration subfolder.
        backup_path: Where to move it (must not exist).

    Returns:
        The backup location, or None when there was nothing to preserve.
    """
    config_dir = find_child_dir(install_folder, config_dir_name)
    if config_dir is None:
        return None
    backup_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(config_dir), str(backup_path))
    logger.debug("Preserved %s at %s", config_dir, backup_path)
    return backup_path


def restore_config_dir(backup: Path, install_folder: Path, config_dir_name: str) -> Path:
    """Move a preserved configuration folder into an install folder.

    A configuration folder shipped by the new payload is replaced, so the
    user's files come back exactly as they were.

    Returns:
        The restored configuration folder.
    """
    install_folder.mkdir(parents=True, exist_ok=True)
    shipped = find_child_dir(install_folder, config_dir_name)
    target = install_folder / (shipped.name if shipped is not None else config_dir_name)
    if shipped is not None:
        shutil.rmtree(shipped)
    shutil.move(str(backup), str(target))
    return target


def install_bundle(payload_root: Path, destination: Path) -> None:
    """Replace ``destination`` with the contents of ``payload_root``."""
    remove_path(destination)
    destination.mkdir(parents=True)
    shutil.copytree(payload_root, destination, dirs_exist_ok=True)


def install_single_file(artifact: Path, destination: Path) -> None:
    """Replace ``destination`` with ``artifact`` and its descriptor, if any."""
    remove_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(artifact, destination)

    descriptor = sidecar_path(artifact)
    if descriptor.is_file():
        shutil.copy2(descriptor, sidecar_path(destination))


def bundle_folder_names(descriptor: PackageDescriptor) -> tuple[str, ...]:
    """Folder names a bundle archive may use for its top-level directory."""
    names = [descriptor.name]
    locator = descriptor.archive_locator.rsplit("/", 1)[-1]
    if locator.lower().endswith(".zip"):
        names.append(locator[:-4])
    return tuple(names)
