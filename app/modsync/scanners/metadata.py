"""Version metadata readers for plugin artifacts.

Depending on the deployment generation, a plugin's version lives either in
the version resource embedded in the DLL itself or in a small JSON
descriptor placed next to it.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Literal

import pefile

logger = logging.getLogger(__name__)

VersionSource = Literal["embedded", "sidecar"]

_SIDECAR_KEYS: tuple[str, ...] = ("version", "Version")


class VersionReadError(Exception):
    """Raised when an artifact's version cannot be determined."""


class VersionReader(ABC):
    """Reads the version of a plugin artifact."""

    @abstractmethod
    def read(self, artifact: Path) -> str:
        """Return the version string of ``artifact``.

        Raises:
            VersionReadError: If the version cannot be read.
        """


class EmbeddedVersionReader(VersionReader):
    """Reads the FileVersion string from a PE version resource.

    Falls back to the numeric fixed file info (``a.b.c.d``) when the
    resource has no string table.
    """

    def read(self, artifact: Path) -> str:
        try:
            pe = pefile.PE(str(artifact), fast_load=True)
        except (pefile.PEFormatError, OSError) as e:
            raise VersionReadError(f"Cannot read {artifact}: {e}") from e

        try:
            pe.parse_data_directories(
                directories=[pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_RESOURCE"]]
            )
            version = self._string_file_version(pe) or self._fixed_file_version(pe)
        finally:
            pe.close()

        if not version:
            raise VersionReadError(f"No version resource in {artifact}")
        return version

    @staticmethod
    def _string_file_version(pe: pefile.PE) -> str | None:
        for file_info in getattr(pe, "FileInfo", None) or []:
            for entry in file_info:
                for table in getattr(entry, "StringTable", None) or []:
                    raw = table.entries.get(b"FileVersion")
                    if raw:
                        text = raw.decode("utf-8", errors="replace").strip()
                        if text:
                            return text
        return None

    @staticmethod
    def _fixed_file_version(pe: pefile.PE) -> str | None:
        fixed = getattr(pe, "VS_FIXEDFILEINFO", None)
        if not fixed:
            return None
        info = fixed[0]
        return ".".join(
            str(part)
            for part in (
                info.FileVersionMS >> 16,
                info.FileVersionMS & 0xFFFF,
                info.FileVersionLS >> 16,
                info.FileVersionLS & 0xFFFF,
            )
        )


class SidecarVersionReader(VersionReader):
    """Reads the version from a JSON descriptor next to the artifact.

    ``MyMod.dll`` is described by ``MyMod.json`` containing at least
    ``{"version": "1.2.3"}``.
    """

    def read(self, artifact: Path) -> str:
        sidecar = sidecar_path(artifact)
        try:
            data = json.loads(sidecar.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise VersionReadError(f"Missing descriptor {sidecar}") from e
        except (OSError, ValueError) as e:
            raise VersionReadError(f"Unreadable descriptor {sidecar}: {e}") from e

        if isinstance(data, dict):
            for key in _SIDECAR_KEYS:
                value = data.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        raise VersionReadError(f"No version in descriptor {sidecar}")


def sidecar_path(artifact: Path) -> Path:
    """Return the descriptor path belonging to an artifact."""
    return artifact.with_suffix(".json")


def get_version_reader(source: VersionSource = "embedded") -> VersionReader:
    """Get the version reader for a deployment generation.

    Args:
        source: ``"embedded"`` for PE version resources, ``"sidecar"`` for
            JSON descriptors.

    Returns:
        VersionReader instance.
    """
    if source == "sidecar":
        return SidecarVersionReader()
    return EmbeddedVersionReader()
