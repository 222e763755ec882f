"""Package models for manifest entries and scanned plugins.

This module defines the data structures describing a mod package, both as
the server advertises it (PackageDescriptor) and as it was observed on disk
(LocalPackage).
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# Placeholder shown when one side of a comparison has no version
MISSING_VERSION = "-"

# Wire names that carry the packaging kind explicitly
_KIND_KEYS = ("kind", "packagingKind", "PackagingKind")


class PackageKind(str, Enum):
    """How a package is laid out inside the plugins directory.

    Attributes:
        SINGLE_FILE: One binary artifact placed directly in the plugins root.
        DIRECTORY_BUNDLE: A folder holding one or more files.
    """

    SINGLE_FILE = "single-file"
    DIRECTORY_BUNDLE = "directory-bundle"


def package_key(name: str) -> str:
    """Return the case-insensitive lookup key for a package name."""
    return name.strip().casefold()


class PackageDescriptor(BaseModel):
    """A package entry from the server manifest.

    Field names differ between server generations, so both the camelCase
    and PascalCase spellings are accepted, and the packaging kind may come
    either as the legacy ``isFolderMod`` flag or as ``packagingKind``.

    Attributes:
        name: Unique, case-insensitive package identifier.
        version: Opaque version string, compared by exact equality.
        archive_locator: File name or identifier of the archive.
        download_url: Explicit archive URL, when the server provides one.
        kind: Single file or directory bundle.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: Annotated[str, Field(validation_alias=AliasChoices("name", "Name"))]
    version: Annotated[str, Field(validation_alias=AliasChoices("version", "Version"))]
    archive_locator: Annotated[
        str,
        Field(
            validation_alias=AliasChoices(
                "archive_locator", "fileName", "FileName", "downloadUrl", "DownloadUrl"
            )
        ),
    ] = ""
    download_url: Annotated[
        str | None,
        Field(validation_alias=AliasChoices("download_url", "downloadUrl", "DownloadUrl")),
    ] = None
    kind: Annotated[
        PackageKind,
        Field(validation_alias=AliasChoices(*_KIND_KEYS)),
    ] = PackageKind.SINGLE_FILE

    @model_validator(mode="before")
    @classmethod
    def _map_folder_flag(cls, data: Any) -> Any:
        """Translate the legacy ``isFolderMod`` flag into ``kind``."""
        if not isinstance(data, dict):
            return data
        for flag in ("isFolderMod", "IsFolderMod"):
            if flag in data and not any(k in data for k in _KIND_KEYS):
                data = dict(data)
                is_folder = data.pop(flag)
                data["kind"] = (
                    PackageKind.DIRECTORY_BUNDLE if is_folder else PackageKind.SINGLE_FILE
                )
                break
        return data

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return package_key(self.name)

    @property
    def is_bundle(self) -> bool:
        """Check if the package installs as a folder."""
        return self.kind == PackageKind.DIRECTORY_BUNDLE


@dataclass(frozen=True, slots=True)
class LocalPackage:
    """A package discovered in the plugins directory.

    Built fresh on every scan and never mutated afterwards.

    Attributes:
        name: Package name (folder name or artifact stem).
        version: Version read from the artifact metadata.
        kind: Single file or directory bundle.
        path: Artifact file or bundle folder on disk.
        install_folder_name: Actual folder name when it differs from ``name``.
    """

    name: str
    version: str
    kind: PackageKind
    path: Path
    install_folder_name: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name.strip():
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return package_key(self.name)

    @property
    def is_bundle(self) -> bool:
        """Check if the package is installed as a folder."""
        return self.kind == PackageKind.DIRECTORY_BUNDLE
