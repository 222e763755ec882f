"""Reconciliation of the server manifest with installed packages.

This module provides the pure ``reconcile`` function that classifies every
package known to either side, and the ReconcileResult holding the outcome.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from modsync.core.versions import package_versions_match
from modsync.models.package import (
    MISSING_VERSION,
    LocalPackage,
    PackageDescriptor,
    PackageKind,
    package_key,
)


class ReconcileStatus(str, Enum):
    """Classification of a package after comparing both sides.

    Attributes:
        UP_TO_DATE: Installed with exactly the server's version.
        NEEDS_UPDATE: Installed, but with a different version.
        NOT_INSTALLED: On the server, not installed locally.
        ORPHANED: Installed locally, absent from the manifest.
    """

    UP_TO_DATE = "up-to-date"
    NEEDS_UPDATE = "needs-update"
    NOT_INSTALLED = "not-installed"
    ORPHANED = "orphaned"


@dataclass(frozen=True, slots=True)
class ReconciliationEntry:
    """One package in the reconciliation outcome.

    Attributes:
        name: Package name (server spelling when the server knows it).
        local_version: Installed version, or ``"-"``.
        remote_version: Manifest version, or ``"-"``.
        status: Classification.
        kind: Packaging kind (server side wins).
        descriptor: Manifest entry, None for orphaned packages.
        local: Installed package, None when not installed.
    """

    name: str
    local_version: str
    remote_version: str
    status: ReconcileStatus
    kind: PackageKind
    descriptor: PackageDescriptor | None = None
    local: LocalPackage | None = None

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return package_key(self.name)

    @property
    def needs_sync(self) -> bool:
        """Check if the sync executor has work to do for this entry."""
        return self.status in (ReconcileStatus.NEEDS_UPDATE, ReconcileStatus.NOT_INSTALLED)


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Classified difference between the manifest and the local install.

    Attributes:
        entries: One entry per distinct package name, sorted by name.
    """

    entries: tuple[ReconciliationEntry, ...]

    def _with_status(self, *statuses: ReconcileStatus) -> tuple[ReconciliationEntry, ...]:
        return tuple(e for e in self.entries if e.status in statuses)

    @property
    def up_to_date(self) -> tuple[ReconciliationEntry, ...]:
        """Entries already matching the server."""
        return self._with_status(ReconcileStatus.UP_TO_DATE)

    @property
    def to_update(self) -> tuple[ReconciliationEntry, ...]:
        """Installed entries with a different version."""
        return self._with_status(ReconcileStatus.NEEDS_UPDATE)

    @property
    def to_install(self) -> tuple[ReconciliationEntry, ...]:
        """Entries missing locally."""
        return self._with_status(ReconcileStatus.NOT_INSTALLED)

    @property
    def orphaned(self) -> tuple[ReconciliationEntry, ...]:
        """Local entries the server no longer lists."""
        return self._with_status(ReconcileStatus.ORPHANED)

    @property
    def pending(self) -> tuple[ReconciliationEntry, ...]:
        """Entries to hand to the sync executor, in list order."""
        return tuple(e for e in self.entries if e.needs_sync)

    @property
    def is_fully_synced(self) -> bool:
        """Check if the local install matches the manifest exactly.

        Every entry must be up to date. Because every local package shows up
        as an entry, this also rules out orphaned packages and implies that
        both sides hold the same set of names.
        """
        return all(e.status == ReconcileStatus.UP_TO_DATE for e in self.entries)

    @property
    def total_changes(self) -> int:
        """Number of entries that are not up to date."""
        return len(self.entries) - len(self.up_to_date)

    def get(self, name: str) -> ReconciliationEntry | None:
        """Look up an entry by case-insensitive name."""
        key = package_key(name)
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "fully_synced": self.is_fully_synced,
            "summary": {
                "up_to_date": len(self.up_to_date),
                "needs_update": len(self.to_update),
                "not_installed": len(self.to_install),
                "orphaned": len(self.orphaned),
            },
            "entries": [
                {
                    "name": e.name,
                    "local_version": e.local_version,
                    "remote_version": e.remote_version,
                    "status": e.status.value,
                    "kind": e.kind.value,
                }
                for e in self.entries
            ],
        }


def reconcile(
    remote: Iterable[PackageDescriptor],
    local: Iterable[LocalPackage],
) -> ReconcileResult:
    """Classify every package found on either side.

    Names are matched case-insensitively; versions must match exactly.
    Packages with blank names are ignored. If a side lists the same name
    twice, the first occurrence wins.

    Args:
        remote: Packages advertised by the server.
        local: Packages found in the plugins directory.

    Returns:
        ReconcileResult with exactly one entry per distinct package name.
    """
    remote_index: dict[str, PackageDescriptor] = {}
    for descriptor in remote:
        if not descriptor.name.strip():
            continue
        remote_index.setdefault(descriptor.key, descriptor)

    local_index: dict[str, LocalPackage] = {}
    for package in local:
        if not package.name.strip():
            continue
        local_index.setdefault(package.key, package)

    entries: list[ReconciliationEntry] = []

    for key, descriptor in remote_index.items():
        installed = local_index.get(key)
        if installed is None:
            status = ReconcileStatus.NOT_INSTALLED
            local_version = MISSING_VERSION
        elif package_versions_match(installed.version, descriptor.version):
            status = ReconcileStatus.UP_TO_DATE
            local_version = installed.version
        else:
            status = ReconcileStatus.NEEDS_UPDATE
            local_version = installed.version

        entries.append(
            ReconciliationEntry(
                name=descriptor.name,
                local_version=local_version,
                remote_version=descriptor.version,
                status=status,
                kind=descriptor.kind,
                descriptor=descriptor,
                local=installed,
            )
        )

    for key, installed in local_index.items():
        if key in remote_index:
            continue
        entries.append(
            ReconciliationEntry(
                name=installed.name,
                local_version=installed.version,
                remote_version=MISSING_VERSION,
                status=ReconcileStatus.ORPHANED,
                kind=installed.kind,
                local=installed,
            )
        )

    entries.sort(key=lambda e: e.key)
    return ReconcileResult(entries=tuple(entries))
