"""Removal of orphaned packages.

Handles deletion of packages that are installed locally but no longer
listed by the server, with dry-run support and a guard against touching
anything outside the plugins directory.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from modsync.core.reconcile import ReconcileStatus, ReconciliationEntry
from modsync.models.action import (
    BatchResult,
    FailureReason,
    ItemResult,
    ProgressCallback,
    ProgressEvent,
    SyncStage,
)
from modsync.sync.archive import remove_path

logger = logging.getLogger(__name__)


class RemovalExecutor:
    """Deletes orphaned packages from the plugins directory.

    Attributes:
        _root: The plugins directory.
        _dry_run: If True, report what would be deleted without deleting.
    """

    def __init__(
        self,
        install_root: Path,
        *,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the RemovalExecutor.

        Args:
            install_root: The plugins directory.
            dry_run: If True, report what would be deleted without deleting.
            on_progress: Optional subscriber for progress events.
        """
        self._root = install_root
        self._dry_run = dry_run
        self._on_progress = on_progress

    def remove(self, entries: Iterable[ReconciliationEntry]) -> BatchResult:
        """Delete every orphaned entry and return the results.

        Entries that are not orphaned are ignored. A failure never stops
        the remaining removals.

        Args:
            entries: Reconciliation entries, typically ``result.orphaned``.

        Returns:
            BatchResult with one ItemResult per orphaned entry.
        """
        results = [
            self._remove_single(entry)
            for entry in entries
            if entry.status == ReconcileStatus.ORPHANED
        ]
        return BatchResult(items=tuple(results))

    def _remove_single(self, entry: ReconciliationEntry) -> ItemResult:
        """Delete one orphaned package.

        A package whose files are already gone counts as removed.

        Args:
            entry: Orphaned entry.

        Returns:
            ItemResult indicating success or failure.
        """
        self._emit(entry.name, SyncStage.REMOVING)

        if entry.local is None:
            self._emit(entry.name, SyncStage.REMOVED)
            return ItemResult(name=entry.name, success=True)

        target = entry.local.path
        if not self._is_inside_root(target):
            return self._fail(entry.name, f"Refusing to delete path outside plugins: {target}")

        if self._dry_run:
            logger.info("Dry-run: would delete %s", target)
            self._emit(entry.name, SyncStage.REMOVED)
            return ItemResult(name=entry.name, success=True)

        try:
            remove_path(target)
        except OSError as e:
            return self._fail(entry.name, str(e))

        logger.info("Removed orphaned package %s (%s)", entry.name, target)
        self._emit(entry.name, SyncStage.REMOVED)
        return ItemResult(name=entry.name, success=True)

    def _is_inside_root(self, path: Path) -> bool:
        root = self._root.resolve()
        # Resolve the parent only, so a symlinked package is judged by where it sits
        resolved = path.parent.resolve() / path.name
        return resolved != root and root in resolved.parents

    def _fail(self, name: str, message: str) -> ItemResult:
        logger.error("Removal failed for %s: %s", name, message)
        self._emit(name, SyncStage.FAILED, message=message)
        return ItemResult(
            name=name,
            success=False,
            reason=FailureReason.REMOVE_FAILED,
            error=message,
        )

    def _emit(self, name: str, stage: SyncStage, *, message: str | None = None) -> None:
        if self._on_progress is not None:
            self._on_progress(ProgressEvent(package=name, stage=stage, message=message))
