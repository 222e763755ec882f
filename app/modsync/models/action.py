"""Progress and result models for sync operations.

Executors report what they are doing through ProgressEvent values sent to a
subscriber callback, and report what they achieved through one ItemResult
per package, collected into a BatchResult.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class SyncStage(str, Enum):
    """Stage of a single package operation.

    Attributes:
        PREPARING: Resolving the manifest entry and download URL.
        DOWNLOADING: Streaming the archive to a temporary file.
        EXTRACTING: Unpacking the archive into a temporary directory.
        INSTALLING: Replacing the installed copy with the payload.
        UP_TO_DATE: The package now matches the server.
        FAILED: The operation stopped with an error.
        REMOVING: Deleting an orphaned package.
        REMOVED: The orphaned package is gone.
    """

    PREPARING = "preparing"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    INSTALLING = "installing"
    UP_TO_DATE = "up-to-date"
    FAILED = "failed"
    REMOVING = "removing"
    REMOVED = "removed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further events follow for this package."""
        return self in (SyncStage.UP_TO_DATE, SyncStage.FAILED, SyncStage.REMOVED)


class FailureReason(str, Enum):
    """Why a single package operation failed."""

    NOT_IN_MANIFEST = "not_in_manifest"
    DOWNLOAD_FAILED = "download_failed"
    EXTRACT_FAILED = "extract_failed"
    PAYLOAD_NOT_FOUND = "payload_not_found"
    INSTALL_FAILED = "install_failed"
    REMOVE_FAILED = "remove_failed"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """A progress notification for one package.

    Attributes:
        package: Name of the package being worked on.
        stage: Current stage.
        percent: Download percentage, or None when unknown or not applicable.
        message: Optional detail, such as the error text for FAILED.
    """

    package: str
    stage: SyncStage
    percent: int | None = None
    message: str | None = None

    @property
    def label(self) -> str:
        """Short human-readable label, e.g. ``Downloading 42%``."""
        text = self.stage.value.replace("-", " ").capitalize()
        if self.stage == SyncStage.DOWNLOADING and self.percent is not None:
            return f"{text} {self.percent}%"
        return text


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True, slots=True)
class ItemResult:
    """Outcome of a sync or removal for a single package.

    Attributes:
        name: Package name.
        success: Whether the package reached its target state.
        reason: Failure category, None on success.
        error: Error message, None on success.
        version: Version installed by the operation, if any.
    """

    name: str
    success: bool
    reason: FailureReason | None = None
    error: str | None = None
    version: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Aggregated outcome of a batch of package operations."""

    items: tuple[ItemResult, ...] = ()

    @property
    def success(self) -> bool:
        """True only if every item succeeded."""
        return all(item.success for item in self.items)

    @property
    def succeeded(self) -> tuple[ItemResult, ...]:
        """Items that reached their target state."""
        return tuple(item for item in self.items if item.success)

    @property
    def failed(self) -> tuple[ItemResult, ...]:
        """Items that failed."""
        return tuple(item for item in self.items if item.failed)
