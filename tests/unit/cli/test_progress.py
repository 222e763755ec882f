"""Unit tests for the Rich sync progress display."""

import io

from modsync.cli.progress import SyncProgress
from modsync.core.theme import get_theme
from modsync.models.action import ProgressEvent, SyncStage
from rich.console import Console
from rich.progress import Task


def make_progress() -> SyncProgress:
    console = Console(theme=get_theme(), file=io.StringIO(), color_system=None, width=120)
    return SyncProgress(console=console)


def task_for(progress: SyncProgress, package: str) -> Task:
    task_id = progress._tasks[package]
    return next(t for t in progress._progress.tasks if t.id == task_id)


class TestSyncProgress:
    """Tests for SyncProgress event handling."""

    def test_one_row_per_package(self) -> None:
        """Events for the same package update a single row."""
        progress = make_progress()

        progress(ProgressEvent(package="Alpha", stage=SyncStage.PREPARING))
        progress(ProgressEvent(package="Alpha", stage=SyncStage.DOWNLOADING))
        progress(ProgressEvent(package="Beta", stage=SyncStage.PREPARING))

        assert len(progress._progress.tasks) == 2

    def test_indeterminate_until_percent(self) -> None:
        """A row has no total before the first percentage."""
        progress = make_progress()

        progress(ProgressEvent(package="Alpha", stage=SyncStage.DOWNLOADING))

        assert task_for(progress, "Alpha").total is None

    def test_percent_updates_bar(self) -> None:
        """Download percentages drive the bar."""
        progress = make_progress()

        progress(ProgressEvent(package="Alpha", stage=SyncStage.DOWNLOADING))
        progress(ProgressEvent(package="Alpha", stage=SyncStage.DOWNLOADING, percent=42))

        task = task_for(progress, "Alpha")
        assert task.total == 100
        assert task.completed == 42
        assert task.description == "Downloading 42%"

    def test_terminal_event_completes(self) -> None:
        """Terminal stages fill the bar."""
        progress = make_progress()

        progress(ProgressEvent(package="Alpha", stage=SyncStage.FAILED, message="boom"))

        task = task_for(progress, "Alpha")
        assert task.completed == 100
        assert "Failed" in task.description

    def test_context_manager(self) -> None:
        """The display starts and stops with the context."""
        with make_progress() as progress:
            progress(ProgressEvent(package="Alpha", stage=SyncStage.UP_TO_DATE, percent=100))

        assert task_for(progress, "Alpha").finished
