"""Rich progress display fed by sync progress events."""

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn

from modsync.models.action import ProgressEvent, SyncStage
from modsync.utils.formatting import console as default_console


class SyncProgress:
    """Shows one progress row per package.

    Instances are callables that can be passed as ``on_progress`` to the
    executors. Rows are created on the first event for a package and
    finished on its terminal event.

    Example:
        >>> with SyncProgress() as progress:
        ...     executor = SyncExecutor(client, root, on_progress=progress)
        ...     executor.run(entries)
    """

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.fields[package]}", justify="left"),
            BarColumn(bar_width=30),
            TextColumn("{task.description}"),
            console=console or default_console,
            transient=False,
        )
        self._tasks: dict[str, TaskID] = {}

    def __enter__(self) -> "SyncProgress":
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def __call__(self, event: ProgressEvent) -> None:
        task = self._tasks.get(event.package)
        if task is None:
            # No total until a percentage arrives, so the bar pulses meanwhile
            task = self._progress.add_task(event.label, package=event.package, total=None)
            self._tasks[event.package] = task

        description = _describe(event)
        if event.stage == SyncStage.DOWNLOADING and event.percent is not None:
            self._progress.update(
                task, description=description, total=100, completed=event.percent
            )
        elif event.stage.is_terminal:
            self._progress.update(task, description=description, total=100, completed=100)
        else:
            self._progress.update(task, description=description)


def _describe(event: ProgressEvent) -> str:
    if event.stage == SyncStage.FAILED:
        return f"[error]{event.label}[/error]"
    if event.stage in (SyncStage.UP_TO_DATE, SyncStage.REMOVED):
        return f"[success]{event.label}[/success]"
    return event.label
