"""Shared Rich display functions for reconciliation and results.

Provides reusable table builders and summary printers for displaying the
reconciliation outcome and execution results across CLI commands
(status, sync, platform).
"""

from rich.table import Table

from modsync.core.pipeline import PrimaryAction, RefreshResult
from modsync.core.reconcile import ReconcileResult, ReconcileStatus
from modsync.core.theme import status_style
from modsync.models.action import BatchResult
from modsync.sync.platform import PlatformStatus
from modsync.utils.formatting import console

_STATUS_ICONS: dict[ReconcileStatus, str] = {
    ReconcileStatus.UP_TO_DATE: "=",
    ReconcileStatus.NEEDS_UPDATE: "~",
    ReconcileStatus.NOT_INSTALLED: "+",
    ReconcileStatus.ORPHANED: "x",
}

_ACTION_DISPLAY: dict[PrimaryAction, tuple[str, str]] = {
    PrimaryAction.PLATFORM_UPDATE: ("Update platform", "warning"),
    PrimaryAction.UPDATE: ("Update packages", status_style(ReconcileStatus.NEEDS_UPDATE)),
    PrimaryAction.LAUNCH: ("Launch", "success"),
    PrimaryAction.OFFLINE: ("Offline", "error"),
}


def create_reconcile_table(result: ReconcileResult, *, show_all: bool = True) -> Table:
    """Create a Rich table of reconciliation entries.

    Args:
        result: Reconciliation outcome.
        show_all: Include up-to-date entries.

    Returns:
        Rich Table with one row per entry.
    """
    table = Table(
        title="Packages",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=3, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Local", style="muted")
    table.add_column("Server", style="muted")
    table.add_column("Status")

    for entry in result.entries:
        if not show_all and entry.status == ReconcileStatus.UP_TO_DATE:
            continue
        style = status_style(entry.status)
        table.add_row(
            f"[{style}]\\[{_STATUS_ICONS[entry.status]}][/{style}]",
            f"[{style}]{entry.name}[/{style}]",
            entry.local_version,
            entry.remote_version,
            entry.status.value,
        )

    return table


def format_primary_action(action: PrimaryAction) -> str:
    """Format the primary action as Rich markup."""
    label, style = _ACTION_DISPLAY[action]
    return f"[{style}]{label}[/{style}]"


def format_status_count(status: ReconcileStatus, count: int, label: str) -> str:
    """Format a count in the colour of its reconcile status."""
    style = status_style(status)
    return f"[{style}]{count} {label}[/{style}]"


def print_refresh_summary(refresh: RefreshResult, action: PrimaryAction) -> None:
    """Print counts, platform state and the primary action."""
    result = refresh.reconcile
    console.print(
        "[bold]Summary:[/bold] "
        + ", ".join(
            format_status_count(status, count, label)
            for status, count, label in (
                (ReconcileStatus.UP_TO_DATE, len(result.up_to_date), "up to date"),
                (ReconcileStatus.NEEDS_UPDATE, len(result.to_update), "to update"),
                (ReconcileStatus.NOT_INSTALLED, len(result.to_install), "to install"),
                (ReconcileStatus.ORPHANED, len(result.orphaned), "orphaned"),
            )
        )
    )
    print_platform_status(refresh.platform)
    console.print(f"[bold]Next:[/bold] {format_primary_action(action)}")


def print_platform_status(status: PlatformStatus) -> None:
    """Print installed and server platform versions."""
    local = status.local_version or "unknown"
    remote = status.remote_version or "unknown"
    marker = " [warning](update available)[/warning]" if status.update_available else ""
    console.print(f"[bold]Platform:[/bold] {local} [muted]→ server {remote}[/muted]{marker}")


def create_results_table(batch: BatchResult, title: str = "Results") -> Table:
    """Create a Rich table displaying per-package results.

    Args:
        batch: Results to display.
        title: Table title.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Message")

    for item in batch.items:
        if item.success:
            status = "[success]OK[/success]"
            message = item.version or ""
        else:
            status = "[error]FAIL[/error]"
            message = item.error or "Unknown error"
        table.add_row(status, item.name, f"[muted]{message}[/muted]")

    return table


def print_results_summary(batch: BatchResult, verb: str = "synced") -> None:
    """Print a one-line summary of a batch."""
    if not batch.items:
        return
    ok = len(batch.succeeded)
    failed = len(batch.failed)
    if failed:
        console.print(f"[warning]{ok} {verb}, {failed} failed[/warning]")
    else:
        console.print(f"[success]{ok} {verb}[/success]")
