"""Sync command implementation.

Runs the combined apply: configuration files first, then package
installs and updates, then orphan removal, followed by a refresh that
confirms the install matches the server.
"""

from typing import Annotated

import typer

from modsync.cli.display import (
    create_reconcile_table,
    create_results_table,
    format_status_count,
    print_results_summary,
)
from modsync.cli.progress import SyncProgress
from modsync.cli.types import open_session
from modsync.core.pipeline import PrimaryAction, SyncSession
from modsync.core.reconcile import ReconcileStatus
from modsync.sync.configs import ConfigSyncError
from modsync.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Install, update and remove packages to match the server.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sync(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show planned changes only, no changes.",
        ),
    ] = False,
    keep_orphans: Annotated[
        bool,
        typer.Option(
            "--keep-orphans",
            help="Do not remove packages the server no longer lists.",
        ),
    ] = False,
) -> None:
    """Bring the installed packages in line with the server.

    Examples:
        modsync sync                  # Show plan, confirm, apply
        modsync sync --dry-run        # Show plan only
        modsync sync -y               # Apply without asking
        modsync sync --keep-orphans   # Never delete local packages
    """
    if ctx.invoked_subcommand is not None:
        return

    progress = SyncProgress()
    session = open_session(ctx, on_progress=progress)
    try:
        _run_sync(session, progress, yes=yes, dry_run=dry_run, keep_orphans=keep_orphans)
    finally:
        session.close()


def _run_sync(
    session: SyncSession,
    progress: SyncProgress,
    *,
    yes: bool,
    dry_run: bool,
    keep_orphans: bool,
) -> None:
    refresh = session.refresh()
    action = session.primary_action(refresh)

    if action == PrimaryAction.PLATFORM_UPDATE:
        print_error(
            f"Platform update required ({refresh.platform.local_version} → "
            f"{refresh.platform.remote_version}). Run 'modsync platform update' first."
        )
        raise typer.Exit(code=1)

    if action == PrimaryAction.OFFLINE:
        print_error(f"Server {session.settings.base_url} is offline or has no manifest.")
        raise typer.Exit(code=1)

    result = refresh.reconcile
    removals = () if keep_orphans else result.orphaned

    if not result.pending and not removals:
        print_success("All packages match the server. Nothing to do.")
        return

    console.print(create_reconcile_table(result, show_all=False))
    console.print(
        "[bold]Plan:[/bold] "
        f"{format_status_count(ReconcileStatus.NOT_INSTALLED, len(result.to_install), 'install')}, "
        f"{format_status_count(ReconcileStatus.NEEDS_UPDATE, len(result.to_update), 'update')}, "
        f"{format_status_count(ReconcileStatus.ORPHANED, len(removals), 'remove')}"
    )

    if dry_run:
        print_info("Dry-run mode: No changes were made.")
        return

    if not yes and not typer.confirm("Apply these changes?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    try:
        with progress:
            outcome = session.apply(refresh, remove_orphans=not keep_orphans)
    except ConfigSyncError as e:
        print_error(f"Configuration sync failed, no packages were changed: {e}")
        raise typer.Exit(code=1) from e

    if outcome.configs:
        print_info(f"Synced {len(outcome.configs)} configuration file(s).")
    if outcome.sync.items:
        console.print(create_results_table(outcome.sync, title="Installed"))
        print_results_summary(outcome.sync, "synced")
    if outcome.removal.items:
        console.print(create_results_table(outcome.removal, title="Removed"))
        print_results_summary(outcome.removal, "removed")

    if not outcome.success:
        print_error("Some packages failed. See the log for details.")
        raise typer.Exit(code=1)

    remaining = outcome.after.reconcile.pending if outcome.after is not None else ()
    if remaining:
        names = ", ".join(e.name for e in remaining)
        print_warning(f"Packages still differ from the server after sync: {names}")
    else:
        print_success("All packages match the server.")
