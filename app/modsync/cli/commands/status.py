"""Status command implementation.

Compares the server manifest with the installed packages and shows what
the next step is.
"""

from typing import Annotated

import typer

from modsync.cli.display import create_reconcile_table, print_refresh_summary
from modsync.cli.types import open_session
from modsync.core.pipeline import PrimaryAction
from modsync.utils.formatting import console, print_json, print_success, print_warning

app = typer.Typer(
    help="Compare installed packages with the server.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def status(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output in JSON format.",
        ),
    ] = False,
    changes_only: Annotated[
        bool,
        typer.Option(
            "--changes",
            "-c",
            help="Only list packages that are not up to date.",
        ),
    ] = False,
) -> None:
    """Show the sync state of every package.

    Examples:
        modsync status              # Table of all packages
        modsync status --changes    # Only what a sync would touch
        modsync status --json       # Machine-readable output
    """
    if ctx.invoked_subcommand is not None:
        return

    session = open_session(ctx)
    try:
        refresh = session.refresh()
    finally:
        session.close()
    action = session.primary_action(refresh)

    if json_output:
        data = {"primary_action": action.value, **refresh.to_dict()}
        print_json(data)
        return

    if action == PrimaryAction.OFFLINE:
        print_warning(f"Server {session.settings.base_url} is offline or has no manifest.")

    if refresh.reconcile.entries:
        console.print(create_reconcile_table(refresh.reconcile, show_all=not changes_only))
    print_refresh_summary(refresh, action)

    if action == PrimaryAction.LAUNCH:
        print_success("All packages match the server.")
