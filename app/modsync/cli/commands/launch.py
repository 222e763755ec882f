"""Launch command implementation.

Starts the game launcher once the installed packages match the server.
"""

from typing import Annotated

import typer

from modsync.cli.display import format_primary_action
from modsync.cli.types import open_session
from modsync.core.paths import StartupError
from modsync.core.pipeline import PrimaryAction, launch_client
from modsync.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="Start the game launcher.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def launch(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Launch even if packages differ from the server.",
        ),
    ] = False,
) -> None:
    """Start the game launcher if everything is in sync."""
    if ctx.invoked_subcommand is not None:
        return

    session = open_session(ctx)
    try:
        client_path = session.layout.require_client()
        refresh = session.refresh()
    except StartupError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    finally:
        session.close()

    action = session.primary_action(refresh)
    if action != PrimaryAction.LAUNCH:
        if not force:
            console.print(f"[bold]Next:[/bold] {format_primary_action(action)}")
            print_error("Packages do not match the server. Run 'modsync sync' or use --force.")
            raise typer.Exit(code=1)
        print_warning("Launching although packages do not match the server.")

    try:
        pid = launch_client(client_path)
    except StartupError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Started {client_path.name} (pid {pid}).")
