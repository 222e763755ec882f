"""Platform commands.

Check the installed platform version against the server and install the
server's platform update.
"""

from typing import Annotated

import typer

from modsync.cli.display import print_platform_status
from modsync.cli.progress import SyncProgress
from modsync.cli.types import open_session
from modsync.sync.platform import PlatformUpdateError
from modsync.utils.formatting import print_error, print_info, print_json, print_success

app = typer.Typer(
    help="Check and update the game platform.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def check(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output in JSON format."),
    ] = False,
) -> None:
    """Compare the installed platform version with the server's."""
    session = open_session(ctx)
    try:
        status = session.platform_updater().check()
    finally:
        session.close()

    if json_output:
        print_json(status.to_dict())
        return

    print_platform_status(status)
    if status.update_available:
        print_info("Run 'modsync platform update' to install it.")
    elif status.remote_version is None:
        print_info("The server did not report a platform version.")
    else:
        print_success("Platform is up to date.")


@app.command()
def update(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", help="Reinstall even if no newer version is offered."),
    ] = False,
) -> None:
    """Download and install the server's platform version.

    Every file the update overwrites is backed up first and restored if
    the update fails.
    """
    progress = SyncProgress()
    session = open_session(ctx, on_progress=progress)
    try:
        updater = session.platform_updater()
        status = updater.check()
        print_platform_status(status)

        if not status.update_available and not force:
            print_success("Platform is up to date. Nothing to do.")
            return

        if not yes and not typer.confirm("Install the platform update?", default=False):
            print_info("Aborted.")
            raise typer.Exit(code=0)

        try:
            with progress:
                written = updater.update()
        except PlatformUpdateError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
    finally:
        session.close()

    print_success(f"Platform updated ({len(written)} files).")
