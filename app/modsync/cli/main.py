"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from modsync import __version__
from modsync.cli.commands import admin, config, launch, platform, status, sync, watch
from modsync.cli.types import CliOptions
from modsync.core.logs import setup_logging
from modsync.core.paths import get_game_root, get_log_path, get_settings_path

# Create main Typer app
app = typer.Typer(
    name="modsync",
    help="Keep a game's mod packages in sync with a mod server.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"modsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    settings_path: Annotated[
        Path | None,
        typer.Option(
            "--settings",
            "-s",
            help="Settings file (default: modsync_settings.json in the game root).",
        ),
    ] = None,
    game_root: Annotated[
        Path | None,
        typer.Option(
            "--game-root",
            "-g",
            file_okay=False,
            help="Game installation directory (default: current directory).",
        ),
    ] = None,
) -> None:
    """modsync - Keep a game's mod packages in sync with a mod server.

    Compares the installed plugins with the server's manifest, installs
    and updates what differs, removes what the server no longer lists,
    and starts the game once everything matches.
    """
    root = game_root or get_game_root()
    settings_file = settings_path or get_settings_path(root)

    setup_logging(verbose=verbose, log_file=get_log_path(settings_file))

    # Store options in context for subcommands
    ctx.obj = CliOptions(verbose=verbose, settings_path=settings_file, game_root=root)


# Register commands
app.add_typer(status.app, name="status")
app.add_typer(sync.app, name="sync")
app.add_typer(launch.app, name="launch")
app.add_typer(platform.app, name="platform")
app.add_typer(config.app, name="config")
app.add_typer(admin.app, name="admin")
app.add_typer(watch.app, name="watch")


if __name__ == "__main__":
    app()
