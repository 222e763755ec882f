"""Settings commands.

Show and change the persisted client settings (server address, port,
platform server and secret).
"""

from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.table import Table

from modsync.cli.types import get_options
from modsync.core.settings import AppSettings, SettingsError, load_settings, save_settings
from modsync.utils.formatting import (
    console,
    print_error,
    print_info,
    print_json,
    print_success,
)

app = typer.Typer(
    help="Show and change client settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)


def _mask(secret: str) -> str:
    if not secret:
        return ""
    return "*" * min(len(secret), 8)


@app.command()
def show(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output in JSON format."),
    ] = False,
) -> None:
    """Show the current settings."""
    options = get_options(ctx)
    settings = load_settings(options.settings_path)

    data = settings.model_dump(by_alias=True)
    data["secret"] = _mask(settings.secret)

    if json_output:
        print_json(data)
        return

    table = Table(
        title=f"Settings ({options.settings_path})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        text = ", ".join(value) if isinstance(value, list) else str(value)
        table.add_row(key, text)

    console.print(table)
    console.print(f"[dim]Server URL: {settings.base_url}[/dim]")


@app.command("set")
def set_settings(
    ctx: typer.Context,
    server_address: Annotated[
        str | None,
        typer.Option("--server-address", "-a", help="Mod server host or URL."),
    ] = None,
    server_port: Annotated[
        int | None,
        typer.Option("--server-port", "-p", help="Mod server port."),
    ] = None,
    platform_address: Annotated[
        str | None,
        typer.Option(
            "--platform-address",
            help="Platform server URL (empty to use the mod server).",
        ),
    ] = None,
    secret: Annotated[
        str | None,
        typer.Option("--secret", help="Admin secret passed to privileged endpoints."),
    ] = None,
) -> None:
    """Change one or more settings."""
    changes: dict[str, Any] = {}
    if server_address is not None:
        changes["server_address"] = server_address
    if server_port is not None:
        changes["server_port"] = server_port
    if platform_address is not None:
        changes["platform_server_address"] = platform_address
    if secret is not None:
        changes["secret"] = secret

    if not changes:
        print_info("No settings given. See 'modsync config set --help'.")
        raise typer.Exit(code=1)

    options = get_options(ctx)
    current = load_settings(options.settings_path)

    try:
        updated = AppSettings.model_validate({**current.model_dump(), **changes})
    except ValidationError as e:
        print_error(f"Invalid settings: {e.errors()[0]['msg']}")
        raise typer.Exit(code=1) from e

    try:
        path = save_settings(updated, options.settings_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings saved to {path}")
