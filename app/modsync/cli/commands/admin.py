"""Admin commands.

Validate the configured secret and use the server's privileged endpoints
to query or close server-side resources.
"""

from typing import Annotated

import typer

from modsync.cli.types import get_settings
from modsync.core.settings import AppSettings
from modsync.remote.client import ServerClient
from modsync.remote.models import AdminStatus
from modsync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Privileged server operations.",
    invoke_without_command=True,
    no_args_is_help=True,
)

DEFAULT_RESOURCE = "server"


def _require_secret(settings: AppSettings) -> str:
    """Return the configured secret, exiting when none is set."""
    if not settings.secret:
        print_error("No secret configured. Use 'modsync config set --secret ...'.")
        raise typer.Exit(code=1)
    return settings.secret


def _require_privileges(client: ServerClient, secret: str) -> AdminStatus:
    """Validate the secret and exit unless privileged actions are allowed."""
    status = client.validate_secret(secret)
    if not status.is_enabled or not status.allow_privileged_action:
        print_error("The server does not allow privileged actions with this secret.")
        raise typer.Exit(code=1)
    return status


@app.command()
def validate(ctx: typer.Context) -> None:
    """Check whether the server accepts the configured secret."""
    settings = get_settings(ctx)
    secret = _require_secret(settings)

    client = ServerClient(settings.base_url)
    try:
        status = client.validate_secret(secret)
    finally:
        client.close()

    if not status.is_enabled:
        print_error("Secret rejected or server unreachable.")
        raise typer.Exit(code=1)

    print_success("Secret accepted.")
    allowed = "yes" if status.allow_privileged_action else "no"
    console.print(f"[bold]Privileged actions:[/bold] {allowed}")


@app.command()
def running(
    ctx: typer.Context,
    resource: Annotated[
        str,
        typer.Argument(help="Server-side resource to query."),
    ] = DEFAULT_RESOURCE,
) -> None:
    """Ask whether a server-side resource is running."""
    settings = get_settings(ctx)
    secret = _require_secret(settings)

    client = ServerClient(settings.base_url)
    try:
        _require_privileges(client, secret)
        is_running = client.is_resource_running(resource, secret)
    finally:
        client.close()

    if is_running:
        print_success(f"{resource} is running.")
    else:
        print_info(f"{resource} is not running.")


@app.command()
def close(
    ctx: typer.Context,
    resource: Annotated[
        str,
        typer.Argument(help="Server-side resource to close."),
    ] = DEFAULT_RESOURCE,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Ask the server to close a resource."""
    settings = get_settings(ctx)
    secret = _require_secret(settings)

    client = ServerClient(settings.base_url)
    try:
        _require_privileges(client, secret)
        if not yes and not typer.confirm(f"Close {resource} on the server?", default=False):
            print_info("Aborted.")
            raise typer.Exit(code=0)
        closed = client.close_resource(resource, secret)
    finally:
        client.close()

    if not closed:
        print_error(f"The server did not close {resource}.")
        raise typer.Exit(code=1)
    print_success(f"{resource} closed.")
