"""Watch command implementation.

Polls the server's reachability on a fixed interval and prints every
change, until interrupted.
"""

from datetime import datetime
from typing import Annotated

import typer

from modsync.cli.types import get_settings
from modsync.core.poller import DEFAULT_POLL_INTERVAL, StatusPoller
from modsync.remote.client import ServerClient
from modsync.utils.formatting import console, print_info

app = typer.Typer(
    help="Watch server reachability.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def watch(
    ctx: typer.Context,
    interval: Annotated[
        float,
        typer.Option(
            "--interval",
            "-i",
            min=1.0,
            help="Seconds between checks.",
        ),
    ] = DEFAULT_POLL_INTERVAL,
    count: Annotated[
        int | None,
        typer.Option(
            "--count",
            "-c",
            min=1,
            help="Stop after this many checks.",
        ),
    ] = None,
) -> None:
    """Poll the server until interrupted (Ctrl+C)."""
    if ctx.invoked_subcommand is not None:
        return

    settings = get_settings(ctx)
    client = ServerClient(settings.base_url)

    def report(online: bool) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        state = "[success]online[/success]" if online else "[error]offline[/error]"
        console.print(f"[dim]{stamp}[/dim] {settings.base_url} {state}")

    poller = StatusPoller(client, interval=interval, on_status=report)
    print_info(f"Watching {settings.base_url} every {interval:g}s. Press Ctrl+C to stop.")
    try:
        poller.run(max_polls=count)
    except KeyboardInterrupt:
        poller.stop()
    finally:
        client.close()
