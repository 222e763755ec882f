"""Console output shared by the CLI commands.

Tables, summaries and ``--json`` documents go to stdout through
``console``. Warnings, errors and log records go to stderr through
``err_console``, so piping ``modsync status --json`` yields clean JSON.
"""

import json
import sys
from typing import Any, TextIO

from rich.console import Console

from modsync.core.theme import get_theme


def _make_console(stream: TextIO, *, stderr: bool = False) -> Console:
    # Hex theme colours need truecolor; redirected output stays plain
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console(sys.stdout)
err_console = _make_console(sys.stderr, stderr=True)


def print_info(message: str) -> None:
    console.print(message, style="info")


def print_success(message: str) -> None:
    console.print(message, style="success")


def print_warning(message: str) -> None:
    """Print a warning on stderr."""
    err_console.print(f"[warning]Warning:[/warning] {message}")


def print_error(message: str) -> None:
    """Print an error on stderr."""
    err_console.print(f"[error]Error:[/error] {message}")


def print_json(data: Any) -> None:
    """Print a JSON document on stdout for ``--json`` output."""
    console.print_json(json.dumps(data, default=str))
