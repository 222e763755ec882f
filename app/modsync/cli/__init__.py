"""CLI package for modsync.

This package contains the Typer application and all subcommands.
"""

from modsync.cli.main import app

__all__ = ["app"]
