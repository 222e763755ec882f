"""CLI commands for modsync.

This package contains all subcommand implementations.
"""

from modsync.cli.commands import admin, config, launch, platform, status, sync, watch

__all__ = ["admin", "config", "launch", "platform", "status", "sync", "watch"]
