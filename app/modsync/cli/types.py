"""Shared types and utilities for CLI commands.

This module holds the global options collected by the main callback and
the helpers every command uses to turn them into settings and a session.
"""

from dataclasses import dataclass
from pathlib import Path

import typer

from modsync.core.paths import get_game_root, get_settings_path
from modsync.core.pipeline import SyncSession
from modsync.core.settings import AppSettings, load_settings
from modsync.models.action import ProgressCallback


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Global options shared by all commands.

    Attributes:
        verbose: Whether DEBUG output is shown.
        settings_path: Settings file in use.
        game_root: Game root directory in use.
    """

    verbose: bool
    settings_path: Path
    game_root: Path


def get_options(ctx: typer.Context) -> CliOptions:
    """Get the global options, falling back to the defaults.

    Commands invoked without the main callback (for instance from tests
    that call a sub-app directly) still get a usable configuration.
    """
    root = ctx.find_root()
    if isinstance(root.obj, CliOptions):
        return root.obj
    return CliOptions(verbose=False, settings_path=get_settings_path(), game_root=get_game_root())


def get_settings(ctx: typer.Context) -> AppSettings:
    """Load the settings named by the global options."""
    return load_settings(get_options(ctx).settings_path)


def open_session(ctx: typer.Context, on_progress: ProgressCallback | None = None) -> SyncSession:
    """Create a sync session from the global options.

    Args:
        ctx: Typer context.
        on_progress: Optional subscriber for progress events.

    Returns:
        SyncSession bound to the configured server and game root.
    """
    options = get_options(ctx)
    return SyncSession(
        load_settings(options.settings_path),
        game_root=options.game_root,
        on_progress=on_progress,
    )
