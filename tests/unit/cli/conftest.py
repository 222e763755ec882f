"""Fixtures for CLI command tests.

Commands build their SyncSession through ``open_session``; tests replace
it with a factory that binds the session to the fake server and reads
plugin versions from JSON descriptors.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import typer
from fakes import BASE_URL, FakeSession
from modsync.core.paths import SETTINGS_FILENAME, GameLayout
from modsync.core.pipeline import SyncSession
from modsync.core.settings import AppSettings, save_settings
from modsync.models.action import ProgressCallback
from modsync.remote.client import ServerClient
from modsync.scanners.metadata import SidecarVersionReader

SessionFactory = Callable[..., SyncSession]


@pytest.fixture
def session_factory(session: FakeSession, layout: GameLayout) -> SessionFactory:
    """Replacement for open_session backed by the fake server."""

    def factory(ctx: typer.Context, on_progress: ProgressCallback | None = None) -> SyncSession:
        return SyncSession(
            AppSettings(),
            client=ServerClient(BASE_URL, session=session),  # type: ignore[arg-type]
            game_root=layout.root,
            version_reader=SidecarVersionReader(),
            temp_dir=layout.root / "tmp",
            on_progress=on_progress,
        )

    return factory


@pytest.fixture
def settings_file(game_root: Path) -> Path:
    """Default settings file location inside the game root."""
    return game_root / SETTINGS_FILENAME


@pytest.fixture
def write_settings(settings_file: Path) -> Callable[..., AppSettings]:
    """Persist settings to the default location."""

    def write(**values: Any) -> AppSettings:
        settings = AppSettings(**values)
        save_settings(settings, settings_file)
        return settings

    return write
