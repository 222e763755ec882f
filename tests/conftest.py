"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules: an isolated
game root, a game layout, and a server client backed by a fake session.
"""

from pathlib import Path

import pytest
from fakes import BASE_URL, FakeSession
from modsync.core.paths import GameLayout
from modsync.remote.client import ServerClient
from modsync.scanners.metadata import SidecarVersionReader


@pytest.fixture(autouse=True)
def isolated_env(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point every modsync location at a temporary game root.

    The game root lives outside ``tmp_path`` so tests own that directory.
    """
    game_root = tmp_path_factory.mktemp("game")
    monkeypatch.setenv("MODSYNC_GAME_ROOT", str(game_root))
    monkeypatch.delenv("MODSYNC_SETTINGS", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    return game_root


@pytest.fixture
def game_root(isolated_env: Path) -> Path:
    """The temporary game root directory."""
    return isolated_env


@pytest.fixture
def layout(game_root: Path) -> GameLayout:
    """Game layout with the plugins and config directories created."""
    layout = GameLayout(game_root)
    layout.plugins_dir.mkdir(parents=True)
    layout.config_dir.mkdir(parents=True)
    return layout


@pytest.fixture
def session() -> FakeSession:
    """An online fake HTTP session with no routes."""
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> ServerClient:
    """A server client talking to the fake session."""
    return ServerClient(BASE_URL, session=session)  # type: ignore[arg-type]


@pytest.fixture
def sidecar_reader() -> SidecarVersionReader:
    """Version reader using JSON descriptors, so tests need no PE files."""
    return SidecarVersionReader()
