"""Unit tests for path management.

Tests for the game layout, the game-root based settings and log locations,
and the XDG configuration directory.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from modsync.core.paths import (
    APP_NAME,
    LOG_FILENAME,
    SETTINGS_FILENAME,
    GameLayout,
    StartupError,
    get_config_dir,
    get_executable_dir,
    get_game_root,
    get_log_path,
    get_settings_path,
)


class TestGameLayout:
    """Tests for GameLayout locations."""

    def test_well_known_locations(self, tmp_path: Path) -> None:
        """Layout paths hang off the game root."""
        layout = GameLayout(tmp_path)
        assert layout.plugins_dir == tmp_path / "BepInEx" / "plugins"
        assert layout.config_dir == tmp_path / "BepInEx" / "config"
        assert layout.core_binary == tmp_path / "BepInEx" / "plugins" / "spt" / "spt-core.dll"
        assert layout.temp_dir == tmp_path / "spt_temp"

    def test_require_client_present(self, tmp_path: Path) -> None:
        """require_client returns the launcher when it exists."""
        layout = GameLayout(tmp_path)
        layout.client_path.parent.mkdir(parents=True)
        layout.client_path.write_bytes(b"MZ")

        assert layout.require_client() == layout.client_path

    def test_require_client_missing(self, tmp_path: Path) -> None:
        """require_client raises StartupError when the launcher is missing."""
        with pytest.raises(StartupError, match="SPT.Launcher.exe"):
            GameLayout(tmp_path).require_client()


class TestGameRoot:
    """Tests for get_game_root and get_executable_dir."""

    def test_env_override(self, tmp_path: Path) -> None:
        """MODSYNC_GAME_ROOT wins."""
        with patch.dict(os.environ, {"MODSYNC_GAME_ROOT": str(tmp_path)}):
            assert get_game_root().resolve() == tmp_path.resolve()

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an override, the working directory is the game root."""
        monkeypatch.delenv("MODSYNC_GAME_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_game_root().resolve() == tmp_path.resolve()

    def test_frozen_executable(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Frozen builds use the executable's directory."""
        exe = tmp_path / "modsync.exe"
        exe.write_bytes(b"")
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(exe))

        assert get_executable_dir() == tmp_path.resolve()


class TestSettingsAndLogPaths:
    """Tests for get_settings_path and get_log_path."""

    def test_settings_in_game_root(self, tmp_path: Path) -> None:
        """Settings live in the given game root."""
        assert get_settings_path(tmp_path) == tmp_path / SETTINGS_FILENAME

    def test_settings_default_root(self, game_root: Path) -> None:
        """Without an argument, the configured game root is used."""
        assert get_settings_path() == game_root / SETTINGS_FILENAME

    def test_settings_env_override(self, tmp_path: Path) -> None:
        """MODSYNC_SETTINGS wins over the game root."""
        custom = tmp_path / "custom.json"
        with patch.dict(os.environ, {"MODSYNC_SETTINGS": str(custom)}):
            assert get_settings_path(tmp_path / "elsewhere") == custom

    def test_log_next_to_settings(self, tmp_path: Path) -> None:
        """The log file sits next to the settings file."""
        assert get_log_path(tmp_path / "s.json") == tmp_path / LOG_FILENAME


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME
