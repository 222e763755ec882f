"""Path management for modsync.

The game installation has a fixed layout relative to its root directory,
and modsync keeps its own settings and log file next to the executable
(the game root), the way the original manager does. User-level preferences
such as the colour theme follow the XDG Base Directory Specification.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "modsync"

SETTINGS_FILENAME = "modsync_settings.json"
LOG_FILENAME = "modsync.log"

# Environment overrides
ENV_GAME_ROOT = "MODSYNC_GAME_ROOT"
ENV_SETTINGS = "MODSYNC_SETTINGS"


class StartupError(Exception):
    """Raised when a required local file or directory is missing."""


@dataclass(frozen=True, slots=True)
class GameLayout:
    """Well-known locations inside a game installation.

    Attributes:
        root: Game root directory.
    """

    root: Path

    @property
    def plugins_dir(self) -> Path:
        """Directory holding installed plugin packages."""
        return self.root / "BepInEx" / "plugins"

    @property
    def config_dir(self) -> Path:
        """Directory holding loose plugin configuration files."""
        return self.root / "BepInEx" / "config"

    @property
    def client_path(self) -> Path:
        """Launcher executable started by ``modsync launch``."""
        return self.root / "SPT" / "SPT.Launcher.exe"

    @property
    def core_binary(self) -> Path:
        """Binary whose embedded version is the installed platform version."""
        return self.plugins_dir / "spt" / "spt-core.dll"

    @property
    def temp_dir(self) -> Path:
        """Scratch directory for platform updates."""
        return self.root / "spt_temp"

    def require_client(self) -> Path:
        """Return the launcher path, failing if it does not exist.

        Raises:
            StartupError: If the launcher executable is missing.
        """
        if not self.client_path.is_file():
            raise StartupError(f"{self.client_path.name} not found in {self.client_path.parent}")
        return self.client_path


def get_executable_dir() -> Path:
    """Get the directory the running program lives in.

    Frozen builds report the executable's directory; a regular Python
    install reports the current working directory, which is where users
    run modsync from.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path.cwd()


def get_game_root() -> Path:
    """Get the game root directory.

    Returns:
        Path from MODSYNC_GAME_ROOT, or the executable directory.
    """
    override = os.environ.get(ENV_GAME_ROOT)
    if override:
        return Path(override).expanduser()
    return get_executable_dir()


def get_settings_path(game_root: Path | None = None) -> Path:
    """Get the settings file path.

    Args:
        game_root: Game root to look in. Defaults to get_game_root().

    Returns:
        Path from MODSYNC_SETTINGS, or modsync_settings.json in the game root.
    """
    override = os.environ.get(ENV_SETTINGS)
    if override:
        return Path(override).expanduser()
    return (game_root or get_game_root()) / SETTINGS_FILENAME


def get_log_path(settings_path: Path | None = None) -> Path:
    """Get the diagnostic log file path, next to the settings file."""
    return (settings_path or get_settings_path()).parent / LOG_FILENAME


def get_config_dir() -> Path:
    """Get the per-user configuration directory.

    Returns:
        Path to ~/.config/modsync/ (or XDG_CONFIG_HOME/modsync/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME
