"""Persisted client settings.

Settings are stored as a flat JSON object next to the executable. A
missing file means built-in defaults; an unreadable one is reported and
also falls back to defaults so the client can still start.
"""

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from modsync.configs.excluded import DEFAULT_EXCLUDED_CONFIGS
from modsync.core.paths import get_settings_path
from modsync.scanners.metadata import VersionSource

logger = logging.getLogger(__name__)

DEFAULT_SERVER_ADDRESS = "127.0.0.1"
DEFAULT_SERVER_PORT = 25569
DEFAULT_MANIFEST_PATHS: tuple[str, ...] = ("PluginVersions.json",)

# Folders shipped with the platform itself, never managed as packages
DEFAULT_EXCLUDED_FOLDERS: tuple[str, ...] = ("spt",)


class SettingsError(Exception):
    """Raised when settings cannot be written."""


class AppSettings(BaseModel):
    """Client settings.

    Attributes:
        server_address: Host of the mod server.
        server_port: Port of the mod server.
        platform_server_address: Base URL of the platform server; when empty,
            the mod server is used.
        secret: Opaque credential passed to privileged endpoints.
        manifest_paths: Candidate manifest locations, tried in order. Each is
            a path under the server base URL or an absolute URL.
        version_source: Where plugin versions are read from.
        excluded_packages: Package names never reported by the scanner.
        excluded_folders: Plugin folders never reported by the scanner.
        excluded_configs: Config files ignored by the config sync.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    server_address: Annotated[str, Field(min_length=1)] = DEFAULT_SERVER_ADDRESS
    server_port: Annotated[int, Field(gt=0, lt=65536)] = DEFAULT_SERVER_PORT
    platform_server_address: str = ""
    secret: str = ""
    manifest_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_MANIFEST_PATHS))
    version_source: VersionSource = "embedded"
    excluded_packages: list[str] = Field(default_factory=list)
    excluded_folders: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_FOLDERS))
    excluded_configs: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_CONFIGS))

    @property
    def base_url(self) -> str:
        """Base URL of the mod server."""
        address = self.server_address.strip().rstrip("/")
        if "://" in address:
            return f"{address}:{self.server_port}"
        return f"http://{address}:{self.server_port}"

    @property
    def platform_base_url(self) -> str:
        """Base URL of the platform server."""
        address = self.platform_server_address.strip().rstrip("/")
        if not address:
            return self.base_url
        if "://" in address:
            return address
        return f"http://{address}"


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings from a JSON file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        AppSettings; defaults when the file is absent or invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return AppSettings()

    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Failed to read settings %s, using defaults: %s", settings_path, e)
        return AppSettings()

    if not isinstance(data, dict):
        logger.warning("Settings file %s is not a JSON object, using defaults", settings_path)
        return AppSettings()

    try:
        return AppSettings.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid settings in %s, using defaults: %s", settings_path, e)
        return AppSettings()


def save_settings(settings: AppSettings, path: Path | None = None) -> Path:
    """Save settings to a JSON file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        settings: The settings to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    payload = json.dumps(settings.model_dump(by_alias=True), indent=2) + "\n"

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(payload)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
