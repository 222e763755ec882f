"""Unit tests for persisted client settings."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from modsync.core.settings import (
    DEFAULT_SERVER_PORT,
    AppSettings,
    SettingsError,
    load_settings,
    save_settings,
)
from pydantic import ValidationError


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_defaults(self) -> None:
        """Defaults point at a local server."""
        settings = AppSettings()
        assert settings.base_url == f"http://127.0.0.1:{DEFAULT_SERVER_PORT}"
        assert settings.manifest_paths == ["PluginVersions.json"]
        assert settings.version_source == "embedded"
        assert "spt" in settings.excluded_folders
        assert "BepInEx.cfg" in settings.excluded_configs

    def test_camel_case_aliases(self) -> None:
        """Settings files use camelCase keys."""
        settings = AppSettings.model_validate(
            {"serverAddress": "10.0.0.5", "serverPort": 7000, "platformServerAddress": ""}
        )
        assert settings.base_url == "http://10.0.0.5:7000"

    def test_address_with_scheme(self) -> None:
        """An address that already has a scheme keeps it."""
        settings = AppSettings(server_address="https://mods.example/", server_port=443)
        assert settings.base_url == "https://mods.example:443"

    def test_platform_defaults_to_mod_server(self) -> None:
        """Without a platform address, the mod server is used."""
        settings = AppSettings(server_address="host", server_port=1)
        assert settings.platform_base_url == settings.base_url

    def test_platform_address(self) -> None:
        """A separate platform server gets an http scheme when it has none."""
        settings = AppSettings(platform_server_address="platform.test:8080")
        assert settings.platform_base_url == "http://platform.test:8080"

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_port_range(self, port: int) -> None:
        """Ports outside 1..65535 are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(server_port=port)

    def test_empty_address_rejected(self) -> None:
        """An empty server address is rejected."""
        with pytest.raises(ValidationError):
            AppSettings(server_address="")


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file yields defaults."""
        assert load_settings(tmp_path / "absent.json") == AppSettings()

    def test_reads_file(self, tmp_path: Path) -> None:
        """Values from the file are applied."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"serverAddress": "1.2.3.4", "secret": "s3cret"}))

        settings = load_settings(path)

        assert settings.server_address == "1.2.3.4"
        assert settings.secret == "s3cret"

    def test_malformed_json(self, tmp_path: Path) -> None:
        """Unparsable files fall back to defaults."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        assert load_settings(path) == AppSettings()

    def test_not_an_object(self, tmp_path: Path) -> None:
        """A JSON array falls back to defaults."""
        path = tmp_path / "settings.json"
        path.write_text("[]")

        assert load_settings(path) == AppSettings()

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Out-of-range values fall back to defaults."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"serverPort": 99999}))

        assert load_settings(path) == AppSettings()

    def test_default_path(self, game_root: Path) -> None:
        """Without a path, the game root settings file is read."""
        (game_root / "modsync_settings.json").write_text(json.dumps({"serverPort": 1234}))

        assert load_settings().server_port == 1234


class TestSaveSettings:
    """Tests for save_settings function."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saved settings load back unchanged."""
        path = tmp_path / "settings.json"
        original = AppSettings(server_address="host", server_port=9000, secret="x")

        save_settings(original, path)

        assert load_settings(path) == original

    def test_writes_camel_case(self, tmp_path: Path) -> None:
        """The file uses camelCase keys."""
        path = tmp_path / "settings.json"

        save_settings(AppSettings(), path)

        data = json.loads(path.read_text())
        assert "serverAddress" in data
        assert "server_address" not in data

    def test_creates_parent(self, tmp_path: Path) -> None:
        """Missing parent directories are created."""
        path = tmp_path / "nested" / "settings.json"

        assert save_settings(AppSettings(), path) == path
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """Atomic writes leave no temporary files behind."""
        save_settings(AppSettings(), tmp_path / "settings.json")

        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]

    def test_write_failure(self, tmp_path: Path) -> None:
        """OS errors are reported as SettingsError."""
        with (
            patch("modsync.core.settings.os.replace", side_effect=OSError("disk full")),
            pytest.raises(SettingsError, match="disk full"),
        ):
            save_settings(AppSettings(), tmp_path / "settings.json")

        assert list(tmp_path.iterdir()) == []
