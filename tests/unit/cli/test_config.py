"""Unit tests for config commands."""

import json
from collections.abc import Callable
from pathlib import Path

from modsync.cli.main import app
from modsync.core.settings import AppSettings, load_settings
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigShow:
    """Tests for the config show command."""

    def test_defaults(self) -> None:
        """Without a settings file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "serverAddress" in result.output
        assert "127.0.0.1" in result.output
        assert "http://127.0.0.1:25569" in result.output

    def test_json_masks_secret(self, write_settings: Callable[..., AppSettings]) -> None:
        """The secret is never printed in clear."""
        write_settings(server_port=8080, secret="hunter2")

        result = runner.invoke(app, ["config", "show", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["serverPort"] == 8080
        assert data["secret"] == "*******"
        assert "hunter2" not in result.output


class TestConfigSet:
    """Tests for the config set command."""

    def test_saves_values(self, settings_file: Path) -> None:
        """Given values are written to the settings file."""
        result = runner.invoke(
            app, ["config", "set", "--server-address", "10.0.0.5", "--server-port", "6969"]
        )

        assert result.exit_code == 0
        assert "Settings saved to" in result.output
        settings = load_settings(settings_file)
        assert settings.server_address == "10.0.0.5"
        assert settings.server_port == 6969
        assert settings.base_url == "http://10.0.0.5:6969"

    def test_keeps_other_values(
        self, settings_file: Path, write_settings: Callable[..., AppSettings]
    ) -> None:
        """Values not given are preserved."""
        write_settings(secret="s3cret", excluded_packages=["Keep"])

        result = runner.invoke(app, ["config", "set", "--platform-address", "10.0.0.9:6969"])

        assert result.exit_code == 0
        settings = load_settings(settings_file)
        assert settings.secret == "s3cret"
        assert settings.excluded_packages == ["Keep"]
        assert settings.platform_base_url == "http://10.0.0.9:6969"

    def test_no_values(self, settings_file: Path) -> None:
        """Calling set without options is an error."""
        result = runner.invoke(app, ["config", "set"])

        assert result.exit_code == 1
        assert "No settings given" in result.output
        assert not settings_file.exists()

    def test_invalid_port(self, settings_file: Path) -> None:
        """Out-of-range ports are rejected and nothing is written."""
        result = runner.invoke(app, ["config", "set", "--server-port", "70000"])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert not settings_file.exists()

    def test_custom_settings_path(self, tmp_path: Path) -> None:
        """The global --settings option selects the file."""
        path = tmp_path / "elsewhere" / "settings.json"

        result = runner.invoke(app, ["--settings", str(path), "config", "set", "--secret", "x"])

        assert result.exit_code == 0
        assert load_settings(path).secret == "x"
