"""Unit tests for watch command."""

from unittest.mock import patch

from fakes import BASE_URL, FakeSession
from modsync.cli.main import app
from modsync.remote.client import ServerClient
from typer.testing import CliRunner

runner = CliRunner()

CLIENT_TARGET = "modsync.cli.commands.watch.ServerClient"


class TestWatchCommand:
    """Tests for the watch command."""

    def test_reports_online(self, session: FakeSession, client: ServerClient) -> None:
        """Each check prints the reachability."""
        with patch(CLIENT_TARGET, return_value=client):
            result = runner.invoke(app, ["watch", "--count", "1"])

        assert result.exit_code == 0
        assert "Watching http://127.0.0.1:25569" in result.output
        assert "online" in result.output
        assert session.urls() == [BASE_URL]
        assert session.closed

    def test_reports_offline(self) -> None:
        """An unreachable server is shown as offline."""
        client = ServerClient(BASE_URL, session=FakeSession(offline=True))  # type: ignore[arg-type]

        with patch(CLIENT_TARGET, return_value=client):
            result = runner.invoke(app, ["watch", "-c", "1"])

        assert result.exit_code == 0
        assert "offline" in result.output

    def test_interval_minimum(self) -> None:
        """Intervals below one second are rejected."""
        with patch(CLIENT_TARGET) as mock_client:
            result = runner.invoke(app, ["watch", "--interval", "0.5"])

        assert result.exit_code != 0
        mock_client.assert_not_called()
