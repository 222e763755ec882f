"""Unit tests for process execution utilities."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from modsync.utils.shell import LaunchResult, spawn_detached


class TestSpawnDetached:
    """Tests for spawn_detached function."""

    @patch("modsync.utils.shell.subprocess.Popen")
    def test_returns_pid(self, mock_popen: MagicMock, tmp_path: Path) -> None:
        """The child's process id is returned."""
        mock_popen.return_value = MagicMock(pid=1234)

        result = spawn_detached(tmp_path / "Launcher.exe")

        assert result == LaunchResult(pid=1234)
        assert result.success

    @patch("modsync.utils.shell.subprocess.Popen")
    def test_detaches_from_parent(self, mock_popen: MagicMock, tmp_path: Path) -> None:
        """No pipes are inherited and the child gets its own session."""
        mock_popen.return_value = MagicMock(pid=1)

        spawn_detached(tmp_path / "Launcher.exe")

        args, kwargs = mock_popen.call_args
        assert args[0] == [str(tmp_path / "Launcher.exe")]
        assert kwargs["stdin"] == subprocess.DEVNULL
        assert kwargs["stdout"] == subprocess.DEVNULL
        assert kwargs["stderr"] == subprocess.DEVNULL
        assert kwargs["start_new_session"] is True

    @patch("modsync.utils.shell.subprocess.Popen")
    def test_default_cwd(self, mock_popen: MagicMock, tmp_path: Path) -> None:
        """The program runs from its own directory by default."""
        mock_popen.return_value = MagicMock(pid=1)

        spawn_detached(tmp_path / "SPT" / "Launcher.exe")

        assert mock_popen.call_args.kwargs["cwd"] == str(tmp_path / "SPT")

    @patch("modsync.utils.shell.subprocess.Popen")
    def test_custom_cwd(self, mock_popen: MagicMock, tmp_path: Path) -> None:
        """An explicit working directory is passed through."""
        mock_popen.return_value = MagicMock(pid=1)

        spawn_detached(tmp_path / "Launcher.exe", cwd=tmp_path / "work")

        assert mock_popen.call_args.kwargs["cwd"] == str(tmp_path / "work")

    @patch("modsync.utils.shell.subprocess.Popen")
    def test_os_error(self, mock_popen: MagicMock, tmp_path: Path) -> None:
        """Start failures are returned, not raised."""
        mock_popen.side_effect = PermissionError("denied")

        result = spawn_detached(tmp_path / "Launcher.exe")

        assert not result.success
        assert result.pid is None
        assert result.error == "denied"
