"""Unit tests for streamed downloads."""

from pathlib import Path

import pytest
import requests
from fakes import BASE_URL, FakeSession, make_response
from modsync.remote.client import RemoteError, ServerClient
from modsync.sync.download import download_to_file, unique_temp_path

URL = f"{BASE_URL}/mods/Alpha"


class TestUniqueTempPath:
    """Tests for unique_temp_path function."""

    def test_distinct_names(self, tmp_path: Path) -> None:
        """Two calls never produce the same path."""
        first = unique_temp_path(tmp_path, "Alpha", ".zip")
        second = unique_temp_path(tmp_path, "Alpha", ".zip")

        assert first != second
        assert first.parent == tmp_path
        assert first.name.startswith("Alpha_")
        assert first.suffix == ".zip"

    def test_unsafe_characters_replaced(self, tmp_path: Path) -> None:
        """Path separators in the prefix cannot escape the directory."""
        path = unique_temp_path(tmp_path, "../evil/name")

        assert path.parent == tmp_path
        assert "/" not in path.name


class TestDownloadToFile:
    """Tests for download_to_file function."""

    def test_writes_file(
        self, session: FakeSession, client: ServerClient, tmp_path: Path
    ) -> None:
        """The body is written to the destination."""
        data = b"x" * 1000
        session.add_bytes(URL, data)
        destination = tmp_path / "a.zip"

        written = download_to_file(client, URL, destination, chunk_size=64)

        assert written == 1000
        assert destination.read_bytes() == data

    def test_percent_updates_throttled(
        self, session: FakeSession, client: ServerClient, tmp_path: Path
    ) -> None:
        """Progress is reported only when it grows by a whole point."""
        session.add_bytes(URL, b"x" * 1000)
        seen: list[int | None] = []

        download_to_file(client, URL, tmp_path / "a.zip", chunk_size=3, on_percent=seen.append)

        assert seen == sorted(seen)
        assert len(seen) == len(set(seen))
        assert seen[-1] == 100
        assert len(seen) <= 100

    def test_unknown_length(
        self, session: FakeSession, client: ServerClient, tmp_path: Path
    ) -> None:
        """Without a content length, progress is indeterminate and the copy completes."""
        session.add_bytes(URL, b"y" * 500, length=False)
        seen: list[int | None] = []
        destination = tmp_path / "a.zip"

        written = download_to_file(client, URL, destination, on_percent=seen.append)

        assert written == 500
        assert seen == [None]
        assert destination.stat().st_size == 500

    def test_truncated(self, session: FakeSession, client: ServerClient, tmp_path: Path) -> None:
        """Fewer bytes than announced raise RemoteError."""
        session.routes[URL] = lambda: make_response(
            b"short", url=URL, headers={"Content-Length": "100"}
        )

        with pytest.raises(RemoteError, match="truncated"):
            download_to_file(client, URL, tmp_path / "a.zip")

    def test_http_error(self, client: ServerClient, tmp_path: Path) -> None:
        """HTTP errors raise RemoteError and create no file."""
        destination = tmp_path / "a.zip"

        with pytest.raises(RemoteError):
            download_to_file(client, URL, destination)

        assert not destination.exists()

    def test_interrupted_stream(self, client: ServerClient, tmp_path: Path) -> None:
        """Errors while reading the body raise RemoteError."""

        class FailingResponse:
            headers = {"Content-Length": "10"}

            def iter_content(self, chunk_size: int) -> object:
                yield b"abc"
                raise requests.ConnectionError("reset by peer")

            def close(self) -> None:
                pass

        client.open_stream = lambda url: FailingResponse()  # type: ignore[method-assign]

        with pytest.raises(RemoteError, match="interrupted"):
            download_to_file(client, URL, tmp_path / "a.zip")

    def test_offline(self, tmp_path: Path) -> None:
        """Connection failures raise RemoteError."""
        client = ServerClient(BASE_URL, session=FakeSession(offline=True))  # type: ignore[arg-type]

        with pytest.raises(RemoteError):
            download_to_file(client, URL, tmp_path / "a.zip")
