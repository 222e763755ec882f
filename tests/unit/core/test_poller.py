"""Unit tests for the server reachability poller."""

import threading
from unittest.mock import MagicMock

import pytest
from modsync.core.poller import StatusPoller


def make_client(*statuses: bool) -> MagicMock:
    client = MagicMock()
    client.check_reachable.side_effect = list(statuses)
    return client


class TestStatusPoller:
    """Tests for StatusPoller."""

    def test_rejects_non_positive_interval(self) -> None:
        """The interval must be positive."""
        with pytest.raises(ValueError, match="positive"):
            StatusPoller(MagicMock(), interval=0)

    def test_poll_once_notifies(self) -> None:
        """Each check reports to the subscriber and is remembered."""
        seen: list[bool] = []
        poller = StatusPoller(make_client(True), on_status=seen.append)

        assert poller.poll_once() is True
        assert seen == [True]
        assert poller.last_status is True

    def test_run_stops_after_max_polls(self) -> None:
        """run() returns after the requested number of checks."""
        seen: list[bool] = []
        client = make_client(True, False, True)
        poller = StatusPoller(client, interval=0.01, on_status=seen.append)

        poller.run(max_polls=3)

        assert seen == [True, False, True]
        assert client.check_reachable.call_count == 3

    def test_only_checks_reachability(self) -> None:
        """The poller never fetches the manifest."""
        client = make_client(True)
        poller = StatusPoller(client)

        poller.run(max_polls=1)

        client.fetch_manifest.assert_not_called()

    def test_background_thread_stops(self) -> None:
        """start() polls in a daemon thread until stop()."""
        client = MagicMock()
        client.check_reachable.return_value = True
        polled = threading.Event()
        poller = StatusPoller(client, interval=0.01, on_status=lambda _: polled.set())

        poller.start()
        assert polled.wait(timeout=5)
        poller.stop()

        assert client.check_reachable.called
        assert poller.last_status is True
