"""Periodic server reachability checks."""

import logging
import threading
from collections.abc import Callable

from modsync.remote.client import ServerClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 300.0

StatusCallback = Callable[[bool], None]


class StatusPoller:
    """Re-checks whether the server is reachable on a fixed interval.

    The poller only reports reachability. It never fetches the manifest or
    touches reconciliation entries, so it cannot interfere with a sync in
    progress.

    Args:
        client: Server client to poll.
        interval: Seconds between checks.
        on_status: Called with the reachability after every check.
    """

    def __init__(
        self,
        client: ServerClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_status: StatusCallback | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self._client = client
        self._interval = interval
        self._on_status = on_status
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.last_status: bool | None = None

    def poll_once(self) -> bool:
        """Check reachability once and notify the subscriber."""
        status = self._client.check_reachable()
        if status != self.last_status:
            logger.info("Server %s", "reachable" if status else "unreachable")
        self.last_status = status
        if self._on_status is not None:
            self._on_status(status)
        return status

    def run(self, max_polls: int | None = None) -> None:
        """Poll in the calling thread until stopped.

        Args:
            max_polls: Stop after this many checks; None polls forever.
        """
        polls = 0
        while not self._stop.is_set():
            self.poll_once()
            polls += 1
            if max_polls is not None and polls >= max_polls:
                break
            self._stop.wait(self._interval)

    def start(self) -> None:
        """Poll in a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="modsync-poller", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and wait for the background thread, if any."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval)
            self._thread = None
