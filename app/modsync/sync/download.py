"""Streamed archive downloads with throttled progress reporting."""

import logging
import uuid
from collections.abc import Callable
from contextlib import closing
from pathlib import Path

import requests

from modsync.remote.client import RemoteError, ServerClient

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 81920

PercentCallback = Callable[[int | None], None]


def unique_temp_path(directory: Path, prefix: str, suffix: str = "") -> Path:
    """Build a fresh, collision-free path inside ``directory``.

    Args:
        directory: Parent directory.
        prefix: Readable prefix, usually the package name.
        suffix: Optional suffix such as ``.zip``.

    Returns:
        Path that did not exist when the name was generated.
    """
    safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in prefix) or "item"
    return directory / f"{safe}_{uuid.uuid4().hex}{suffix}"


def download_to_file(
    client: ServerClient,
    url: str,
    destination: Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_percent: PercentCallback | None = None,
) -> int:
    """Stream ``url`` into ``destination`` in fixed-size chunks.

    The callback receives None once when the server sends no content
    length, and otherwise a new percentage each time it has grown by at
    least one point.

    Args:
        client: Server client used to open the stream.
        url: Absolute download URL.
        destination: File to create (overwritten if present).
        chunk_size: Bytes per read.
        on_percent: Optional progress callback.

    Returns:
        Number of bytes written.

    Raises:
        RemoteError: If the transfer fails.
        OSError: If the destination cannot be written.
    """
    response = client.open_stream(url)
    with closing(response):
        total = _content_length(response)
        if total <= 0 and on_percent is not None:
            on_percent(None)

        written = 0
        last_percent = 0
        try:
            with destination.open("wb") as out:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if not chunk:
                        continue
                    out.write(chunk)
                    written += len(chunk)
                    if total > 0 and on_percent is not None:
                        percent = min(100, written * 100 // total)
                        if percent - last_percent >= 1:
                            last_percent = percent
                            on_percent(percent)
        except requests.RequestException as e:
            raise RemoteError(f"Download interrupted for {url}: {e}") from e

    if total > 0 and written < total:
        raise RemoteError(f"Download truncated for {url}: {written} of {total} bytes")

    logger.debug("Downloaded %d bytes from %s", written, url)
    return written


def _content_length(response: requests.Response) -> int:
    raw = response.headers.get("Content-Length")
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0
