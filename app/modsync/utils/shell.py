"""Process execution utilities.

Provides a detached process start for the game launcher with proper
error handling.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class LaunchResult:
    """Result of starting an external program.

    Attributes:
        pid: Process id of the started program, None if it did not start.
        error: Error message if the program could not be started.
    """

    pid: int | None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the program was started."""
        return self.pid is not None


def spawn_detached(executable: Path, *, cwd: Path | None = None) -> LaunchResult:
    """Start a program without waiting for it to exit.

    The child inherits no pipes, so it keeps running after modsync exits.

    Args:
        executable: Program to start.
        cwd: Working directory. Defaults to the program's own directory.

    Returns:
        LaunchResult with the process id, or the error on failure.
    """
    try:
        process = subprocess.Popen(  # nosec: B603
            [str(executable)],
            cwd=str(cwd or executable.parent),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        return LaunchResult(pid=None, error=str(e))
    return LaunchResult(pid=process.pid)
