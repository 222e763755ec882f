"""Logging setup for the command line.

Console output goes through a Rich handler on stderr; every record at
INFO and above is also appended to a plain-text log file so that failures
shown to the user leave a persisted diagnostic line behind.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from modsync.utils.formatting import err_console

_FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure the root ``modsync`` logger.

    Safe to call more than once; handlers installed by a previous call are
    replaced.

    Args:
        verbose: Show DEBUG records on the console (WARNING otherwise).
        log_file: File that receives INFO and above. Skipped when None or
            when the file cannot be opened.
    """
    logger = logging.getLogger("modsync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = RichHandler(
        console=err_console,
        show_path=False,
        show_time=False,
        rich_tracebacks=verbose,
        markup=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file is None:
        return

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot open log file %s: %s", log_file, e)
        return

    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(file_handler)
