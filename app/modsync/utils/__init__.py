"""Utility modules for modsync.

This module exports commonly used utility functions.
"""

from modsync.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_json,
    print_success,
    print_warning,
)
from modsync.utils.shell import LaunchResult, spawn_detached

__all__ = [
    "LaunchResult",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_json",
    "print_success",
    "print_warning",
    "spawn_detached",
]
