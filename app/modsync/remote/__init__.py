"""Server communication for modsync.

This module exports the HTTP client and its response models.
"""

from modsync.remote.client import RemoteError, ServerClient
from modsync.remote.models import AdminStatus

__all__ = ["AdminStatus", "RemoteError", "ServerClient"]
