"""Loose configuration file handling.

This module exports the config file model, the exclusion list and the
local config scanner. The synchronisation logic lives in
``modsync.sync.configs``.
"""

from modsync.configs.excluded import DEFAULT_EXCLUDED_CONFIGS, is_excluded_config
from modsync.configs.models import ConfigFileRecord
from modsync.configs.scanner import ConfigScanner

__all__ = [
    "DEFAULT_EXCLUDED_CONFIGS",
    "ConfigFileRecord",
    "ConfigScanner",
    "is_excluded_config",
]
