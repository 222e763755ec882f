"""Configuration files excluded from config sync.

These files belong to the platform, the plugin loader, or the
compatibility layer rather than to any mod package, so the server's copy
is never pushed onto the client and the local copy is never counted.
"""

from collections.abc import Iterable

DEFAULT_EXCLUDED_CONFIGS: tuple[str, ...] = (
    # Plugin loader
    "BepInEx.cfg",
    # Platform core
    "com.spt.core.cfg",
    "com.spt.custom.cfg",
    "com.spt.debugging.cfg",
    "com.spt.singleplayer.cfg",
    # Compatibility layer
    "com.bepis.bepinex.configurationmanager.cfg",
)


def is_excluded_config(file_name: str, excluded: Iterable[str] = DEFAULT_EXCLUDED_CONFIGS) -> bool:
    """Check if a config file is excluded from sync.

    Args:
        file_name: Config file name, compared case-insensitively.
        excluded: Excluded file names.

    Returns:
        True if the file must be ignored.
    """
    key = file_name.casefold()
    return any(key == name.casefold() for name in excluded)
