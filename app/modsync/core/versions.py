"""Version comparison rules.

Two different rules are in force and are deliberately kept apart:

- Package versions are opaque strings. A package needs an update whenever
  its local and remote strings differ, even if they look numeric.
- The platform (engine) version is a dotted numeric version such as
  ``3.9.8.0``. An update is offered only when the server's version is
  strictly greater than the local one.
"""

import logging

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)


def package_versions_match(local: str, remote: str) -> bool:
    """Check whether two package versions are identical.

    Comparison is exact and case-sensitive; no normalisation is applied.

    Args:
        local: Version read from the installed artifact.
        remote: Version advertised by the manifest.

    Returns:
        True if the strings are equal.
    """
    return local == remote


def parse_platform_version(text: str | None) -> Version | None:
    """Parse a dotted numeric platform version.

    Surrounding whitespace and JSON string quotes are tolerated.

    Args:
        text: Raw version text, e.g. ``"3.9.8"``.

    Returns:
        Parsed Version, or None when the text is empty or not numeric.
    """
    if text is None:
        return None
    cleaned = text.strip().strip('"').strip()
    if not cleaned:
        return None
    try:
        version = Version(cleaned)
    except InvalidVersion:
        logger.debug("Unparsable platform version: %r", text)
        return None
    if version.is_prerelease or version.is_postrelease or version.local:
        logger.debug("Platform version is not purely numeric: %r", text)
        return None
    return version


def is_platform_update_available(local: str | None, remote: str | None) -> bool:
    """Check whether the server offers a newer platform version.

    Args:
        local: Version of the installed core binary.
        remote: Version reported by the server.

    Returns:
        True only if both versions parse and remote is strictly greater.
    """
    local_version = parse_platform_version(local)
    remote_version = parse_platform_version(remote)
    if local_version is None or remote_version is None:
        return False
    return remote_version > local_version
