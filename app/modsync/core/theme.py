"""Colours for the modsync console.

Every reconcile status has its own Rich style (``status.up_to_date``,
``status.needs_update``, ``status.not_installed``, ``status.orphaned``)
next to the usual message styles. Any colour can be overridden by name in
``theme.toml`` inside the modsync config directory::

    [colors]
    needs_update = "#0e8ac8"
    orphaned = "#ff5f5f"
"""

import logging
import re
import tomllib
from functools import cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from modsync.core.paths import get_config_dir
from modsync.core.reconcile import ReconcileStatus

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.toml"

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Palette for the reconcile table, results and progress display.

    The four status fields are named after the ReconcileStatus members
    they colour.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: str = "#69B9A1"
    border: str = "#29526d"
    muted: str = "#b2bec3"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    up_to_date: str = "#03b971"
    needs_update: str = "#0e8ac8"
    not_installed: str = "#c1ff62"
    orphaned: str = "#f53263"

    @field_validator("*")
    @classmethod
    def _require_hex(cls, value: str) -> str:
        value = value.strip()
        if not _HEX_COLOR.fullmatch(value):
            raise ValueError(f"expected #RGB or #RRGGBB, got {value!r}")
        return value

    def for_status(self, status: ReconcileStatus) -> str:
        """Colour of a reconcile status."""
        return getattr(self, status.name.lower())


def status_style(status: ReconcileStatus) -> str:
    """Name of the Rich style used for a reconcile status."""
    return f"status.{status.name.lower()}"


def get_user_theme_path() -> Path:
    """Path of the optional user theme file."""
    return get_config_dir() / THEME_FILENAME


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load the palette, applying the user's overrides when present.

    A missing file gives the defaults. An unreadable file or an invalid
    colour is logged and also gives the defaults.

    Args:
        path: Theme file to read. Defaults to the user theme path.
    """
    path = path or get_user_theme_path()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return ThemeColors()
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return ThemeColors()

    try:
        return ThemeColors.model_validate(data.get("colors", {}))
    except ValidationError as e:
        logger.warning("Ignoring invalid colours in %s: %s", path, e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme from a palette (loaded if not given)."""
    colors = colors or load_theme()
    styles = {
        "header": colors.header,
        "bold_header": f"bold {colors.header}",
        "border": colors.border,
        "muted": colors.muted,
        "success": colors.success,
        "warning": colors.warning,
        "error": f"bold {colors.error}",
        "info": colors.info,
    }
    for status in ReconcileStatus:
        styles[status_style(status)] = colors.for_status(status)
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """The Rich theme for this process, built on first use."""
    return get_rich_theme()
