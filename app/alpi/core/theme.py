"""Console colors for alpi.

The bundled ``data/theme.toml`` provides every color; a ``[colors]`` table
in ``~/.config/alpi/theme.toml`` may override any subset of them. A broken
override never stops the CLI, it only falls back to the bundled palette.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from alpi.core.paths import get_config_dir

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Palette used by the Rich console.

    Every value is a ``#RGB`` or ``#RRGGBB`` hex code.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    step: str = "#d44ebc"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # symlink and uninstall outcomes
    linked: str = "#c1ff62"
    removed: str = "#f53263"
    changed: str = "#0e8ac8"
    backup: str = "#faf870"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, value: object) -> str:
        """Require a #RGB or #RRGGBB string."""
        if not isinstance(value, str):
            msg = "color must be a string"
            raise ValueError(msg)
        color = value.strip()
        if not _HEX_COLOR.fullmatch(color):
            msg = f"'{color}' is not a #RGB or #RRGGBB color"
            raise ValueError(msg)
        return color


def get_user_theme_path() -> Path:
    """Path of the user's theme override file."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped with the package."""
    return Path(str(resources.files("alpi.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are dropped.

    Returns:
        Color name to value, or None if the file is missing or unreadable.
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {name: value for name, value in table.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge the user overrides over the bundled palette.

    Returns:
        The merged colors, or the built-in defaults if the merge is invalid.
    """
    colors = read_colors(get_bundled_theme_path())
    if colors is None:
        logger.error("Bundled theme is missing, the installation may be broken")
        colors = {}

    overrides = read_colors(get_user_theme_path())
    if overrides:
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Invalid theme, using default colors: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for ``colors`` (loaded from disk if omitted)."""
    if colors is None:
        colors = load_theme()

    styles = colors.model_dump()
    for bold in ("step", "error"):
        styles[bold] = f"bold {styles[bold]}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Rich theme shared by every console, built on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Rebuild the shared theme from the theme files."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
