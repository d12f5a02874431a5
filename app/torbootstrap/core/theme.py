"""Console colours for stage output.

The bundled ``data/theme.toml`` defines every colour; a host can override
any of them in /etc/torbootstrap/theme.toml. An override that does not
validate is ignored as a whole.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from torbootstrap.core.paths import THEME_OVERRIDE_PATH

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]


class StageColors(BaseModel):
    """Colours used by step headers, messages and the results table."""

    model_config = ConfigDict(extra="forbid")

    step: HexColor = "#03b971"
    changed: HexColor = "#0e8ac8"
    unchanged: HexColor = "#b2bec3"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"


def _read_colors(path: Path) -> dict[str, Any]:
    """Return the ``[colors]`` table of a theme file, or {} if it is unusable."""
    try:
        with open(path, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return colors


def load_theme(override: Path = THEME_OVERRIDE_PATH) -> StageColors:
    """Load the bundled colours with the host overrides on top.

    Args:
        override: Theme file whose colours replace the bundled ones.

    Returns:
        Validated colours. Falls back to the bundled colours if the
        override is invalid.
    """
    bundled = _read_colors(Path(str(resources.files("torbootstrap.data").joinpath("theme.toml"))))
    overrides = _read_colors(override)

    try:
        return StageColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid colours in %s, using the defaults: %s", override, e)
        return StageColors(**bundled)


def build_theme(colors: StageColors) -> Theme:
    """Map colours to the style names used in console markup."""
    return Theme(
        {
            "step": f"bold {colors.step}",
            "changed": colors.changed,
            "unchanged": colors.unchanged,
            "muted": colors.muted,
            "bold_header": f"bold {colors.header}",
            "border": colors.border,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
        }
    )


@cache
def get_theme() -> Theme:
    """Rich theme shared by the console instances, loaded once."""
    return build_theme(load_theme())
