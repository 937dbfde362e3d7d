"""Named ball colors for ball sort puzzles.

The canonical order of BALL_COLORS matters: boards pick their colors by
shuffling this list with the board's seed, so reordering it changes every
seeded puzzle.
"""

import re
from collections import OrderedDict
from enum import Enum
from typing import Any, Mapping


class BallColor(str, Enum):
    """A ball/liquid color, serialized by its value."""

    BROWN = "brown"
    ORANGE = "orange"
    LIGHT_PURPLE = "light_purple"
    GRAY = "gray"
    PINK = "pink"
    PURPLE = "purple"
    RED = "red"
    GREEN = "green"
    FLUORESCENT_GREEN = "fluorescent_green"
    BLUE = "blue"
    CYAN = "cyan"
    YELLOW = "yellow"


BALL_COLORS: list[BallColor] = list(BallColor)

# Liquid tint for each color as 0xRRGGBB; output-config may override these.
DEFAULT_LIQUID_COLORS: OrderedDict[BallColor, int] = OrderedDict()

DEFAULT_LIQUID_COLORS[BallColor.BROWN] = 0x8B5A2B
DEFAULT_LIQUID_COLORS[BallColor.ORANGE] = 0xFFA500
DEFAULT_LIQUID_COLORS[BallColor.LIGHT_PURPLE] = 0xC8A2FF
DEFAULT_LIQUID_COLORS[BallColor.GRAY] = 0xB4B4B4
DEFAULT_LIQUID_COLORS[BallColor.PINK] = 0xFFB6C1
DEFAULT_LIQUID_COLORS[BallColor.PURPLE] = 0x9333EA
DEFAULT_LIQUID_COLORS[BallColor.RED] = 0xFF5050
DEFAULT_LIQUID_COLORS[BallColor.GREEN] = 0x32CD32
DEFAULT_LIQUID_COLORS[BallColor.FLUORESCENT_GREEN] = 0x00FF7F
DEFAULT_LIQUID_COLORS[BallColor.BLUE] = 0x6495ED
DEFAULT_LIQUID_COLORS[BallColor.CYAN] = 0x00FFFF
DEFAULT_LIQUID_COLORS[BallColor.YELLOW] = 0xFFFF00

_HEX_PREFIXED = re.compile(r"^0x[0-9a-fA-F]+$")
_HEX_HASHED = re.compile(r"^#[0-9a-fA-F]+$")


def parse_color_value(value: Any) -> int | None:
    """Parse a configured color into a 0xRRGGBB integer.

    Args:
        value: An int, or a string like "0x8B5A2B" or "#8B5A2B".

    Returns:
        The integer color, or None if value is not a recognized form.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if _HEX_PREFIXED.match(text):
        return int(text, 16)
    if _HEX_HASHED.match(text):
        return int(text[1:], 16)
    return None


def build_liquid_colors(config: Mapping[str, Any] | None) -> dict[BallColor, int]:
    """Merge a config's ``liquidColors`` section over the defaults.

    Unknown color names and unparsable values are ignored.
    """
    raw = config.get("liquidColors") if isinstance(config, Mapping) else None
    if not isinstance(raw, Mapping):
        raw = {}

    result = dict(DEFAULT_LIQUID_COLORS)
    for color in BALL_COLORS:
        parsed = parse_color_value(raw.get(color.value))
        if parsed is not None:
            result[color] = parsed
    return result


def to_rgb(value: int) -> tuple[int, int, int]:
    """Split a 0xRRGGBB integer into an (r, g, b) tuple."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def get_palette(
    colors: list[BallColor], liquid_colors: Mapping[BallColor, int] | None = None
) -> list[tuple[int, int, int]]:
    """Return the RGB tint for each of the given colors, in order.

    Args:
        colors: Colors in board index order (e.g. a puzzle's used_colors).
        liquid_colors: Optional overrides; defaults to DEFAULT_LIQUID_COLORS.

    Returns:
        List of RGB tuples of the same length as colors.
    """
    table = liquid_colors if liquid_colors is not None else DEFAULT_LIQUID_COLORS
    return [to_rgb(table[color]) for color in colors]
