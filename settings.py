"""Output configuration for ball sort puzzle generation.

The game reads ``output-config.json`` either from disk or from an embedded
mapping of ``{filename: "application/octet-stream---<base64 JSON>"}``
bundled into the page. Missing or broken configuration falls back to
defaults.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from palettes import BallColor, build_liquid_colors
from puzzle_adapter import DEFAULT_EMPTY_TUBES, clamp_empty_tubes

logger = logging.getLogger(__name__)

OUTPUT_CONFIG_FILENAME = "output-config.json"
EMBEDDED_MIME_PREFIX = "application/octet-stream"
EMBEDDED_SEPARATOR = "---"

DEFAULT_DIFFICULTY = 10


def parse_encoded_config(encoded: Any, filename: str) -> Any | None:
    """Decode one file from an embedded config mapping.

    Args:
        encoded: Mapping of filename -> "application/octet-stream---<base64>".
        filename: Entry to decode, e.g. "output-config.json".

    Returns:
        The decoded JSON value, or None if the entry is missing or malformed.
    """
    if not isinstance(encoded, Mapping) or not encoded.get(filename):
        return None

    data = encoded[filename]
    if not isinstance(data, str) or EMBEDDED_SEPARATOR not in data:
        return None

    prefix, _, content = data.partition(EMBEDDED_SEPARATOR)
    if prefix != EMBEDDED_MIME_PREFIX or not content:
        return None

    try:
        return json.loads(base64.b64decode(content, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Failed to decode embedded %s: %s", filename, e)
        return None


def encode_config(value: Any) -> str:
    """Encode a JSON value in the embedded-config string format."""
    payload = base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")
    return f"{EMBEDDED_MIME_PREFIX}{EMBEDDED_SEPARATOR}{payload}"


def get_nested_value(obj: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted path like "game.difficulty" inside nested mappings."""
    current = obj
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return default
        current = current.get(key)
    return default if current is None else current


@dataclass
class OutputConfig:
    """Settings the surrounding game supplies to puzzle generation."""

    difficulty: int = DEFAULT_DIFFICULTY
    empty_tube_count: int = DEFAULT_EMPTY_TUBES
    liquid_colors: dict[BallColor, int] = field(default_factory=lambda: build_liquid_colors(None))
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def effective_empty_tube_count(self) -> int:
        """Empty tubes after clamping to 1-6."""
        return clamp_empty_tubes(self.empty_tube_count)

    def get(self, path: str, default: Any = None) -> Any:
        """Look up any raw config value by dotted path."""
        return get_nested_value(self.raw, path, default)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OutputConfig":
        """Build settings from a parsed config, keeping defaults for bad values."""
        if not isinstance(data, Mapping):
            return cls()

        difficulty = data.get("difficulty", DEFAULT_DIFFICULTY)
        empty_tube_count = data.get("emptyTubeCount", DEFAULT_EMPTY_TUBES)
        if not isinstance(difficulty, int) or isinstance(difficulty, bool):
            logger.warning("Ignoring non-integer difficulty: %r", difficulty)
            difficulty = DEFAULT_DIFFICULTY
        if not isinstance(empty_tube_count, int) or isinstance(empty_tube_count, bool):
            logger.warning("Ignoring non-integer emptyTubeCount: %r", empty_tube_count)
            empty_tube_count = DEFAULT_EMPTY_TUBES

        return cls(
            difficulty=difficulty,
            empty_tube_count=empty_tube_count,
            liquid_colors=build_liquid_colors(data),
            raw=dict(data),
        )


def load_output_config(
    path: Path | None = None,
    embedded: Mapping[str, str] | None = None,
) -> OutputConfig:
    """Load output settings, preferring the embedded copy.

    Args:
        path: Optional output-config.json on disk.
        embedded: Optional embedded config mapping.

    Returns:
        OutputConfig; defaults if nothing usable is found.
    """
    if embedded is not None:
        parsed = parse_encoded_config(embedded, OUTPUT_CONFIG_FILENAME)
        if isinstance(parsed, Mapping):
            return OutputConfig.from_dict(parsed)
        logger.warning("Embedded config has no usable %s", OUTPUT_CONFIG_FILENAME)

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return OutputConfig.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load %s: %s", path, e)

    return OutputConfig()
