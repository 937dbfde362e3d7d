"""Puzzle loader for pregenerated ball sort boards.

Loads ``puzzles-config.json`` (bundled on disk or embedded in the page)
and converts its entries into cache records.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from puzzle_adapter import PuzzleAdapterResult
from settings import parse_encoded_config

logger = logging.getLogger(__name__)

PUZZLES_CONFIG_FILENAME = "puzzles-config.json"
PUZZLES_CONFIG_VERSION = 1


@dataclass(frozen=True)
class CachedPuzzleData:
    """One cached board for a (difficulty, empty_tube_count) pair."""

    puzzle: PuzzleAdapterResult
    difficulty: int
    empty_tube_count: int

    def to_dict(self) -> dict:
        """Nested form, as persisted in local storage."""
        return {
            "puzzle": self.puzzle.to_dict(),
            "difficulty": self.difficulty,
            "emptyTubeCount": self.empty_tube_count,
        }

    def to_flat_dict(self) -> dict:
        """Flat form, as written to puzzles-config.json."""
        return {
            **self.puzzle.to_dict(),
            "difficulty": self.difficulty,
            "emptyTubeCount": self.empty_tube_count,
        }


def to_cached_puzzle_data(
    item: Any, difficulty: int, empty_tube_count: int
) -> CachedPuzzleData | None:
    """Convert a stored entry (nested or flat) into a cache record.

    Nested entries look like ``{"puzzle": {"tubes": ...}, ...}``; flat
    entries carry ``tubes`` and optional ``seedUsed``, ``perColorTubes``,
    ``usedColors``, ``difficulty`` and ``emptyTubeCount`` at the top level.

    Args:
        item: Parsed JSON entry.
        difficulty: Difficulty to assume when the entry omits it.
        empty_tube_count: Empty-tube count to assume when the entry omits it.

    Returns:
        CachedPuzzleData, or None if the entry is not a usable board.
    """
    if not isinstance(item, Mapping):
        return None

    nested = item.get("puzzle")
    if isinstance(nested, Mapping) and nested.get("tubes"):
        puzzle_data = nested
    elif item.get("tubes"):
        puzzle_data = item
    else:
        return None

    try:
        return CachedPuzzleData(
            puzzle=PuzzleAdapterResult.from_dict(dict(puzzle_data)),
            difficulty=int(item.get("difficulty", difficulty)),
            empty_tube_count=int(item.get("emptyTubeCount", empty_tube_count)),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Skipping malformed puzzle for difficulty %d: %s", difficulty, e)
        return None


def _matches(parsed: Any, empty_tube_count: int) -> bool:
    return (
        isinstance(parsed, Mapping)
        and isinstance(parsed.get("puzzles"), Mapping)
        and isinstance(parsed.get("emptyTubeCount"), int)
        and parsed["emptyTubeCount"] == empty_tube_count
    )


def load_puzzles_config(
    empty_tube_count: int,
    path: Path | None = None,
    embedded: Mapping[str, str] | None = None,
) -> dict | None:
    """Load the pregenerated puzzle file for an empty-tube count.

    The embedded copy wins when present; the file on disk is only read
    when nothing is embedded.

    Args:
        empty_tube_count: Count the file must have been generated for.
        path: Optional puzzles-config.json on disk.
        embedded: Optional embedded config mapping.

    Returns:
        The parsed document, or None if missing, broken, or generated for a
        different empty-tube count.
    """
    if embedded is not None:
        parsed = parse_encoded_config(embedded, PUZZLES_CONFIG_FILENAME)
        return parsed if _matches(parsed, empty_tube_count) else None

    if path is None:
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            parsed = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("No usable %s at %s: %s", PUZZLES_CONFIG_FILENAME, path, e)
        return None

    return parsed if _matches(parsed, empty_tube_count) else None


def build_puzzles_config(
    puzzles: Mapping[int, CachedPuzzleData], empty_tube_count: int
) -> dict:
    """Build the puzzles-config.json document.

    Args:
        puzzles: Records keyed by difficulty.
        empty_tube_count: Count the records were generated for.

    Returns:
        ``{"version", "emptyTubeCount", "puzzles": {"<difficulty>": flat}}``.
    """
    return {
        "version": PUZZLES_CONFIG_VERSION,
        "emptyTubeCount": empty_tube_count,
        "puzzles": {
            str(difficulty): data.to_flat_dict()
            for difficulty, data in sorted(puzzles.items())
        },
    }


def write_puzzles_config(
    path: Path, puzzles: Mapping[int, CachedPuzzleData], empty_tube_count: int
) -> None:
    """Write puzzles-config.json, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_puzzles_config(puzzles, empty_tube_count), f, indent=2)
