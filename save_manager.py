"""Persisted storage for generated ball sort puzzles.

Keeps the last generated puzzle set on disk so later runs can skip
generation. Acts as a small JSON key-value store where each key is one
file.
"""

import json
import logging
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

STORAGE_KEY = "ballsort-puzzles-v1"


class PuzzleStorage:
    """Saves and loads the generated puzzle set.

    Data is stored as ``<storage_dir>/<key>.json``. There is one slot per
    key; the version lives in the key so a format change starts from an
    empty store.
    """

    STORAGE_VERSION = 1
    STORAGE_DIR = "storage"

    def __init__(self, base_path: Path | None = None, key: str = STORAGE_KEY) -> None:
        """Initialize storage.

        Args:
            base_path: Base directory for storage. Defaults to script directory.
            key: Storage key, used as the file name.
        """
        if base_path is None:
            base_path = Path(__file__).parent
        self.storage_dir = Path(base_path) / self.STORAGE_DIR
        self.key = key

    def _get_storage_path(self) -> Path:
        return self.storage_dir / f"{self.key}.json"

    def save(self, empty_tube_count: int, puzzles: Mapping[str, dict]) -> bool:
        """Write the puzzle set.

        Args:
            empty_tube_count: Count the set was generated for.
            puzzles: Nested puzzle records keyed by difficulty string.

        Returns:
            True if save succeeded, False otherwise.
        """
        stored = {
            "version": self.STORAGE_VERSION,
            "emptyTubeCount": empty_tube_count,
            "puzzles": dict(puzzles),
        }

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            with open(self._get_storage_path(), "w", encoding="utf-8") as f:
                json.dump(stored, f, indent=2)
            return True
        except (OSError, TypeError) as e:
            logger.warning("Failed to save puzzles: %s", e)
            return False

    def load(self) -> dict | None:
        """Read the puzzle set.

        Returns:
            The stored document, or None if missing, unreadable, from another
            version, or lacking ``puzzles`` / a numeric ``emptyTubeCount``.
        """
        path = self._get_storage_path()
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load stored puzzles: %s", e)
            return None

        if not isinstance(stored, dict):
            return None

        version = stored.get("version", 0)
        if version != self.STORAGE_VERSION:
            logger.info("Stored puzzle version mismatch: %s != %s", version, self.STORAGE_VERSION)
            return None

        if not isinstance(stored.get("puzzles"), dict) or not isinstance(
            stored.get("emptyTubeCount"), int
        ):
            return None

        return stored

    def has_saved(self) -> bool:
        return self._get_storage_path().exists()

    def clear(self) -> bool:
        """Delete the stored set.

        Returns:
            True if deletion succeeded or nothing was stored.
        """
        path = self._get_storage_path()
        if path.exists():
            try:
                path.unlink()
                return True
            except OSError as e:
                logger.warning("Failed to delete stored puzzles: %s", e)
                return False
        return True
