"""Cache of pregenerated ball sort puzzles.

Boards for the level-select tiers are prepared once at startup. Sources are
tried in order: the bundled puzzles-config.json, the persisted store, and
finally live generation (whose results are persisted for next time).
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Mapping

from puzzle_adapter import PuzzleAdapterResult, generate_puzzle_with_adapter
from puzzle_loader import CachedPuzzleData, load_puzzles_config, to_cached_puzzle_data
from save_manager import PuzzleStorage
from settings import OutputConfig

logger = logging.getLogger(__name__)

PREGENERATED_DIFFICULTIES = (1, 5, 9)

SOURCE_CONFIG = "config"
SOURCE_STORAGE = "storage"
SOURCE_GENERATED = "generated"


def _default_generate(difficulty: int, empty_tube_count: int) -> PuzzleAdapterResult:
    return generate_puzzle_with_adapter(difficulty=difficulty, empty_tube_count=empty_tube_count)


class PuzzleCache:
    """Holds one board per (difficulty, empty_tube_count).

    Entries are never modified once stored. A change of the configured
    empty-tube count drops every entry and reruns the fallback chain.
    """

    def __init__(
        self,
        config_loader: Callable[[], OutputConfig] = OutputConfig,
        puzzles_config_path: Path | None = None,
        embedded: Mapping[str, str] | None = None,
        storage: PuzzleStorage | None = None,
        generate: Callable[[int, int], PuzzleAdapterResult] = _default_generate,
        difficulties: tuple[int, ...] = PREGENERATED_DIFFICULTIES,
    ) -> None:
        """Initialize an empty cache.

        Args:
            config_loader: Returns the current output configuration.
            puzzles_config_path: Bundled puzzles-config.json, if any.
            embedded: Embedded config mapping, if any.
            storage: Persisted store; None disables persistence.
            generate: Live generator taking (difficulty, empty_tube_count).
            difficulties: Tiers to prepare.
        """
        self.config_loader = config_loader
        self.puzzles_config_path = puzzles_config_path
        self.embedded = embedded
        self.storage = storage
        self.generate = generate
        self.difficulties = difficulties

        self.source: str | None = None
        self.empty_tube_count: int | None = None
        self._entries: dict[tuple[int, int], CachedPuzzleData] = {}
        self._task: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def get_cached_puzzle(self, difficulty: int, empty_tube_count: int) -> CachedPuzzleData | None:
        """Return the cached board, or None if it was never prepared."""
        return self._entries.get((difficulty, empty_tube_count))

    def _store(self, data: CachedPuzzleData, difficulty: int, empty_tube_count: int) -> None:
        self._entries.setdefault((difficulty, empty_tube_count), data)

    def invalidate(self) -> None:
        """Forget every entry and any finished or pending pregeneration."""
        self._entries.clear()
        self._task = None
        self.source = None
        self.empty_tube_count = None

    def wait_for_pregenerate(self) -> "asyncio.Future[None]":
        """Return the single in-flight pregeneration, starting it if needed.

        Must be called with a running event loop. Every caller receives the
        same task until invalidate() is called.
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self.pregenerate_puzzles())
        return self._task

    async def pregenerate_puzzles(self) -> None:
        """Fill the cache for every tier.

        Never raises; failures are logged and the chain moves on.
        """
        try:
            await self._pregenerate()
        except Exception:
            logger.exception("Puzzle pregeneration failed")

    async def _pregenerate(self) -> None:
        config = await asyncio.to_thread(self.config_loader)
        empty_tube_count = config.effective_empty_tube_count

        if self.empty_tube_count is not None and self.empty_tube_count != empty_tube_count:
            logger.info(
                "Empty tube count changed %d -> %d; dropping cached puzzles",
                self.empty_tube_count,
                empty_tube_count,
            )
            self._entries.clear()
        self.empty_tube_count = empty_tube_count

        # 1. Bundled or embedded puzzles-config.json
        from_config = await asyncio.to_thread(
            load_puzzles_config, empty_tube_count, self.puzzles_config_path, self.embedded
        )
        if from_config is not None:
            for difficulty in self.difficulties:
                data = to_cached_puzzle_data(
                    from_config["puzzles"].get(str(difficulty)), difficulty, empty_tube_count
                )
                if data is not None:
                    self._store(data, difficulty, empty_tube_count)
            self.source = SOURCE_CONFIG
            logger.debug("Loaded %d puzzles from bundled config", len(self))
            return

        # 2. Persisted storage
        stored = await asyncio.to_thread(self.storage.load) if self.storage else None
        if stored is not None and stored["emptyTubeCount"] == empty_tube_count:
            for difficulty in self.difficulties:
                item = stored["puzzles"].get(str(difficulty))
                # storage only ever holds the nested form
                if not isinstance(item, Mapping) or "puzzle" not in item:
                    continue
                data = to_cached_puzzle_data(item, difficulty, empty_tube_count)
                if data is not None:
                    self._store(data, difficulty, empty_tube_count)
            self.source = SOURCE_STORAGE
            logger.debug("Loaded %d puzzles from storage", len(self))
            return

        # 3. Live generation
        generated: dict[str, dict] = {}
        for difficulty in self.difficulties:
            try:
                puzzle = self.generate(difficulty, empty_tube_count)
            except Exception:
                logger.warning("Failed to generate difficulty %d", difficulty, exc_info=True)
                continue
            data = CachedPuzzleData(
                puzzle=puzzle, difficulty=difficulty, empty_tube_count=empty_tube_count
            )
            self._store(data, difficulty, empty_tube_count)
            generated[str(difficulty)] = data.to_dict()
        self.source = SOURCE_GENERATED
        logger.debug("Generated %d puzzles", len(generated))

        if self.storage is not None:
            await asyncio.to_thread(self.storage.save, empty_tube_count, generated)
