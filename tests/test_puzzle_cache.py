import asyncio

import pytest

from puzzle_adapter import generate_puzzle_with_adapter, validate_puzzle
from puzzle_cache import (
    PREGENERATED_DIFFICULTIES,
    SOURCE_CONFIG,
    SOURCE_GENERATED,
    SOURCE_STORAGE,
    PuzzleCache,
)
from puzzle_loader import CachedPuzzleData, write_puzzles_config
from save_manager import PuzzleStorage
from settings import OutputConfig


class CountingGenerator:
    """Live generator that records its calls."""

    def __init__(self, fail_on: tuple[int, ...] = ()) -> None:
        self.calls: list[tuple[int, int]] = []
        self.fail_on = fail_on

    def __call__(self, difficulty: int, empty_tube_count: int):
        self.calls.append((difficulty, empty_tube_count))
        if difficulty in self.fail_on:
            raise RuntimeError("boom")
        return generate_puzzle_with_adapter(
            difficulty=difficulty, empty_tube_count=empty_tube_count, seed=f"cache-{difficulty}"
        )


def make_config_loader(empty_tube_count: int):
    return lambda: OutputConfig(empty_tube_count=empty_tube_count)


@pytest.fixture
def storage(tmp_path):
    return PuzzleStorage(tmp_path)


def test_generates_when_nothing_is_stored(storage):
    generate = CountingGenerator()
    cache = PuzzleCache(storage=storage, generate=generate)
    asyncio.run(cache.pregenerate_puzzles())

    assert cache.source == SOURCE_GENERATED
    assert generate.calls == [(d, 2) for d in PREGENERATED_DIFFICULTIES]
    for difficulty in PREGENERATED_DIFFICULTIES:
        entry = cache.get_cached_puzzle(difficulty, 2)
        assert entry is not None
        assert entry.difficulty == difficulty
        assert validate_puzzle(entry.puzzle.tubes, empty_tube_count=2).valid

    assert cache.get_cached_puzzle(2, 2) is None
    assert cache.get_cached_puzzle(1, 3) is None
    assert storage.load()["emptyTubeCount"] == 2


def test_default_generator_fills_cache(storage):
    cache = PuzzleCache(storage=storage)
    asyncio.run(cache.pregenerate_puzzles())
    entry = cache.get_cached_puzzle(1, 2)
    assert entry is not None
    assert validate_puzzle(entry.puzzle.tubes).valid


def test_second_run_loads_from_storage(storage):
    first = PuzzleCache(storage=storage, generate=CountingGenerator())
    asyncio.run(first.pregenerate_puzzles())

    generate = CountingGenerator()
    second = PuzzleCache(storage=storage, generate=generate)
    asyncio.run(second.pregenerate_puzzles())

    assert second.source == SOURCE_STORAGE
    assert generate.calls == []
    for difficulty in PREGENERATED_DIFFICULTIES:
        assert second.get_cached_puzzle(difficulty, 2) == first.get_cached_puzzle(difficulty, 2)


def test_storage_for_other_empty_count_is_ignored(storage):
    asyncio.run(PuzzleCache(storage=storage, generate=CountingGenerator()).pregenerate_puzzles())

    generate = CountingGenerator()
    cache = PuzzleCache(config_loader=make_config_loader(3), storage=storage, generate=generate)
    asyncio.run(cache.pregenerate_puzzles())

    assert cache.source == SOURCE_GENERATED
    assert len(generate.calls) == 3
    assert cache.get_cached_puzzle(5, 3) is not None
    assert storage.load()["emptyTubeCount"] == 3


def test_bundled_config_wins(tmp_path, storage):
    puzzles = {
        d: CachedPuzzleData(
            puzzle=generate_puzzle_with_adapter(difficulty=d, seed=f"bundled-{d}"),
            difficulty=d,
            empty_tube_count=2,
        )
        for d in PREGENERATED_DIFFICULTIES
    }
    path = tmp_path / "puzzles-config.json"
    write_puzzles_config(path, puzzles, 2)

    generate = CountingGenerator()
    cache = PuzzleCache(puzzles_config_path=path, storage=storage, generate=generate)
    asyncio.run(cache.pregenerate_puzzles())

    assert cache.source == SOURCE_CONFIG
    assert generate.calls == []
    assert not storage.has_saved()
    for d in PREGENERATED_DIFFICULTIES:
        assert cache.get_cached_puzzle(d, 2) == puzzles[d]


def test_bundled_config_for_other_count_falls_through(tmp_path, storage):
    puzzle = generate_puzzle_with_adapter(difficulty=1, empty_tube_count=4, seed=1)
    path = tmp_path / "puzzles-config.json"
    write_puzzles_config(path, {1: CachedPuzzleData(puzzle, 1, 4)}, 4)

    cache = PuzzleCache(puzzles_config_path=path, storage=storage, generate=CountingGenerator())
    asyncio.run(cache.pregenerate_puzzles())
    assert cache.source == SOURCE_GENERATED


def test_failed_tier_is_skipped(storage):
    cache = PuzzleCache(storage=storage, generate=CountingGenerator(fail_on=(5,)))
    asyncio.run(cache.pregenerate_puzzles())

    assert cache.get_cached_puzzle(1, 2) is not None
    assert cache.get_cached_puzzle(5, 2) is None
    assert cache.get_cached_puzzle(9, 2) is not None
    assert set(storage.load()["puzzles"]) == {"1", "9"}


def test_works_without_storage():
    cache = PuzzleCache(storage=None, generate=CountingGenerator())
    asyncio.run(cache.pregenerate_puzzles())
    assert len(cache) == 3


def test_config_loader_failure_is_swallowed():
    def broken_loader():
        raise RuntimeError("no config")

    cache = PuzzleCache(config_loader=broken_loader, storage=None)
    asyncio.run(cache.pregenerate_puzzles())
    assert len(cache) == 0


def test_concurrent_waiters_share_one_pregeneration(storage):
    generate = CountingGenerator()
    cache = PuzzleCache(storage=storage, generate=generate)

    async def scenario():
        first = cache.wait_for_pregenerate()
        second = cache.wait_for_pregenerate()
        assert first is second
        await asyncio.gather(first, second, cache.wait_for_pregenerate())
        assert cache.wait_for_pregenerate() is first

    asyncio.run(scenario())
    assert len(generate.calls) == 3


def test_empty_tube_change_replaces_whole_cache(storage):
    counts = {"value": 2}
    cache = PuzzleCache(
        config_loader=lambda: OutputConfig(empty_tube_count=counts["value"]),
        storage=storage,
        generate=CountingGenerator(),
    )

    async def scenario():
        await cache.wait_for_pregenerate()
        assert cache.get_cached_puzzle(1, 2) is not None

        counts["value"] = 3
        cache.invalidate()
        await cache.wait_for_pregenerate()

    asyncio.run(scenario())
    assert cache.empty_tube_count == 3
    assert cache.get_cached_puzzle(1, 2) is None
    assert cache.get_cached_puzzle(1, 3) is not None


def test_rerun_with_new_count_drops_old_entries(storage):
    counts = {"value": 2}
    cache = PuzzleCache(
        config_loader=lambda: OutputConfig(empty_tube_count=counts["value"]),
        storage=storage,
        generate=CountingGenerator(),
    )
    asyncio.run(cache.pregenerate_puzzles())
    counts["value"] = 5
    asyncio.run(cache.pregenerate_puzzles())

    assert cache.get_cached_puzzle(9, 2) is None
    assert cache.get_cached_puzzle(9, 5) is not None


def test_entries_are_not_replaced(storage):
    cache = PuzzleCache(storage=None, generate=CountingGenerator())
    asyncio.run(cache.pregenerate_puzzles())
    before = cache.get_cached_puzzle(1, 2)

    cache.generate = lambda d, e: generate_puzzle_with_adapter(difficulty=d, empty_tube_count=e, seed="other")
    asyncio.run(cache.pregenerate_puzzles())
    assert cache.get_cached_puzzle(1, 2) is before
