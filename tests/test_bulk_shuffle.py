from collections import Counter

import numpy as np
import pytest

from puzzlegen import (
    EMPTY_SLOT,
    BulkShuffleGenerator,
    ConfigurationError,
    GeneratorParams,
    create_puzzle,
    get_generator,
    tube_diversity,
)


@pytest.fixture
def params():
    """Fixture for the game's default board: 12 filled tubes of 8, 2 empty."""
    return GeneratorParams(
        color_count=5,
        tube_count=12,
        tube_size=8,
        per_color_tubes=[3, 3, 2, 2, 2],
        seed="level-1",
        empty_tube_count=2,
    )


def test_small_board_layout():
    puzzle = create_puzzle(color_count=3, tube_count=6, tube_size=4, seed=42, empty_tube_count=2)

    assert len(puzzle.tubes) == 8
    assert all(len(tube) == 4 for tube in puzzle.tubes[:6])
    assert all(len(tube) == 0 for tube in puzzle.tubes[6:])

    counts = Counter(ball for tube in puzzle.tubes for ball in tube)
    assert set(counts) == {0, 1, 2}
    assert sum(counts.values()) == 24
    for color, count in counts.items():
        assert count == puzzle.per_color_tubes[color] * 4
    assert puzzle.seed_used == 42


def test_generation_is_deterministic(params):
    a = BulkShuffleGenerator(params).generate()
    b = BulkShuffleGenerator(params).generate()
    assert a.tubes == b.tubes
    assert a.seed_used == b.seed_used
    assert a.per_color_tubes == b.per_color_tubes


def test_different_seeds_give_different_boards():
    a = create_puzzle(color_count=5, tube_count=12, seed=1)
    b = create_puzzle(color_count=5, tube_count=12, seed=2)
    assert a.tubes != b.tubes


def test_random_seed_is_reported_and_reproducible():
    a = create_puzzle(color_count=4, tube_count=8)
    b = create_puzzle(color_count=4, tube_count=8, seed=a.seed_used)
    assert a.tubes == b.tubes


@pytest.mark.parametrize("seed", range(20))
def test_ball_and_color_invariants(seed):
    puzzle = create_puzzle(color_count=6, tube_count=11, tube_size=8, seed=seed, empty_tube_count=3)

    assert puzzle.ball_count == 11 * 8
    assert puzzle.ball_count == sum(puzzle.per_color_tubes) * 8
    assert all(0 <= len(tube) <= 8 for tube in puzzle.tubes)
    assert len(puzzle.empty_tubes) == 3

    counts = puzzle.color_counts()
    assert all(count % 8 == 0 for count in counts)
    assert list(counts // 8) == puzzle.per_color_tubes


def test_explicit_distribution_is_used():
    puzzle = create_puzzle(color_count=3, tube_count=6, tube_size=4, per_color_tubes=[1, 2, 3], seed=9)
    assert puzzle.per_color_tubes == [1, 2, 3]
    assert list(puzzle.color_counts()) == [4, 8, 12]


@pytest.mark.parametrize("seed", range(50))
def test_diversity_target_on_game_boards(seed, params):
    params.seed = seed
    puzzle = BulkShuffleGenerator(params).generate()
    assert min(tube_diversity(puzzle.filled_tubes)) >= 3
    assert puzzle.attempts <= 100


def test_diversity_with_fewer_than_three_colors():
    puzzle = create_puzzle(color_count=2, tube_count=4, tube_size=8, seed=3)
    assert min(tube_diversity(puzzle.filled_tubes)) >= 2


def test_single_color_accepts_first_deal():
    puzzle = create_puzzle(color_count=1, tube_count=2, tube_size=3, seed=3, empty_tube_count=1)
    assert puzzle.tubes == [[0, 0, 0], [0, 0, 0], []]
    assert puzzle.attempts == 1


def test_attempt_budget_keeps_last_deal():
    """One ball per tube can never hold three colors; the last deal is kept."""
    params = GeneratorParams(color_count=3, tube_count=3, tube_size=1, seed=4)
    puzzle = BulkShuffleGenerator(params, max_attempts=7).generate()
    assert puzzle.attempts == 7
    assert sorted(ball for tube in puzzle.tubes for ball in tube) == [0, 1, 2]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"color_count": 0, "tube_count": 4},
        {"color_count": 3, "tube_count": 0},
        {"color_count": 3, "tube_count": 4, "tube_size": 0},
        {"color_count": 3, "tube_count": 4, "empty_tube_count": -1},
        {"color_count": 5, "tube_count": 4},
        {"color_count": 3, "tube_count": 4, "per_color_tubes": [1, 1, 1]},
    ],
)
def test_invalid_configuration_raises(kwargs):
    with pytest.raises(ConfigurationError):
        create_puzzle(**kwargs)


def test_to_array_pads_empty_slots():
    puzzle = create_puzzle(color_count=2, tube_count=2, tube_size=4, seed=1, empty_tube_count=1)
    grid = puzzle.to_array()
    assert grid.shape == (3, 4)
    assert np.all(grid[2] == EMPTY_SLOT)
    assert np.all(grid[:2] >= 0)


def test_to_dict_and_params_record():
    puzzle = create_puzzle(color_count=3, tube_count=4, seed="abc")
    data = puzzle.to_dict()
    assert data["seedUsed"] == puzzle.seed_used
    assert data["tubes"] == puzzle.tubes
    assert puzzle.params["seed"] == puzzle.seed_used
    assert puzzle.generator_name == "bulk_shuffle"


def test_get_generator_by_name():
    generator = get_generator("bulk_shuffle", color_count=3, tube_count=3, seed=1)
    assert isinstance(generator, BulkShuffleGenerator)
    with pytest.raises(ValueError):
        get_generator("nope")
