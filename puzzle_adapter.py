"""Adapter from player-facing difficulty to generated ball sort boards.

Maps a difficulty (1-10) and an empty-tube count onto generator
parameters for the fixed 14-tube board, then translates numeric colors
into named BallColor values.
"""

import logging
import math
from dataclasses import dataclass, field

from palettes import BALL_COLORS, BallColor
from puzzlegen import GeneratorParams, SeededRandom, create_puzzle, even_distribution

logger = logging.getLogger(__name__)

TOTAL_TUBES = 14
TUBE_CAPACITY = 8
MIN_COLORS = 3
MAX_COLORS = 12
MIN_EMPTY_TUBES = 1
MAX_EMPTY_TUBES = 6
DEFAULT_EMPTY_TUBES = 2
BASE_SHUFFLE_STEPS = 200
SHUFFLE_STEPS_PER_DIFFICULTY = 20


def clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


def color_count_for_difficulty(difficulty: int) -> int:
    """Colors on the board: difficulty + 2, kept within 3-12."""
    return clamp(difficulty + 2, MIN_COLORS, MAX_COLORS)


def clamp_empty_tubes(empty_tube_count: int) -> int:
    return clamp(empty_tube_count, MIN_EMPTY_TUBES, MAX_EMPTY_TUBES)


@dataclass
class PuzzleAdapterResult:
    """A generated board in named colors."""

    tubes: list[list[BallColor]]
    seed_used: int
    per_color_tubes: list[int]
    used_colors: list[BallColor]

    def to_dict(self) -> dict:
        return {
            "tubes": [[color.value for color in tube] for tube in self.tubes],
            "seedUsed": self.seed_used,
            "perColorTubes": list(self.per_color_tubes),
            "usedColors": [color.value for color in self.used_colors],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PuzzleAdapterResult":
        """Build a result from its JSON form.

        Raises:
            KeyError: If ``tubes`` is missing.
            ValueError: If a color name is unknown.
        """
        return cls(
            tubes=[[BallColor(color) for color in tube] for tube in data["tubes"]],
            seed_used=int(data.get("seedUsed") or 0),
            per_color_tubes=list(data.get("perColorTubes") or []),
            used_colors=[BallColor(color) for color in data.get("usedColors") or []],
        )


@dataclass
class ValidationResult:
    """Outcome of validate_puzzle; errors are human-readable."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def select_colors(color_count: int, seed: int) -> list[BallColor]:
    """Pick the board's named colors deterministically from a numeric seed.

    Args:
        color_count: How many colors to pick.
        seed: The seed the board was generated with.

    Returns:
        The first color_count entries of the seeded shuffle of BALL_COLORS.
        Index i is the name of generator color i.
    """
    colors = list(BALL_COLORS)
    SeededRandom(seed).shuffle(colors)
    return colors[:color_count]


def generate_puzzle_with_adapter(
    difficulty: int,
    empty_tube_count: int = DEFAULT_EMPTY_TUBES,
    seed: int | str | None = None,
    shuffle_multiplier: float = 1.0,
) -> PuzzleAdapterResult:
    """Generate a board for the game's fixed 14-tube layout.

    Args:
        difficulty: 1-10; sets the color count (difficulty + 2, within 3-12).
        empty_tube_count: Empty tubes requested; clamped to 1-6.
        seed: Optional seed for a reproducible board.
        shuffle_multiplier: Scales shuffle_steps.

    Returns:
        PuzzleAdapterResult whose tubes list has TOTAL_TUBES entries.
    """
    color_count = color_count_for_difficulty(difficulty)
    actual_empty_tubes = clamp_empty_tubes(empty_tube_count)
    filled_tubes = TOTAL_TUBES - actual_empty_tubes

    # Every color needs at least one filled tube.
    actual_color_count = min(color_count, filled_tubes)
    per_color_tubes = even_distribution(actual_color_count, filled_tubes)

    shuffle_steps = math.floor(
        (BASE_SHUFFLE_STEPS + difficulty * SHUFFLE_STEPS_PER_DIFFICULTY) * shuffle_multiplier
    )

    params = GeneratorParams(
        color_count=actual_color_count,
        tube_count=filled_tubes,
        tube_size=TUBE_CAPACITY,
        per_color_tubes=per_color_tubes,
        shuffle_steps=shuffle_steps,
        seed=seed,
        allow_zero_tubes_for_color=False,
        empty_tube_count=actual_empty_tubes,
    )
    logger.debug(
        "Generator config: colors=%d total=%d filled=%d empty=%d size=%d "
        "per_color=%s shuffle_steps=%d seed=%s",
        actual_color_count,
        TOTAL_TUBES,
        filled_tubes,
        actual_empty_tubes,
        TUBE_CAPACITY,
        per_color_tubes,
        shuffle_steps,
        "random" if seed is None else seed,
    )

    result = create_puzzle(params)

    used_colors = select_colors(color_count, result.seed_used)
    tubes = [[used_colors[index] for index in tube] for tube in result.tubes]

    logger.debug(
        "Generated: %d tubes (%d filled, %d empty), colors=%s, seed_used=%d",
        len(tubes),
        sum(1 for tube in tubes if tube),
        sum(1 for tube in tubes if not tube),
        [color.value for color in used_colors],
        result.seed_used,
    )

    return PuzzleAdapterResult(
        tubes=tubes,
        seed_used=result.seed_used,
        per_color_tubes=result.per_color_tubes,
        used_colors=used_colors,
    )


def validate_puzzle(
    tubes: list[list[BallColor]],
    empty_tube_count: int | None = None,
    capacity: int = TUBE_CAPACITY,
    total_tubes: int = TOTAL_TUBES,
) -> ValidationResult:
    """Check a board against the layout invariants.

    Args:
        tubes: Board to check.
        empty_tube_count: Configured empty tubes; None uses the default of 2.
        capacity: Balls per full tube.
        total_tubes: Expected tube count.

    Returns:
        ValidationResult; never raises.
    """
    if empty_tube_count is None:
        empty_tube_count = DEFAULT_EMPTY_TUBES

    errors: list[str] = []

    if len(tubes) != total_tubes:
        errors.append(f"Tube count {len(tubes)} != {total_tubes}")

    color_counts: dict[BallColor, int] = {}
    empty = 0
    for index, tube in enumerate(tubes):
        if len(tube) == 0:
            empty += 1
        elif len(tube) == capacity:
            for ball in tube:
                color_counts[ball] = color_counts.get(ball, 0) + 1
        else:
            errors.append(f"Tube {index} holds {len(tube)} balls (expected 0 or {capacity})")

    if empty != empty_tube_count:
        errors.append(f"Empty tube count {empty} != {empty_tube_count}")

    for color, count in color_counts.items():
        if count % capacity != 0:
            name = color.value if isinstance(color, BallColor) else color
            errors.append(f"Color {name} appears {count} times (not a multiple of {capacity})")

    return ValidationResult(valid=not errors, errors=errors)


def generate_test_puzzle() -> list[list[BallColor]]:
    """Fixed debug board: difficulty 5, seed "test-puzzle"."""
    return generate_puzzle_with_adapter(
        difficulty=5, seed="test-puzzle", shuffle_multiplier=0.5
    ).tubes
