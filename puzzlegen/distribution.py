"""Decide how many whole tubes each color occupies in the solved board."""

from typing import Sequence

from .errors import ConfigurationError
from .rng import SeededRandom


def auto_distribute_tubes(
    color_count: int,
    tube_count: int,
    rng: SeededRandom,
    allow_zero: bool = False,
) -> list[int]:
    """Randomly split filled tubes across colors.

    Without ``allow_zero`` every color starts with one tube and the rest are
    handed out one at a time to uniformly chosen colors. With ``allow_zero``
    the total is cut sequentially and the result shuffled so empty colors
    are not always last.

    Args:
        color_count: Number of colors.
        tube_count: Number of filled tubes to distribute.
        rng: Seeded stream driving the choices.
        allow_zero: Whether a color may end up with no tube.

    Returns:
        Per-color tube counts summing to tube_count.

    Raises:
        ConfigurationError: If every color needs a tube but there are too few.
    """
    if not allow_zero and tube_count < color_count:
        raise ConfigurationError(
            f"tube_count ({tube_count}) < color_count ({color_count}) "
            "but allow_zero_tubes_for_color is False"
        )

    if not allow_zero:
        result = [1] * color_count
        for _ in range(tube_count - color_count):
            result[rng.randint(color_count)] += 1
    else:
        result = [0] * color_count
        remaining = tube_count
        for i in range(color_count - 1):
            take = rng.randint(remaining + 1)
            result[i] = take
            remaining -= take
        result[color_count - 1] = remaining
        rng.shuffle(result)

    return result


def validate_distribution(
    per_color_tubes: Sequence[int],
    color_count: int,
    tube_count: int,
    allow_zero: bool = False,
) -> list[int]:
    """Check a caller-supplied distribution and return a copy of it.

    Raises:
        ConfigurationError: On wrong length, wrong sum, negative entries, or
            zero entries when ``allow_zero`` is False.
    """
    if len(per_color_tubes) != color_count:
        raise ConfigurationError(
            f"per_color_tubes has {len(per_color_tubes)} entries, "
            f"expected color_count={color_count}"
        )

    total = sum(per_color_tubes)
    if total != tube_count:
        raise ConfigurationError(
            f"per_color_tubes sums to {total}, expected tube_count={tube_count}"
        )

    for count in per_color_tubes:
        if count < 0 or (count == 0 and not allow_zero):
            raise ConfigurationError(
                f"per_color_tubes contains {count} but allow_zero_tubes_for_color "
                f"is {allow_zero}"
            )

    return list(per_color_tubes)


def even_distribution(color_count: int, filled_tubes: int) -> list[int]:
    """Split filled tubes evenly; the first ``filled_tubes % color_count``
    colors receive one extra tube.
    """
    if color_count <= 0:
        raise ConfigurationError(f"color_count must be > 0, got {color_count}")

    per_color, extra = divmod(filled_tubes, color_count)
    return [per_color + 1 if i < extra else per_color for i in range(color_count)]
