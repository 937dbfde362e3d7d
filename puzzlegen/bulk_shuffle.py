"""Bulk-shuffle generator: the default way boards are built.

Starts from the sorted board, pours every ball into one pile, shuffles the
pile and deals it back into full tubes until each tube is mixed enough.

Assumption: any arrangement of the sorted board's balls across the same
full tubes, with empty tubes added, is treated as solvable. Balls per color
and total capacity are conserved; moves are not replayed to prove it.
"""

import logging

import numpy as np

from .base import BaseGenerator, GeneratedPuzzle, GeneratorParams

logger = logging.getLogger(__name__)

MAX_SHUFFLE_ATTEMPTS = 100


def tube_diversity(tubes: list[list[int]]) -> list[int]:
    """Number of distinct colors in each tube."""
    return [int(np.unique(tube).size) for tube in tubes]


class BulkShuffleGenerator(BaseGenerator):
    """Shuffle-and-deal generator with a per-tube color diversity target.

    Method:
    1. Build the sorted board from the color distribution
    2. Flatten every ball into one pile
    3. Fisher-Yates the pile and deal it into full tubes
    4. Retry until every tube holds min(3, color_count) colors, at most
       MAX_SHUFFLE_ATTEMPTS times; the last deal is kept regardless
    5. Append the empty tubes
    """

    name = "bulk_shuffle"

    def __init__(self, params: GeneratorParams, max_attempts: int = MAX_SHUFFLE_ATTEMPTS) -> None:
        super().__init__(params)
        self.max_attempts = max_attempts

    def generate(self) -> GeneratedPuzzle:
        """Generate a shuffled board.

        Returns:
            GeneratedPuzzle with tube_count full tubes and the empty tubes.
        """
        p = self.params
        solved = self._build_solved_tubes()
        balls = np.array([ball for tube in solved for ball in tube], dtype=np.int64)
        min_colors = self._min_colors_per_tube()

        tubes: list[list[int]] = []
        attempts = 0
        while attempts < self.max_attempts:
            attempts += 1
            self.rng.shuffle(balls)
            tubes = balls.reshape(p.tube_count, p.tube_size).tolist()
            if min(tube_diversity(tubes)) >= min_colors:
                break

        diversity = tube_diversity(tubes)
        if min(diversity) < min_colors:
            logger.debug(
                "Diversity target %d not met after %d attempts; keeping last deal",
                min_colors,
                attempts,
            )
        logger.debug(
            "Shuffle complete after %d attempts: %d filled tubes, %d empty tubes, "
            "diversity min=%d max=%d",
            attempts,
            p.tube_count,
            p.empty_tube_count,
            min(diversity),
            max(diversity),
        )

        tubes.extend([] for _ in range(p.empty_tube_count))

        return GeneratedPuzzle(
            tubes=tubes,
            per_color_tubes=list(self.distribution),
            seed_used=self.seed_used,
            tube_size=p.tube_size,
            generator_name=self.name,
            attempts=attempts,
            params=self._record_params(),
        )


def create_puzzle(params: GeneratorParams | None = None, **kwargs) -> GeneratedPuzzle:
    """Generate a board with the bulk-shuffle generator in one step.

    Args:
        params: Full parameter set; if omitted, built from kwargs.
        **kwargs: GeneratorParams fields, e.g. color_count=3, seed=42.

    Returns:
        The generated puzzle.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    if params is None:
        params = GeneratorParams(**kwargs)
    return BulkShuffleGenerator(params).generate()
