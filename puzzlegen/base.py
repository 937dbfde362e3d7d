"""Base generator class for ball sort puzzle generation."""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field

import numpy as np

from .distribution import auto_distribute_tubes, validate_distribution
from .errors import ConfigurationError
from .rng import SeededRandom, make_seed

Tube = list[int]  # bottom to top; the last element is the top ball

EMPTY_SLOT = -1


@dataclass
class GeneratorParams:
    """Common parameters for all generators."""

    color_count: int = 5
    tube_count: int = 12  # filled tubes
    tube_size: int = 8
    per_color_tubes: list[int] | None = None
    shuffle_steps: int = 200
    seed: int | str | None = None
    allow_zero_tubes_for_color: bool = False
    empty_tube_count: int = 0


@dataclass
class GeneratedPuzzle:
    """Output from a puzzle generator."""

    tubes: list[Tube]  # filled tubes first, then empty tubes
    per_color_tubes: list[int]
    seed_used: int
    tube_size: int
    generator_name: str
    attempts: int = 1
    params: dict = field(default_factory=dict)  # for reproducibility

    @property
    def filled_tubes(self) -> list[Tube]:
        return [tube for tube in self.tubes if tube]

    @property
    def empty_tubes(self) -> list[Tube]:
        return [tube for tube in self.tubes if not tube]

    @property
    def ball_count(self) -> int:
        return sum(len(tube) for tube in self.tubes)

    def to_array(self) -> np.ndarray:
        """Return the board as a (tubes x tube_size) int8 grid.

        Row i is tube i bottom-to-top; unused slots hold EMPTY_SLOT.
        """
        grid = np.full((len(self.tubes), self.tube_size), EMPTY_SLOT, dtype=np.int8)
        for i, tube in enumerate(self.tubes):
            grid[i, : len(tube)] = tube
        return grid

    def color_counts(self) -> np.ndarray:
        """Return how many balls of each color index are on the board."""
        balls = np.array([ball for tube in self.tubes for ball in tube], dtype=np.int64)
        return np.bincount(balls, minlength=len(self.per_color_tubes))

    def to_dict(self) -> dict:
        return {
            "tubes": [list(tube) for tube in self.tubes],
            "perColorTubes": list(self.per_color_tubes),
            "seedUsed": self.seed_used,
        }


class BaseGenerator(ABC):
    """Abstract base class for puzzle generators.

    Subclasses get a validated configuration, the numeric seed actually
    used, a seeded random stream, and the per-color tube distribution.
    """

    name: str = "base"

    def __init__(self, params: GeneratorParams) -> None:
        """Initialize generator with parameters.

        Args:
            params: Common generation parameters.

        Raises:
            ConfigurationError: If the configuration cannot produce a board.
        """
        if params.tube_size <= 0 or params.tube_count <= 0 or params.color_count <= 0:
            raise ConfigurationError(
                "Invalid config: tube_size/tube_count/color_count must be > 0"
            )
        if params.empty_tube_count < 0:
            raise ConfigurationError(
                f"empty_tube_count must be >= 0, got {params.empty_tube_count}"
            )

        self.params = params
        self.seed_used = make_seed(params.seed)
        self.rng = SeededRandom(self.seed_used)
        self.distribution = self._plan_distribution()

    @abstractmethod
    def generate(self) -> GeneratedPuzzle:
        """Generate a puzzle.

        Returns:
            GeneratedPuzzle with tubes and metadata.
        """
        pass

    def _plan_distribution(self) -> list[int]:
        """Use the explicit distribution if given, else draw one from the rng."""
        p = self.params
        if p.per_color_tubes is not None:
            return validate_distribution(
                p.per_color_tubes,
                p.color_count,
                p.tube_count,
                p.allow_zero_tubes_for_color,
            )
        return auto_distribute_tubes(
            p.color_count, p.tube_count, self.rng, p.allow_zero_tubes_for_color
        )

    def _build_solved_tubes(self) -> list[Tube]:
        """Build the sorted board: each color fills its whole tubes.

        Returns:
            tube_count full single-color tubes, colors in index order.
        """
        size = self.params.tube_size
        tubes = [
            [color] * size
            for color, count in enumerate(self.distribution)
            for _ in range(count)
        ]
        if len(tubes) != self.params.tube_count:
            raise RuntimeError(
                f"Internal mismatch: built {len(tubes)} tubes, "
                f"expected {self.params.tube_count}"
            )
        return tubes

    def _min_colors_per_tube(self) -> int:
        return min(3, self.params.color_count)

    def _record_params(self) -> dict:
        """Generator parameters with the resolved seed, for reproducibility."""
        record = asdict(self.params)
        record["seed"] = self.seed_used
        return record
