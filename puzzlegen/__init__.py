"""Puzzle generators for ball sort boards.

This module provides seeded generators that turn a color/tube layout into
a shuffled board that can still be sorted.

Available generators:
- BulkShuffleGenerator: shuffle-and-deal with a per-tube diversity target
- ReversePourGenerator: scrambles through legal reverse pours
"""

from .base import BaseGenerator, GeneratorParams, GeneratedPuzzle, EMPTY_SLOT
from .errors import ConfigurationError
from .rng import SeededRandom, make_seed, hash_seed, seeded_rng
from .distribution import auto_distribute_tubes, validate_distribution, even_distribution
from .bulk_shuffle import BulkShuffleGenerator, create_puzzle, tube_diversity, MAX_SHUFFLE_ATTEMPTS
from .reverse_pour import (
    ReversePourGenerator,
    create_reverse_pour_puzzle,
    can_pour,
    pour_once,
    is_solved,
)

__all__ = [
    # Base classes
    "BaseGenerator",
    "GeneratorParams",
    "GeneratedPuzzle",
    "EMPTY_SLOT",
    "ConfigurationError",
    # Random stream
    "SeededRandom",
    "make_seed",
    "hash_seed",
    "seeded_rng",
    # Distribution planning
    "auto_distribute_tubes",
    "validate_distribution",
    "even_distribution",
    # Generators
    "BulkShuffleGenerator",
    "ReversePourGenerator",
    "create_puzzle",
    "create_reverse_pour_puzzle",
    "tube_diversity",
    "MAX_SHUFFLE_ATTEMPTS",
    # Pour rules
    "can_pour",
    "pour_once",
    "is_solved",
]


# Generator registry for lookup by name
PRESETS = {
    "bulk_shuffle": {
        "generator": BulkShuffleGenerator,
        "description": "Shuffle-and-deal with per-tube color diversity",
    },
    "reverse_pour": {
        "generator": ReversePourGenerator,
        "description": "Legal reverse pours from the sorted board",
    },
}


def get_generator(preset_name: str, **kwargs) -> BaseGenerator:
    """Create a generator instance by preset name.

    Args:
        preset_name: Name of the preset (e.g., "bulk_shuffle").
        **kwargs: GeneratorParams fields.

    Returns:
        Initialized generator instance.

    Raises:
        ValueError: If preset_name is not recognized.
        ConfigurationError: If the parameters are invalid.
    """
    if preset_name not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise ValueError(f"Unknown preset: {preset_name}. Available: {available}")

    params = GeneratorParams(**kwargs)
    return PRESETS[preset_name]["generator"](params)
