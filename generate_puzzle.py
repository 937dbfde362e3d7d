#!/usr/bin/env python3
"""CLI script to pregenerate ball sort puzzles.

Writes puzzles-config.json with one board per difficulty tier, for the
empty-tube count in output-config.json (or given on the command line).

Usage:
    python generate_puzzle.py [output] [options]

Examples:
    python generate_puzzle.py config/puzzles-config.json
    python generate_puzzle.py out.json --output-config config/output-config.json
    python generate_puzzle.py out.json --empty-tubes 3 --seed level --validate
"""

import argparse
import logging
import sys
from pathlib import Path

from puzzle_adapter import generate_puzzle_with_adapter, validate_puzzle
from puzzle_cache import PREGENERATED_DIFFICULTIES
from puzzle_loader import PUZZLES_CONFIG_FILENAME, CachedPuzzleData, write_puzzles_config
from settings import OutputConfig, load_output_config


def configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(message)s", datefmt="%H:%M:%S")
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for puzzle pregeneration CLI."""
    parser = argparse.ArgumentParser(
        description="Pregenerate ball sort puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Difficulty maps to colors as difficulty + 2 (3-12).
Empty tubes are clamped to 1-6 on a fixed 14-tube board.
""",
    )

    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=Path(PUZZLES_CONFIG_FILENAME),
        help=f"Output file (default: {PUZZLES_CONFIG_FILENAME})",
    )
    parser.add_argument(
        "--output-config",
        type=Path,
        default=None,
        help="output-config.json to read emptyTubeCount from",
    )
    parser.add_argument(
        "--empty-tubes",
        type=int,
        default=None,
        help="Empty tube count, overrides output-config (default: 2)",
    )
    parser.add_argument(
        "--difficulties",
        type=int,
        nargs="+",
        default=list(PREGENERATED_DIFFICULTIES),
        help="Difficulty tiers to generate (default: 1 5 9)",
    )
    parser.add_argument(
        "--seed",
        default=None,
        help="Seed prefix for reproducible boards; tier N uses '<seed>-N'",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate every generated board",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show generator debug logging",
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.output_config is not None:
        config = load_output_config(path=args.output_config)
    else:
        config = OutputConfig()
    if args.empty_tubes is not None:
        config.empty_tube_count = args.empty_tubes
    empty_tube_count = config.effective_empty_tube_count

    puzzles: dict[int, CachedPuzzleData] = {}
    invalid = 0
    for difficulty in args.difficulties:
        seed = f"{args.seed}-{difficulty}" if args.seed is not None else None
        puzzle = generate_puzzle_with_adapter(
            difficulty=difficulty, empty_tube_count=empty_tube_count, seed=seed
        )
        puzzles[difficulty] = CachedPuzzleData(
            puzzle=puzzle, difficulty=difficulty, empty_tube_count=empty_tube_count
        )
        print(
            f"  Difficulty {difficulty}: {len(puzzle.used_colors)} colors, "
            f"tubes per color {puzzle.per_color_tubes}, seed {puzzle.seed_used}"
        )

        if args.validate:
            result = validate_puzzle(puzzle.tubes, empty_tube_count=empty_tube_count)
            for error in result.errors:
                print(f"    ! {error}")
            invalid += 0 if result.valid else 1

    write_puzzles_config(args.output, puzzles, empty_tube_count)

    print(f"\nGenerated {len(puzzles)} puzzles (emptyTubeCount={empty_tube_count})")
    print(f"  Output: {args.output}")
    return 1 if invalid else 0


if __name__ == "__main__":
    sys.exit(main())
