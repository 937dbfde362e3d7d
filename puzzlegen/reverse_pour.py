"""Reverse-pour generator: scrambles the sorted board with legal moves.

Every step takes a run of same-colored balls off one tube and drops it on
another, choosing only steps whose forward pour is legal. Replaying the
recorded moves backwards therefore always solves the board. Slower and
less evenly mixed than the bulk shuffle, this path is kept for
cross-checking solvability.
"""

import logging

from .base import BaseGenerator, GeneratedPuzzle, GeneratorParams, Tube

logger = logging.getLogger(__name__)

MAX_RUN_PER_MOVE = 3


def can_pour(src: Tube, dst: Tube, tube_size: int) -> bool:
    """Whether the top of src may be poured onto dst."""
    if not src or len(dst) >= tube_size:
        return False
    return not dst or dst[-1] == src[-1]


def pour_once(src: Tube, dst: Tube, tube_size: int, max_pour: int = 8) -> int:
    """Pour the top run of src onto dst in place.

    Args:
        src: Tube to pour from.
        dst: Tube to pour into.
        tube_size: Tube capacity.
        max_pour: Upper bound on balls moved.

    Returns:
        Number of balls moved (0 if the pour is illegal).
    """
    if not can_pour(src, dst, tube_size):
        return 0

    color = src[-1]
    limit = min(max_pour, tube_size - len(dst))
    moved = 0
    while moved < limit and src and src[-1] == color:
        dst.append(src.pop())
        moved += 1
    return moved


def top_run(tube: Tube) -> int:
    """Length of the same-colored run at the top of a tube."""
    if not tube:
        return 0
    run = 1
    while run < len(tube) and tube[-run - 1] == tube[-1]:
        run += 1
    return run


def is_solved(tubes: list[Tube], tube_size: int) -> bool:
    """Every tube is empty or full of a single color."""
    return all(
        not tube or (len(tube) == tube_size and len(set(tube)) == 1)
        for tube in tubes
    )


def max_reverse_run(src: Tube, dst: Tube, tube_size: int) -> int:
    """Largest run that can leave src for dst as the inverse of a legal pour.

    Taking k balls of color c from src onto dst undoes the forward pour
    dst -> src when:
    - dst is empty or its top is not c, so the forward pour moves exactly k
    - src keeps a c on top, or is left empty, so the forward pour is legal
    """
    run = top_run(src)
    if run == 0:
        return 0
    if dst and dst[-1] == src[-1]:
        return 0
    limit = run if run == len(src) else run - 1
    return min(limit, tube_size - len(dst), MAX_RUN_PER_MOVE)


class ReversePourGenerator(BaseGenerator):
    """Scrambles the sorted board through shuffle_steps legal reverse pours.

    The applied moves are stored in ``params["moves"]`` as
    ``(src, dst, count)``; undoing them in reverse order with
    ``pour_once(tubes[dst], tubes[src], ...)`` restores the sorted board.
    """

    name = "reverse_pour"

    def generate(self) -> GeneratedPuzzle:
        p = self.params
        tubes = self._build_solved_tubes()
        tubes.extend([] for _ in range(p.empty_tube_count))

        moves: list[tuple[int, int, int]] = []
        for _ in range(p.shuffle_steps):
            candidates = self._reverse_moves(tubes)
            if not candidates:
                logger.debug("No reverse pour available after %d moves", len(moves))
                break

            src, dst, limit = candidates[self.rng.randint(len(candidates))]
            count = 1 + self.rng.randint(limit)
            tubes[dst].extend(tubes[src][-count:])
            del tubes[src][-count:]
            moves.append((src, dst, count))

        logger.debug(
            "Reverse pour complete: %d moves over %d tubes", len(moves), len(tubes)
        )

        params = self._record_params()
        params["moves"] = moves
        return GeneratedPuzzle(
            tubes=tubes,
            per_color_tubes=list(self.distribution),
            seed_used=self.seed_used,
            tube_size=p.tube_size,
            generator_name=self.name,
            attempts=len(moves),
            params=params,
        )

    def _reverse_moves(self, tubes: list[Tube]) -> list[tuple[int, int, int]]:
        """All (src, dst, max_count) reverse pours available on the board."""
        moves = []
        for src in range(len(tubes)):
            for dst in range(len(tubes)):
                if src == dst:
                    continue
                limit = max_reverse_run(tubes[src], tubes[dst], self.params.tube_size)
                if limit > 0:
                    moves.append((src, dst, limit))
        return moves


def create_reverse_pour_puzzle(params: GeneratorParams | None = None, **kwargs) -> GeneratedPuzzle:
    """Generate a board with the reverse-pour generator in one step."""
    if params is None:
        params = GeneratorParams(**kwargs)
    return ReversePourGenerator(params).generate()
