"""
Puzzle generation: a solved grid is built (from scratch or from a template)
and then pruned down to the requested difficulty.
"""

import itertools
import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from . import transform
from .constraints import ConstraintChecker
from .grid import CELL_COUNT, TOKENS, Difficulty, Grid, UnsolvableError
from .pruner import Pruner
from .solver import BacktrackingSolver


@dataclass
class GeneratedPuzzle:
    solution: Grid
    puzzles: Dict[Difficulty, Grid]
    removed: int
    difficulty: Difficulty

    @property
    def puzzle(self) -> Grid:
        """The puzzle at the requested difficulty"""
        return self.puzzles[self.difficulty]


def random_seed(rng: random.Random) -> List[int]:
    """A random permutation of the nine tokens"""
    seed = list(TOKENS)
    rng.shuffle(seed)
    return seed


class PuzzleGenerator:
    def __init__(self, rng: Optional[random.Random] = None, verbose: bool = False,
                 parallel: bool = False, backend: str = "thread",
                 max_workers: Optional[int] = None, shuffle_rounds: int = 0):
        self.rng = rng if rng is not None else random.Random()
        self.verbose = verbose
        self.parallel = parallel
        self.backend = backend
        self.max_workers = max_workers
        self.shuffle_rounds = shuffle_rounds

    def _solver(self, grid: Grid) -> BacktrackingSolver:
        return BacktrackingSolver(
            grid,
            rng=self.rng,
            verbose=self.verbose,
            parallel=self.parallel,
            backend=self.backend,
            max_workers=self.max_workers,
        )

    def generate_solved(self, template: Optional[Grid] = None) -> Grid:
        """
        Build a complete valid grid.

        Without a template (or with an all-empty one) row 0 is seeded with a
        random permutation and the rest is solved. A template is validated and
        completed; UnsolvableError is raised when it has no completion.
        """
        if template is None or template.empty_count() == CELL_COUNT:
            grid = Grid()
            for cell, token in zip(Grid.row(0), random_seed(self.rng)):
                grid.set(cell, token)
            solution = self._solver(grid).solve()
            if solution is None:
                raise RuntimeError("Could not solve an empty board")
            if self.shuffle_rounds > 0:
                solution = transform.shuffle(solution, self.rng, rounds=self.shuffle_rounds)
            return solution

        ConstraintChecker.validate(template)
        solution = self._solver(template).solve()
        if solution is None:
            raise UnsolvableError("template has no solution")
        return solution

    def generate(self, difficulty: Difficulty = Difficulty.EASY,
                 template: Optional[Grid] = None) -> GeneratedPuzzle:
        """Solved grid plus one puzzle per tier up to `difficulty`."""
        solution = self.generate_solved(template)
        pruner = Pruner(
            rng=self.rng,
            verbose=self.verbose,
            parallel=self.parallel,
            backend=self.backend,
            max_workers=self.max_workers,
        )
        result = pruner.prune(solution, difficulty)

        # A best-effort pass that stalled early leaves easier tiers uncaptured
        puzzles = {}
        for tier in Difficulty:
            if tier <= difficulty:
                puzzles[tier] = result.snapshots.get(tier, result.puzzle)
        puzzles[difficulty] = result.puzzle

        return GeneratedPuzzle(
            solution=solution,
            puzzles=puzzles,
            removed=result.removed,
            difficulty=difficulty,
        )

    def generate_many(self, count: int, difficulty: Difficulty = Difficulty.EASY,
                      template: Optional[Grid] = None) -> Iterator[GeneratedPuzzle]:
        """Yield `count` puzzles; a count of 0 never stops."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        counter = itertools.count() if count == 0 else range(count)
        for _ in counter:
            yield self.generate(difficulty, template)
