"""
Uniqueness-preserving pruning of solved grids.

Cells are visited once in random order. A filled cell is emptied only when no
alternate value at that cell leads to another completion of the cells emptied
so far; by induction the final puzzle keeps exactly one solution. A pass that
ends short of the hole count is retried with a new visiting order.
"""

import random
import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constraints import ConstraintChecker
from .grid import CELL_COUNT, EMPTY, TOKENS, Difficulty, Grid
from .solver import explore_branch, first_success, make_executor, new_stats, search


@dataclass
class PruneResult:
    puzzle: Grid
    removed: int
    difficulty: Difficulty
    cleared: List[int] = field(default_factory=list)
    # Grids captured as easier tiers' hole counts were reached on the way
    snapshots: Dict[Difficulty, Grid] = field(default_factory=dict)

    @property
    def reached_target(self) -> bool:
        return self.removed >= self.difficulty.holes


class Pruner:
    def __init__(self, rng: Optional[random.Random] = None, verbose: bool = False,
                 parallel: bool = False, backend: str = "thread",
                 max_workers: Optional[int] = None, use_mrv: bool = True,
                 attempts: int = 10):
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        self.rng = rng if rng is not None else random.Random()
        self.verbose = verbose
        self.parallel = parallel
        self.backend = backend
        self.max_workers = max_workers
        self.use_mrv = use_mrv
        self.attempts = attempts
        self.stats = new_stats()
        self._executor = None

    def prune(self, solved: Grid, difficulty: Difficulty) -> PruneResult:
        """
        Remove values from `solved` until `difficulty.holes` cells have been
        emptied. A pass that runs out of cells first is repeated from `solved`
        with a fresh visiting order, up to `attempts` passes; the fullest pass
        is returned either way. `solved` is not modified.
        """
        ConstraintChecker.validate(solved)

        start = time.time()
        self.stats = new_stats()
        self.stats['kept'] = 0
        self.stats['passes'] = 0

        best = None
        if self.parallel:
            self._executor = make_executor(self.backend, self.max_workers)
        try:
            for _ in range(self.attempts):
                self.stats['passes'] += 1
                result = self._single_pass(solved, difficulty)
                if best is None or result.removed > best.removed:
                    best = result
                if best.reached_target:
                    break
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=True, cancel_futures=True)
                self._executor = None

        self.stats['elapsed'] = time.time() - start

        if self.verbose:
            mark = "✓" if best.reached_target else "✗"
            print(f"{mark} Removed {best.removed}/{difficulty.holes} cells for {difficulty.value} "
                  f"({self.stats['passes']} pass(es), {self.stats['elapsed']:.2f}s)")

        return best

    def _single_pass(self, solved: Grid, difficulty: Difficulty) -> PruneResult:
        """One visit of every cell in a fresh random order."""
        values = solved.to_list()
        cleared = [i for i in range(CELL_COUNT) if values[i] == EMPTY]
        order = list(range(CELL_COUNT))
        self.rng.shuffle(order)

        target = difficulty.holes
        removed = 0
        snapshots: Dict[Difficulty, Grid] = {}

        for visited, index in enumerate(order, 1):
            if removed >= target:
                break
            original = values[index]
            if original == EMPTY:
                continue

            if self.multiple_solutions(values, index, original, cleared):
                self.stats['kept'] += 1
            else:
                values[index] = EMPTY
                cleared.append(index)
                removed += 1
                for tier in Difficulty:
                    if tier < difficulty and tier.holes == removed:
                        snapshots[tier] = Grid._wrap(list(values))

            if self.verbose:
                print(f"\rPruning: {removed}/{target} removed, {visited}/{CELL_COUNT} visited",
                      end="", file=sys.stderr, flush=True)

        if self.verbose:
            print(file=sys.stderr)

        return PruneResult(
            puzzle=Grid._wrap(values),
            removed=removed,
            difficulty=difficulty,
            cleared=cleared,
            snapshots=snapshots,
        )

    def multiple_solutions(self, values: List[int], index: int, original: int,
                           cleared: List[int]) -> bool:
        """
        Would emptying `index` admit a second solution? Each locally consistent
        alternate value is placed on a copy and the cleared cells are searched;
        all other cells stay fixed. `values` is left as it was.
        """
        alternates = []
        for token in TOKENS:
            if token == original:
                continue
            values[index] = token
            if ConstraintChecker.consistent_at(values, index):
                alternates.append(token)
        values[index] = original

        if not alternates:
            return False

        branches = []
        for token in alternates:
            branch = list(values)
            branch[index] = token
            branches.append(branch)

        if self._executor is not None:
            jobs = [(branch, list(cleared), self.use_mrv) for branch in branches]
            return first_success(self._executor, explore_branch, jobs, self.stats) is not None

        for branch in branches:
            self.stats['branches'] += 1
            if search(branch, list(cleared), 0, self.use_mrv, self.stats):
                return True
        return False
