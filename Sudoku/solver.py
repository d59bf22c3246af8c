"""
Backtracking solver for Sudoku grids

Key points:
1. Open cells are fixed up front and visited in a shuffled order (injectable RNG)
2. Tokens 1..9 are tried in order; inconsistent assignments are skipped
3. Failure resets the cell and reports back to the parent depth
4. Optional MRV ordering swaps the most constrained open cell to the front
5. Optional fork-join over the first open cell, one private grid copy per branch
"""

import random
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .constraints import ConstraintChecker
from .grid import CELL_COUNT, EMPTY, PEERS, TOKENS, Cell, Grid


BACKENDS = ("thread", "process")

Stats = Dict[str, float]


def new_stats() -> Stats:
    return {
        'assignments': 0,
        'backtracks': 0,
        'branches': 0,
        'elapsed': 0.0,
    }


def merge_stats(into: Stats, other: Stats) -> None:
    for key in ('assignments', 'backtracks', 'branches'):
        into[key] += other.get(key, 0)


# -----------------------------------------------------------------------------
# Depth search (shared with the pruner)
# -----------------------------------------------------------------------------
def promote_most_constrained(values: List[int], sequence: List[int], depth: int) -> None:
    """Swap the open cell with the fewest candidates into sequence[depth]."""
    best = depth
    best_count = 10
    for position in range(depth, len(sequence)):
        used = {values[p] for p in PEERS[sequence[position]]}
        count = 9 - len(used) + (EMPTY in used)
        if count < best_count:
            best, best_count = position, count
            if count <= 1:
                break
    if best != depth:
        sequence[depth], sequence[best] = sequence[best], sequence[depth]


def search(
    values: List[int],
    sequence: List[int],
    depth: int = 0,
    use_mrv: bool = True,
    stats: Optional[Stats] = None,
) -> bool:
    """
    Fill sequence[depth:] in place. On success the values hold a full
    assignment of the sequence; on failure every cell of sequence[depth:] is
    back to empty.
    """
    if depth == len(sequence):
        return True

    if use_mrv:
        promote_most_constrained(values, sequence, depth)

    index = sequence[depth]
    consistent_at = ConstraintChecker.consistent_at
    for token in TOKENS:
        values[index] = token
        if stats is not None:
            stats['assignments'] += 1
        if not consistent_at(values, index):
            continue
        if search(values, sequence, depth + 1, use_mrv, stats):
            return True

    values[index] = EMPTY
    if stats is not None:
        stats['backtracks'] += 1
    return False


def count_completions(
    values: List[int],
    sequence: List[int],
    depth: int,
    limit: int,
    use_mrv: bool = True,
) -> int:
    """Count assignments of sequence[depth:], stopping once `limit` are found."""
    if depth == len(sequence):
        return 1

    if use_mrv:
        promote_most_constrained(values, sequence, depth)

    index = sequence[depth]
    found = 0
    for token in TOKENS:
        values[index] = token
        if not ConstraintChecker.consistent_at(values, index):
            continue
        found += count_completions(values, sequence, depth + 1, limit - found, use_mrv)
        if found >= limit:
            break

    values[index] = EMPTY
    return found


def explore_branch(values: List[int], sequence: List[int], use_mrv: bool) -> Tuple[Optional[List[int]], Stats]:
    """One forked branch: search a private copy, return the filled values or None."""
    stats = new_stats()
    if search(values, sequence, 0, use_mrv, stats):
        return values, stats
    return None, stats


# -----------------------------------------------------------------------------
# Fork-join helpers
# -----------------------------------------------------------------------------
def make_executor(backend: str = "thread", max_workers: Optional[int] = None) -> Executor:
    if backend == "thread":
        return ThreadPoolExecutor(max_workers=max_workers)
    if backend == "process":
        return ProcessPoolExecutor(max_workers=max_workers)
    raise ValueError(f"Unknown parallel backend: {backend!r} (expected one of {BACKENDS})")


def first_success(executor: Executor, fn: Callable, jobs: Sequence[tuple], stats: Stats):
    """
    Submit fn(*job) for every job and return the first truthy result, or None.
    Each call returns (result, stats). Pending siblings are cancelled once a
    winner is seen; running ones finish and are discarded.
    """
    futures = [executor.submit(fn, *job) for job in jobs]
    stats['branches'] += len(futures)
    winner = None
    for future in as_completed(futures):
        result, branch_stats = future.result()
        merge_stats(stats, branch_stats)
        if result:
            winner = result
            break
    for future in futures:
        future.cancel()
    return winner


# -----------------------------------------------------------------------------
# Solver
# -----------------------------------------------------------------------------
class BacktrackingSolver:
    def __init__(self, grid: Grid, rng: Optional[random.Random] = None, verbose: bool = False,
                 use_mrv: bool = True, parallel: bool = False, backend: str = "thread",
                 max_workers: Optional[int] = None):
        self.grid = grid
        self.rng = rng if rng is not None else random.Random()
        self.verbose = verbose
        self.use_mrv = use_mrv
        self.parallel = parallel
        self.backend = backend
        self.max_workers = max_workers
        self.stats = new_stats()

    def open_cells(self) -> List[int]:
        """Empty cells of the input grid in a shuffled visiting order."""
        order = list(range(CELL_COUNT))
        self.rng.shuffle(order)
        return [i for i in order if self.grid.values[i] == EMPTY]

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self) -> Optional[Grid]:
        """
        Return a completed copy of the grid, or None when no completion exists.
        The input grid is left untouched.
        """
        start = time.time()
        self.stats = new_stats()

        if self.verbose:
            print(f"Starting backtracking solver: {self.grid.empty_count()} open cells")
            print(f"Strategy: {'MRV' if self.use_mrv else 'fixed-order'} backtracking"
                  f"{' (parallel, ' + self.backend + ')' if self.parallel else ''}")

        conflicts = ConstraintChecker.list_inconsistencies(self.grid)
        if conflicts:
            if self.verbose:
                print(f"✗ Fixed cells conflict at {len(conflicts)} cell(s): {conflicts}")
            return None

        values = self.grid.to_list()
        sequence = self.open_cells()

        if self.parallel and sequence:
            result = self._solve_parallel(values, sequence)
        elif search(values, sequence, 0, self.use_mrv, self.stats):
            result = values
        else:
            result = None

        self.stats['elapsed'] = time.time() - start

        if self.verbose:
            print("\n✓ Puzzle solved!" if result is not None else "\n✗ No solution found")
            self.print_stats()

        return Grid._wrap(result) if result is not None else None

    def _solve_parallel(self, values: List[int], sequence: List[int]) -> Optional[List[int]]:
        """Fork one branch per consistent token of the first open cell."""
        if self.use_mrv:
            promote_most_constrained(values, sequence, 0)
        first, rest = sequence[0], sequence[1:]

        jobs = []
        for token in TOKENS:
            branch = list(values)
            branch[first] = token
            if ConstraintChecker.consistent_at(branch, first):
                jobs.append((branch, list(rest), self.use_mrv))

        if self.verbose:
            print(f"Forking {len(jobs)} branches on {Cell(first)}")

        if not jobs:
            return None

        executor = make_executor(self.backend, self.max_workers)
        try:
            return first_success(executor, explore_branch, jobs, self.stats)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    # -------------------------------------------------------------------------
    # Uniqueness
    # -------------------------------------------------------------------------
    def count_solutions(self, limit: int = 2) -> int:
        """Number of completions of the grid, capped at `limit`."""
        if ConstraintChecker.list_inconsistencies(self.grid):
            return 0
        return count_completions(self.grid.to_list(), self.open_cells(), 0, limit, self.use_mrv)

    def has_unique_solution(self) -> bool:
        return self.count_solutions(limit=2) == 1

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSolving Statistics:")
        print(f"  Assignments: {self.stats['assignments']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        print(f"  Branches: {self.stats['branches']}")
        print(f"  Elapsed: {self.stats['elapsed']:.3f}s")


def solve(grid: Grid, rng: Optional[random.Random] = None, **options) -> Optional[Grid]:
    """Shortcut for BacktrackingSolver(grid, rng, **options).solve()."""
    return BacktrackingSolver(grid, rng=rng, **options).solve()
