# tests/test_pruner.py
import random

import pytest

from Sudoku.constraints import ConstraintChecker
from Sudoku.generator import PuzzleGenerator
from Sudoku.grid import Cell, Difficulty, Grid, InconsistentGrid
from Sudoku.pruner import Pruner
from Sudoku.solver import BacktrackingSolver


def _assert_unique_completion(puzzle, solution):
    assert BacktrackingSolver(puzzle).count_solutions() == 1
    assert BacktrackingSolver(puzzle).solve() == solution
    for cell in puzzle.filled_cells():
        assert puzzle.get(cell) == solution.get(cell)


def test_easy_prune_of_canonical(canonical, rng):
    original = canonical.copy()
    result = Pruner(rng=rng).prune(canonical, Difficulty.EASY)

    assert canonical == original
    assert result.removed == 40
    assert result.reached_target
    assert result.puzzle.empty_count() == 40
    assert sorted(result.cleared) == sorted(c.index for c in result.puzzle.empty_cells())
    assert result.snapshots == {}
    _assert_unique_completion(result.puzzle, canonical)


def test_no_alternate_value_completes(canonical, rng):
    puzzle = Pruner(rng=rng).prune(canonical, Difficulty.EASY).puzzle
    for cell in puzzle.empty_cells():
        for token in ConstraintChecker.candidates(puzzle, cell):
            if token == canonical.get(cell):
                continue
            trial = puzzle.copy()
            trial.set(cell, token)
            assert BacktrackingSolver(trial).solve() is None


def test_medium_prune_records_easy_snapshot():
    rng = random.Random(99)
    solution = PuzzleGenerator(rng=rng).generate_solved()
    result = Pruner(rng=rng).prune(solution, Difficulty.MEDIUM)

    assert result.removed == 50
    assert list(result.snapshots) == [Difficulty.EASY]
    easy = result.snapshots[Difficulty.EASY]
    assert easy.empty_count() == 40
    for cell in easy.empty_cells():
        assert result.puzzle.get(cell) is None
    _assert_unique_completion(easy, solution)
    _assert_unique_completion(result.puzzle, solution)


def test_input_empties_are_open_but_not_counted(canonical, rng):
    seeded = canonical.copy()
    for cell in Grid.row(0):
        seeded.clear(cell)
    result = Pruner(rng=rng).prune(seeded, Difficulty.EASY)

    assert 0 < result.removed <= 40
    assert result.puzzle.empty_count() == result.removed + 9
    assert set(range(9)) <= set(result.cleared)
    _assert_unique_completion(result.puzzle, canonical)


def test_inconsistent_input_is_rejected(canonical, rng):
    canonical.set(Cell.at(2, 7), 1)
    with pytest.raises(InconsistentGrid):
        Pruner(rng=rng).prune(canonical, Difficulty.EASY)


def test_multiple_solutions_on_swappable_rows(canonical):
    # Rows 1 and 2 emptied except r2c0; putting 4 there lets the rows swap
    values = canonical.to_list()
    cleared = [i for i in range(9, 27) if i != 18]
    for i in cleared:
        values[i] = 0
    before = list(values)

    pruner = Pruner()
    assert pruner.multiple_solutions(values, 18, 7, cleared)
    assert values == before

    assert not pruner.multiple_solutions(canonical.to_list(), 0, 1, [])


def test_parallel_prune_keeps_uniqueness(canonical, rng):
    pruner = Pruner(rng=rng, parallel=True, backend="thread", max_workers=4)
    result = pruner.prune(canonical, Difficulty.EASY)
    assert result.removed == 40
    _assert_unique_completion(result.puzzle, canonical)


def test_verbose_progress_goes_to_stderr(canonical, rng, capsys):
    Pruner(rng=rng, verbose=True).prune(canonical, Difficulty.EASY)
    captured = capsys.readouterr()
    assert "Pruning: 40/40 removed" in captured.err
    assert "Removed 40/40 cells for easy" in captured.out


def test_hard_prune_reaches_target():
    rng = random.Random(4)
    solution = PuzzleGenerator(rng=rng).generate_solved()
    pruner = Pruner(rng=rng)
    result = pruner.prune(solution, Difficulty.HARD)

    assert result.reached_target
    assert result.removed == Difficulty.HARD.holes
    assert result.puzzle.empty_count() == Difficulty.HARD.holes
    assert list(result.snapshots) == [Difficulty.EASY, Difficulty.MEDIUM]
    assert result.snapshots[Difficulty.MEDIUM].empty_count() == 50
    _assert_unique_completion(result.puzzle, solution)


def test_short_passes_are_retried(rng):
    solution = PuzzleGenerator(rng=rng).generate_solved()
    hard = Pruner(rng=rng).prune(solution, Difficulty.HARD).puzzle

    # At most 27 givens remain, so another 54 removals can never happen
    pruner = Pruner(rng=rng, attempts=3)
    result = pruner.prune(hard, Difficulty.HARD)
    assert not result.reached_target
    assert pruner.stats['passes'] == 3
    assert result.puzzle.empty_count() == hard.empty_count() + result.removed
    _assert_unique_completion(result.puzzle, solution)


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        Pruner(attempts=0)
