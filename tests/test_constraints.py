# tests/test_constraints.py
import pytest

from Sudoku.constraints import ConstraintChecker, HeuristicDetector
from Sudoku.grid import Cell, Grid, InconsistentGrid


def test_canonical_is_consistent(canonical):
    assert ConstraintChecker.list_inconsistencies(canonical) == []
    ConstraintChecker.validate(canonical)


def test_empty_cell_is_consistent(canonical):
    cell = Cell.at(2, 3)
    canonical.clear(cell)
    assert ConstraintChecker.consistent(canonical, cell)
    assert ConstraintChecker.consistent(Grid(), Cell(40))


def test_duplicate_in_row_flags_both_cells(canonical):
    canonical.set(Cell.at(2, 7), 1)
    bad = ConstraintChecker.list_inconsistencies(canonical)
    assert Cell.at(2, 3) in bad
    assert Cell.at(2, 7) in bad
    assert not ConstraintChecker.consistent(canonical, Cell.at(2, 3))
    assert not ConstraintChecker.consistent(canonical, Cell.at(2, 7))
    with pytest.raises(InconsistentGrid) as info:
        ConstraintChecker.validate(canonical)
    assert Cell.at(2, 7) in info.value.cells


def test_consistent_at_matches_consistent(canonical):
    canonical.set(Cell.at(2, 7), 1)
    for cell in Grid.cells():
        assert ConstraintChecker.consistent_at(canonical.values, cell.index) == \
            ConstraintChecker.consistent(canonical, cell)


def test_candidates_and_placement(canonical):
    cell = Cell.at(2, 3)
    canonical.clear(cell)
    assert ConstraintChecker.candidates(canonical, cell) == [1]
    assert ConstraintChecker.is_valid_placement(canonical, cell, 1)
    assert not ConstraintChecker.is_valid_placement(canonical, cell, 2)
    assert not ConstraintChecker.is_valid_placement(canonical, cell, 0)
    assert canonical.get(cell) is None
    assert ConstraintChecker.candidates(Grid(), cell) == list(range(1, 10))


def test_single_detection(canonical):
    cell = Cell.at(5, 5)
    canonical.clear(cell)
    assert HeuristicDetector.find_naked_singles(canonical) == [(cell, 4)]
    assert HeuristicDetector.find_hidden_singles(canonical) == [(cell, 4)]


def test_apply_singles_fills_a_cleared_row(canonical):
    puzzle = canonical.copy()
    for cell in Grid.row(0):
        puzzle.clear(cell)
    assert HeuristicDetector.apply_singles(puzzle) == 9
    assert puzzle == canonical
