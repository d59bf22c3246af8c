# tests/test_grid.py
import random

import numpy as np
import pytest

from Sudoku.grid import (
    PEERS,
    Cell,
    Difficulty,
    Grid,
    InvalidCell,
    InvalidLength,
    InvalidToken,
    decode_board,
    encode_board,
)


def test_cell_coordinates():
    cell = Cell.at(2, 3)
    assert cell.index == 21
    assert (cell.row, cell.column) == (2, 3)
    assert cell.sector == 1
    assert cell.sector_index == 6
    assert Cell(80).sector == 8


def test_cell_out_of_range():
    with pytest.raises(InvalidCell):
        Cell(81)
    with pytest.raises(InvalidCell):
        Cell(-1)
    with pytest.raises(InvalidCell):
        Cell.at(9, 0)
    with pytest.raises(InvalidCell):
        Cell.at(0, 9)


def test_cells_compare_by_index():
    assert Cell.at(1, 0) == Cell(9)
    assert Cell(3) < Cell(4)
    assert len({Cell(5), Cell.at(0, 5)}) == 1


def test_unit_views_are_canonical():
    assert [c.index for c in Grid.row(0)] == list(range(9))
    assert [c.index for c in Grid.column(1)] == [1, 10, 19, 28, 37, 46, 55, 64, 73]
    assert [c.index for c in Grid.sector(4)] == [30, 31, 32, 39, 40, 41, 48, 49, 50]
    assert [c.index for c in Grid.sector(8)] == [60, 61, 62, 69, 70, 71, 78, 79, 80]
    with pytest.raises(InvalidCell):
        Grid.row(9)
    with pytest.raises(InvalidCell):
        Grid.sector(-1)


def test_peers():
    for index, peers in enumerate(PEERS):
        assert len(peers) == 20
        assert index not in peers
    assert 80 in PEERS[60]
    assert 10 not in PEERS[80]


def test_get_set_clear():
    grid = Grid()
    cell = Cell.at(4, 4)
    assert grid.get(cell) is None
    grid.set(cell, 7)
    assert grid.get(cell) == 7
    grid.set(cell, None)
    assert grid.get(cell) is None
    grid.set(cell, 3)
    grid.clear(cell)
    assert grid.get(cell) is None
    for bad in (0, 10, -1, True):
        with pytest.raises(InvalidToken):
            grid.set(cell, bad)


def test_from_sequence_validation(canonical):
    with pytest.raises(InvalidLength):
        Grid.from_sequence([0] * 80)
    with pytest.raises(InvalidToken):
        Grid.from_sequence([10] + [0] * 80)
    with pytest.raises(InvalidToken):
        Grid.from_sequence(["1"] + [0] * 80)
    grid = Grid.from_sequence([None] * 81)
    assert grid.empty_count() == 81
    assert canonical.is_complete()


def test_copy_is_independent(canonical):
    other = canonical.copy()
    other.clear(Cell(0))
    assert canonical.get(Cell(0)) == 1
    assert other != canonical


def test_array_roundtrip(canonical):
    array = canonical.to_array()
    assert array.shape == (9, 9)
    assert array[2, 3] == 1
    assert Grid.from_array(array) == canonical
    assert Grid.from_array(np.zeros(81, dtype=int)).empty_count() == 81


def test_board_encoding(canonical):
    text = ",".join(str(v) for v in canonical.to_list())
    assert decode_board(text) == canonical
    assert encode_board(canonical).startswith("123456789456")
    assert encode_board(canonical, separator=",") == text
    assert decode_board(encode_board(canonical)) == canonical
    with pytest.raises(InvalidLength):
        decode_board("123")


def test_difficulty_parse_and_order():
    assert Difficulty.parse("easy") is Difficulty.EASY
    assert Difficulty.parse("M") is Difficulty.MEDIUM
    assert Difficulty.parse(" Hard ") is Difficulty.HARD
    with pytest.raises(ValueError, match=r"possible values are \[easy, medium, hard\]"):
        Difficulty.parse("extreme")
    assert Difficulty.EASY < Difficulty.MEDIUM < Difficulty.HARD
    assert [d.holes for d in Difficulty] == [40, 50, 54]


def test_set_rejects_non_integers():
    grid = Grid()
    for bad in (1.0, "1", 2.5):
        with pytest.raises(InvalidToken):
            grid.set(Cell(0), bad)
    assert grid.get(Cell(0)) is None
    grid.set(Cell(0), np.int64(3))
    assert grid.values[0] == 3
    assert type(grid.values[0]) is int
    assert encode_board(grid)[:2] == "30"


def test_encoding_roundtrip_with_empty_cells():
    rng = random.Random(81)
    for _ in range(200):
        digits = "".join(rng.choice("0123456789") for _ in range(81))
        grid = decode_board(digits)
        assert encode_board(grid) == digits
        assert decode_board(encode_board(grid, separator=",")) == grid
        assert Grid.from_sequence(grid.to_list()) == grid
