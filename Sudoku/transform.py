"""
Board transformations that map a valid grid onto another valid grid.

All functions are pure: they read the grid through a 9x9 numpy array and
return a new Grid. Empty cells stay empty.
"""

import random
from typing import Optional

import numpy as np

from .grid import SIZE, Grid


def _check_band(name: str, value: int) -> int:
    if not 0 <= value < 3:
        raise ValueError(f"There are only three {name}s: {value}")
    return value


def _other_two(pivot: int):
    """The two positions of a band (0..2) other than `pivot`."""
    return (pivot + 1) % 3, (pivot + 2) % 3


# -----------------------------------------------------------------------------
# Relabelling and symmetries
# -----------------------------------------------------------------------------
def shift(grid: Grid, amount: int) -> Grid:
    """Relabel every token t as ((t + amount - 1) % 9) + 1."""
    board = grid.to_array().astype(np.int64)
    shifted = np.where(board == 0, 0, (board + amount - 1) % SIZE + 1)
    return Grid.from_array(shifted)


def transpose(grid: Grid) -> Grid:
    return Grid.from_array(grid.to_array().T)


def rotate(grid: Grid) -> Grid:
    """Quarter turn clockwise."""
    return Grid.from_array(np.rot90(grid.to_array(), k=-1))


def mirror_columns(grid: Grid) -> Grid:
    """Reverse the column order (left-right flip)."""
    return Grid.from_array(np.fliplr(grid.to_array()))


def mirror_rows(grid: Grid) -> Grid:
    """Reverse the row order (top-bottom flip)."""
    return Grid.from_array(np.flipud(grid.to_array()))


# -----------------------------------------------------------------------------
# Line and band swaps
# -----------------------------------------------------------------------------
def swap_columns(grid: Grid, sector_column: int, pivot: int) -> Grid:
    """Swap the two columns of stack `sector_column` that are not `pivot`."""
    base = _check_band("sector column", sector_column) * 3
    first, second = (base + i for i in _other_two(_check_band("pivot", pivot)))
    board = grid.to_array()
    board[:, [first, second]] = board[:, [second, first]]
    return Grid.from_array(board)


def swap_rows(grid: Grid, sector_row: int, pivot: int) -> Grid:
    """Swap the two rows of band `sector_row` that are not `pivot`."""
    base = _check_band("sector row", sector_row) * 3
    first, second = (base + i for i in _other_two(_check_band("pivot", pivot)))
    board = grid.to_array()
    board[[first, second], :] = board[[second, first], :]
    return Grid.from_array(board)


def swap_column_sectors(grid: Grid, pivot: int) -> Grid:
    """Swap the two stacks of three columns that are not `pivot`."""
    first, second = (i * 3 for i in _other_two(_check_band("pivot", pivot)))
    board = grid.to_array()
    left = board[:, first:first + 3].copy()
    board[:, first:first + 3] = board[:, second:second + 3]
    board[:, second:second + 3] = left
    return Grid.from_array(board)


def swap_row_sectors(grid: Grid, pivot: int) -> Grid:
    """Swap the two bands of three rows that are not `pivot`."""
    first, second = (i * 3 for i in _other_two(_check_band("pivot", pivot)))
    board = grid.to_array()
    top = board[first:first + 3, :].copy()
    board[first:first + 3, :] = board[second:second + 3, :]
    board[second:second + 3, :] = top
    return Grid.from_array(board)


# -----------------------------------------------------------------------------
# Random mixing
# -----------------------------------------------------------------------------
def shuffle(grid: Grid, rng: Optional[random.Random] = None, rounds: int = 128) -> Grid:
    """Apply `rounds` randomly chosen transformations."""
    rng = rng if rng is not None else random.Random()
    operations = [
        transpose,
        rotate,
        mirror_columns,
        mirror_rows,
        lambda g: swap_columns(g, rng.randrange(3), rng.randrange(3)),
        lambda g: swap_rows(g, rng.randrange(3), rng.randrange(3)),
        lambda g: swap_column_sectors(g, rng.randrange(3)),
        lambda g: swap_row_sectors(g, rng.randrange(3)),
        lambda g: shift(g, rng.randrange(1, SIZE)),
    ]
    grid = grid.copy()
    for _ in range(rounds):
        grid = rng.choice(operations)(grid)
    return grid
