"""
Core data structures for the 9x9 Sudoku grid: cells, tokens, unit index tables,
difficulty tiers and the flat digit encoding used at the boundary
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

import numpy as np


SIZE = 9
CELL_COUNT = SIZE * SIZE
EMPTY = 0
TOKENS = range(1, SIZE + 1)

Token = Optional[int]  # None for an empty cell, otherwise 1..9


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class GridError(ValueError):
    """Base class for malformed or unusable grids"""


class InvalidLength(GridError):
    """A board encoding or value sequence does not hold exactly 81 cells"""


class InvalidToken(GridError):
    """A cell value outside 0..9"""


class InvalidCell(GridError):
    """A row, column, sector or linear index out of range"""


class InconsistentGrid(GridError):
    """Fixed cells already violate a row, column or sector constraint"""

    def __init__(self, cells: Sequence["Cell"]):
        self.cells = list(cells)
        listed = ", ".join(f"r{c.row}c{c.column}" for c in self.cells)
        super().__init__(f"grid is inconsistent at {len(self.cells)} cell(s): {listed}")


class UnsolvableError(GridError):
    """A supplied template has no completion"""


# -----------------------------------------------------------------------------
# Index tables
# -----------------------------------------------------------------------------
_LAYOUT = np.arange(CELL_COUNT).reshape(SIZE, SIZE)

ROW_CELLS: List[List[int]] = _LAYOUT.tolist()
COLUMN_CELLS: List[List[int]] = _LAYOUT.T.tolist()
SECTOR_CELLS: List[List[int]] = (
    _LAYOUT.reshape(3, 3, 3, 3).transpose(0, 2, 1, 3).reshape(SIZE, SIZE).tolist()
)


def _build_units() -> List[tuple]:
    units = []
    for index in range(CELL_COUNT):
        row, col = divmod(index, SIZE)
        sector = (row // 3) * 3 + col // 3
        units.append((ROW_CELLS[row], COLUMN_CELLS[col], SECTOR_CELLS[sector]))
    return units


UNITS: List[tuple] = _build_units()

# The 20 distinct cells sharing a row, column or sector with each cell
PEERS: List[tuple] = [
    tuple(sorted({i for unit in UNITS[index] for i in unit} - {index}))
    for index in range(CELL_COUNT)
]


def _check_unit(kind: str, index: int) -> int:
    if not 0 <= index < SIZE:
        raise InvalidCell(f"{kind} index out of bounds: {index}")
    return index


# -----------------------------------------------------------------------------
# Cell
# -----------------------------------------------------------------------------
@dataclass(frozen=True, order=True)
class Cell:
    """One of the 81 grid positions, identified by its row-major linear index"""
    index: int

    def __post_init__(self):
        if not isinstance(self.index, int) or not 0 <= self.index < CELL_COUNT:
            raise InvalidCell(f"Index out of bounds: {self.index}")

    @classmethod
    def at(cls, row: int, column: int) -> "Cell":
        """Cell at (row, column), both 0-based"""
        if not (0 <= row < SIZE and 0 <= column < SIZE):
            raise InvalidCell(f"Cell out of bounds (row: {row}, col: {column})")
        return cls(row * SIZE + column)

    @property
    def row(self) -> int:
        return self.index // SIZE

    @property
    def column(self) -> int:
        return self.index % SIZE

    @property
    def sector(self) -> int:
        """Which 3x3 box the cell belongs to, row-major"""
        return (self.row // 3) * 3 + self.column // 3

    @property
    def sector_index(self) -> int:
        """Position of the cell inside its sector, row-major"""
        return (self.row % 3) * 3 + self.column % 3

    def __repr__(self):
        return f"Cell(r{self.row}c{self.column})"


# -----------------------------------------------------------------------------
# Difficulty
# -----------------------------------------------------------------------------
class Difficulty(Enum):
    """Named pruning tiers, each mapped to a number of removed cells"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def holes(self) -> int:
        return DIFFICULTY_HOLES[self]

    @property
    def rank(self) -> int:
        return list(Difficulty).index(self)

    def __lt__(self, other):
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank <= other.rank

    @classmethod
    def parse(cls, text: str) -> "Difficulty":
        """Accepts easy/e, medium/m, hard/h in any case"""
        value = text.strip().upper()
        if value in ("EASY", "E"):
            return cls.EASY
        if value in ("MEDIUM", "M"):
            return cls.MEDIUM
        if value in ("HARD", "H"):
            return cls.HARD
        raise ValueError("possible values are [easy, medium, hard]")


DIFFICULTY_HOLES = {
    Difficulty.EASY: 40,
    Difficulty.MEDIUM: 50,
    Difficulty.HARD: 54,
}


# -----------------------------------------------------------------------------
# Grid
# -----------------------------------------------------------------------------
def _check_token(value) -> int:
    if value is None:
        return EMPTY
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidToken(f"Token is not an integer: {value!r}")
    if not 0 <= value <= SIZE:
        raise InvalidToken(f"Token out of bounds: {value}")
    return int(value)


class Grid:
    """Fixed 81-cell Sudoku grid; 0 is stored for an empty cell"""

    __slots__ = ("values",)

    def __init__(self, values: Optional[Iterable] = None):
        if values is None:
            self.values: List[int] = [EMPTY] * CELL_COUNT
            return
        values = list(values)
        if len(values) != CELL_COUNT:
            raise InvalidLength(f"board must be 9x9 ({CELL_COUNT} cells), got {len(values)}")
        self.values = [_check_token(v) for v in values]

    @classmethod
    def from_sequence(cls, values: Iterable) -> "Grid":
        """Build a grid from 81 row-major values in 0..9 (None also means empty)"""
        return cls(values)

    @classmethod
    def from_array(cls, array) -> "Grid":
        """Build a grid from a 9x9 (or flat 81) numpy array"""
        array = np.asarray(array)
        if array.size != CELL_COUNT:
            raise InvalidLength(f"board must be 9x9 ({CELL_COUNT} cells), got {array.size}")
        return cls(array.reshape(CELL_COUNT).tolist())

    @classmethod
    def _wrap(cls, values: List[int]) -> "Grid":
        """Adopt an already-validated value list without copying"""
        grid = cls.__new__(cls)
        grid.values = values
        return grid

    # ---------- cell access ----------

    def get(self, cell: Cell) -> Token:
        value = self.values[cell.index]
        return value if value else None

    def set(self, cell: Cell, token: Token) -> None:
        if token is None:
            self.values[cell.index] = EMPTY
            return
        if isinstance(token, bool) or not isinstance(token, (int, np.integer)) or token not in TOKENS:
            raise InvalidToken(f"Invalid value: {token!r}")
        self.values[cell.index] = int(token)

    def clear(self, cell: Cell) -> None:
        self.values[cell.index] = EMPTY

    # ---------- unit views ----------

    @staticmethod
    def row(row: int) -> List[Cell]:
        return [Cell(i) for i in ROW_CELLS[_check_unit("Row", row)]]

    @staticmethod
    def column(column: int) -> List[Cell]:
        return [Cell(i) for i in COLUMN_CELLS[_check_unit("Column", column)]]

    @staticmethod
    def sector(sector: int) -> List[Cell]:
        return [Cell(i) for i in SECTOR_CELLS[_check_unit("Sector", sector)]]

    @staticmethod
    def cells() -> List[Cell]:
        return [Cell(i) for i in range(CELL_COUNT)]

    # ---------- state queries ----------

    def empty_cells(self) -> List[Cell]:
        return [Cell(i) for i, v in enumerate(self.values) if v == EMPTY]

    def filled_cells(self) -> List[Cell]:
        return [Cell(i) for i, v in enumerate(self.values) if v != EMPTY]

    def empty_count(self) -> int:
        return self.values.count(EMPTY)

    def is_complete(self) -> bool:
        return EMPTY not in self.values

    def copy(self) -> "Grid":
        return Grid._wrap(list(self.values))

    def to_list(self) -> List[int]:
        return list(self.values)

    def to_array(self) -> np.ndarray:
        """9x9 int8 array, 0 for empty"""
        return np.array(self.values, dtype=np.int8).reshape(SIZE, SIZE)

    def __eq__(self, other):
        return isinstance(other, Grid) and self.values == other.values

    __hash__ = None

    def __repr__(self):
        return f"Grid('{encode_board(self)}')"


# -----------------------------------------------------------------------------
# Board encoding
# -----------------------------------------------------------------------------
def decode_board(text: str) -> Grid:
    """
    Parse a flat board encoding. Only decimal digits are kept, so both
    "1,2,3,..." and "123..." are accepted; the digit count must be 81.
    """
    digits = [int(ch) for ch in text if ch in "0123456789"]
    if len(digits) != CELL_COUNT:
        raise InvalidLength(f"board must be 9x9 ({CELL_COUNT} digits), got {len(digits)}")
    return Grid._wrap(digits)


def encode_board(grid: Grid, separator: str = "") -> str:
    """Row-major digits, 0 for empty"""
    return separator.join(str(v) for v in grid.values)
