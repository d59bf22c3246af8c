"""
Constraint checking and forced-move detection for Sudoku grids

Key points:
 - A cell is consistent when no other cell of its row, column or sector holds its value
 - Empty cells are always consistent
 - The raw-list variant `consistent_at` is the hot path shared by solver and pruner
"""

from typing import List, Tuple

from .grid import CELL_COUNT, EMPTY, PEERS, TOKENS, UNITS, Cell, Grid, InconsistentGrid


Placement = Tuple[Cell, int]


# -----------------------------------------------------------------------------
# Constraint Checking
# -----------------------------------------------------------------------------
class ConstraintChecker:
    """Validates cell values against row, column and sector constraints."""

    @staticmethod
    def consistent_at(values: List[int], index: int) -> bool:
        """Consistency of one cell on a raw 81-value list."""
        reference = values[index]
        if reference == EMPTY:
            return True
        for peer in PEERS[index]:
            if values[peer] == reference:
                return False
        return True

    @staticmethod
    def consistent(grid: Grid, cell: Cell) -> bool:
        """
        True when `cell` is empty or its value appears nowhere else in its
        row, column or sector. The cell itself is skipped, never compared.
        """
        values = grid.values
        index = cell.index
        reference = values[index]
        if reference == EMPTY:
            return True
        for unit in UNITS[index]:
            for other in unit:
                if other != index and values[other] == reference:
                    return False
        return True

    @staticmethod
    def list_inconsistencies(grid: Grid) -> List[Cell]:
        """All cells whose value is duplicated in a row, column or sector."""
        return [
            Cell(i) for i in range(CELL_COUNT)
            if not ConstraintChecker.consistent_at(grid.values, i)
        ]

    @staticmethod
    def validate(grid: Grid) -> None:
        """Raise InconsistentGrid if any fixed cells conflict."""
        bad = ConstraintChecker.list_inconsistencies(grid)
        if bad:
            raise InconsistentGrid(bad)

    @staticmethod
    def used_tokens(values: List[int], index: int) -> set:
        """Values already taken by the peers of `index`."""
        used = {values[p] for p in PEERS[index]}
        used.discard(EMPTY)
        return used

    @staticmethod
    def is_valid_placement(grid: Grid, cell: Cell, token: int) -> bool:
        """Would `token` at `cell` be consistent? The grid is not modified."""
        if token not in TOKENS:
            return False
        return token not in ConstraintChecker.used_tokens(grid.values, cell.index)

    @staticmethod
    def candidates(grid: Grid, cell: Cell) -> List[int]:
        """Tokens that could be placed at `cell`, ignoring its current value."""
        used = ConstraintChecker.used_tokens(grid.values, cell.index)
        return [t for t in TOKENS if t not in used]


# -----------------------------------------------------------------------------
# Heuristic Detection (used by diagnostics)
# -----------------------------------------------------------------------------
class HeuristicDetector:
    """Detects forced placements on empty cells."""

    @staticmethod
    def find_naked_singles(grid: Grid) -> List[Placement]:
        """Empty cells with exactly one candidate."""
        forced: List[Placement] = []
        for cell in grid.empty_cells():
            options = ConstraintChecker.candidates(grid, cell)
            if len(options) == 1:
                forced.append((cell, options[0]))
        return forced

    @staticmethod
    def find_hidden_singles(grid: Grid) -> List[Placement]:
        """
        Tokens that fit only one empty cell of some unit.
        A placement found through several units is reported once.
        """
        forced: List[Placement] = []
        seen = set()
        candidates = {
            cell.index: ConstraintChecker.candidates(grid, cell)
            for cell in grid.empty_cells()
        }
        for u in range(9):
            for unit in (Grid.row(u), Grid.column(u), Grid.sector(u)):
                for token in TOKENS:
                    spots = [c for c in unit if token in candidates.get(c.index, ())]
                    if len(spots) == 1 and (spots[0], token) not in seen:
                        seen.add((spots[0], token))
                        forced.append((spots[0], token))
        return forced

    @staticmethod
    def apply_singles(grid: Grid, max_rounds: int = CELL_COUNT) -> int:
        """
        Fill naked and hidden singles in place until none remain.
        Returns the number of cells filled; stops early on a contradiction.
        """
        total = 0
        for _ in range(max_rounds):
            moves = HeuristicDetector.find_naked_singles(grid)
            if not moves:
                moves = HeuristicDetector.find_hidden_singles(grid)
            if not moves:
                break
            cell, token = moves[0]
            if not ConstraintChecker.is_valid_placement(grid, cell, token):
                break
            grid.set(cell, token)
            total += 1
        return total
