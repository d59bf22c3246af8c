"""
Sudoku Generator and Solver Package

Backtracking search over a 9x9 grid, uniqueness-preserving pruning of solved
grids into puzzles, and board transformations.
"""

from .grid import (
    Cell,
    Difficulty,
    Grid,
    GridError,
    InconsistentGrid,
    InvalidCell,
    InvalidLength,
    InvalidToken,
    UnsolvableError,
    decode_board,
    encode_board,
)
from .constraints import ConstraintChecker, HeuristicDetector
from .solver import BacktrackingSolver, solve
from .pruner import Pruner, PruneResult
from .generator import GeneratedPuzzle, PuzzleGenerator
from .output import SolutionFormatter
from .diagnostics import GridDiagnostics

__version__ = "1.0.0"
__all__ = [
    'Cell',
    'Difficulty',
    'Grid',
    'GridError',
    'InconsistentGrid',
    'InvalidCell',
    'InvalidLength',
    'InvalidToken',
    'UnsolvableError',
    'decode_board',
    'encode_board',
    'ConstraintChecker',
    'HeuristicDetector',
    'BacktrackingSolver',
    'solve',
    'Pruner',
    'PruneResult',
    'GeneratedPuzzle',
    'PuzzleGenerator',
    'SolutionFormatter',
    'GridDiagnostics',
]
