"""
Diagnostics for Sudoku grids: how full a grid is, where it conflicts, how
constrained its empty cells are and how far simple logic gets.
"""

from collections import Counter
from typing import Dict, Optional

from .constraints import ConstraintChecker, HeuristicDetector
from .grid import Grid
from .solver import BacktrackingSolver


class GridDiagnostics:

    @staticmethod
    def analyze(grid: Grid) -> Dict:
        """Summary of a grid's state. The grid is not modified."""
        inconsistencies = ConstraintChecker.list_inconsistencies(grid)
        histogram = Counter(
            len(ConstraintChecker.candidates(grid, cell)) for cell in grid.empty_cells()
        )

        # How many cells fall to naked/hidden singles alone
        scratch = grid.copy()
        forced = HeuristicDetector.apply_singles(scratch) if not inconsistencies else 0

        return {
            'filled': len(grid.filled_cells()),
            'empty': grid.empty_count(),
            'inconsistencies': inconsistencies,
            'candidate_histogram': dict(sorted(histogram.items())),
            'naked_singles': len(HeuristicDetector.find_naked_singles(grid)),
            'hidden_singles': len(HeuristicDetector.find_hidden_singles(grid)),
            'solved_by_singles': forced,
            'solutions': BacktrackingSolver(grid).count_solutions(limit=2),
        }

    @staticmethod
    def print_summary(grid: Grid, solver: Optional[BacktrackingSolver] = None):
        """Print diagnostic summary"""
        report = GridDiagnostics.analyze(grid)

        print(f"\n{'='*60}")
        print("DIAGNOSTIC SUMMARY")
        print(f"{'='*60}")
        print(f"Filled cells: {report['filled']}")
        print(f"Empty cells: {report['empty']}")

        if report['inconsistencies']:
            print(f"✗ Conflicting cells: {report['inconsistencies']}")
        else:
            print("✓ No conflicting cells")

        if report['candidate_histogram']:
            print("\nCandidates per empty cell:")
            for options, count in report['candidate_histogram'].items():
                print(f"  {options} candidate(s): {count} cell(s)")

        print(f"\nNaked singles available: {report['naked_singles']}")
        print(f"Hidden singles available: {report['hidden_singles']}")
        print(f"Cells solved by singles alone: {report['solved_by_singles']}/{report['empty']}")

        solutions = report['solutions']
        if solutions == 0:
            print("✗ No solution")
        elif solutions == 1:
            print("✓ Unique solution")
        else:
            print("⚠ Multiple solutions")

        if solver is not None:
            solver.print_stats()

        print(f"{'='*60}")
