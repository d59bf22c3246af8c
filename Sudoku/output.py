import json
from datetime import datetime
from typing import Dict, Optional

from .constraints import ConstraintChecker
from .grid import SIZE, Cell, Difficulty, Grid, encode_board


class SolutionFormatter:
    """Formats puzzles and solutions for output"""

    # Box-drawing rules for the 9x9 rendering
    TOP = "┏━━━━━┯━━━━━┯━━━━━┓"
    SEPARATOR = "┠─────┼─────┼─────┨"
    BOTTOM = "┗━━━━━┷━━━━━┷━━━━━┛"

    @staticmethod
    def format_grid(grid: Grid) -> str:
        """
        Boxed rendering: thick outer border, thin rules between sectors,
        a blank for every empty cell
        """
        lines = [SolutionFormatter.TOP]
        for row in range(SIZE):
            tokens = [grid.get(Cell.at(row, col)) for col in range(SIZE)]
            chunks = [
                " ".join(str(t) if t is not None else " " for t in tokens[start:start + 3])
                for start in (0, 3, 6)
            ]
            lines.append("┃" + "│".join(chunks) + "┃")
            if row in (2, 5):
                lines.append(SolutionFormatter.SEPARATOR)
        lines.append(SolutionFormatter.BOTTOM)
        return "\n".join(lines)

    @staticmethod
    def format_digits(grid: Grid, separator: str = "") -> str:
        return encode_board(grid, separator)

    @staticmethod
    def format_solution_json(puzzle: Grid, solution: Optional[Grid], stats: Dict,
                             difficulty: Optional[Difficulty] = None) -> Dict:
        """
        Format a puzzle and its solution as JSON
        """
        solved = solution is not None and solution.is_complete()
        return {
            'puzzle_info': {
                'given_cells': len(puzzle.filled_cells()),
                'empty_cells': puzzle.empty_count(),
                'difficulty': difficulty.value if difficulty is not None else None,
                'solved': solved,
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': stats,
            'puzzle': encode_board(puzzle),
            'solution': encode_board(solution) if solution is not None else None,
            'grid': solution.to_array().tolist() if solution is not None else None,
            'consistent': solution is not None and not ConstraintChecker.list_inconsistencies(solution),
        }

    @staticmethod
    def format_solution_human_readable(puzzle: Grid, solution: Optional[Grid],
                                       difficulty: Optional[Difficulty] = None) -> str:
        """
        Format a puzzle and its solution as human-readable text
        """
        lines = []
        lines.append("=" * 60)
        lines.append("SUDOKU PUZZLE")
        lines.append("=" * 60)
        if difficulty is not None:
            lines.append(f"Difficulty: {difficulty.value}")
        lines.append(f"Givens: {len(puzzle.filled_cells())}, empty cells: {puzzle.empty_count()}\n")
        lines.append(SolutionFormatter.format_grid(puzzle))
        lines.append(encode_board(puzzle))

        lines.append("\n" + "=" * 60)
        if solution is None:
            lines.append("SOLUTION: none ✗")
            lines.append("=" * 60)
            return "\n".join(lines)

        status = "✓" if not ConstraintChecker.list_inconsistencies(solution) else "✗"
        lines.append(f"SOLUTION {status}")
        lines.append("-" * 60)
        lines.append(SolutionFormatter.format_grid(solution))
        lines.append(encode_board(solution))
        lines.append("=" * 60)

        return "\n".join(lines)

    @staticmethod
    def save_solution(puzzle: Grid, solution: Optional[Grid], stats: Dict, output_path: str,
                      difficulty: Optional[Difficulty] = None):
        """
        Save solution to JSON file
        """
        report = SolutionFormatter.format_solution_json(puzzle, solution, stats, difficulty)

        with open(output_path, 'w') as f:
            json.dump(report, f, indent=2)

        print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(puzzle: Grid, solution: Optional[Grid], output_path: str,
                            difficulty: Optional[Difficulty] = None):
        """
        Save human-readable solution to text file
        """
        text = SolutionFormatter.format_solution_human_readable(puzzle, solution, difficulty)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text + "\n")

        print(f"✓ Human-readable solution saved to: {output_path}")
