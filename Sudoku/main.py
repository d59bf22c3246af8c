#!/usr/bin/env python3
"""
Sudoku - Main Entry Point

Usage:
    python -m Sudoku.main generate -d medium -c 3
    python -m Sudoku.main generate -c 0            # until Ctrl+C
    python -m Sudoku.main solve -p 530070000600195000098000060800060003400803001700020006060000280000419005000080079
    python -m Sudoku.main play -d hard
"""

import argparse
import random
import sys
from pathlib import Path
from typing import List, Optional

from .constraints import ConstraintChecker
from .diagnostics import GridDiagnostics
from .generator import PuzzleGenerator
from .grid import Difficulty, Grid, GridError, decode_board
from .output import SolutionFormatter
from .solver import BACKENDS, BacktrackingSolver

# ============================================================================
# CONFIGURATION
# ============================================================================
DEFAULT_DIFFICULTY = Difficulty.EASY
# Hardest tier produced by `generate` and `play`

DEFAULT_COUNT = 1
# Puzzles produced per `generate` run; 0 keeps going until Ctrl+C

PARALLEL = False
PARALLEL_BACKEND = "thread"
MAX_WORKERS = None
# Fork-join over the first open cell (solver) and over alternate values
# (pruner). "process" sidesteps the GIL at the cost of pickling each branch.

SHUFFLE_ROUNDS = 0
# Random board transformations applied to each freshly generated solution

OUTPUT_DIR = None
# Directory for JSON/text reports; None prints only
# ============================================================================


def board_arg(text: str) -> Grid:
    try:
        return decode_board(text)
    except GridError as e:
        raise argparse.ArgumentTypeError(str(e))


def difficulty_arg(text: str) -> Difficulty:
    try:
        return Difficulty.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sudoku",
        description="Generate and solve 9x9 Sudoku puzzles",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    def add_search_options(sub):
        sub.add_argument("--seed", type=int, default=None, help="seed for reproducible runs")
        sub.add_argument("--parallel", action="store_true", default=PARALLEL,
                         help="branch the search over a worker pool")
        sub.add_argument("--backend", choices=BACKENDS, default=PARALLEL_BACKEND,
                         help="worker pool used with --parallel")
        sub.add_argument("--workers", type=int, default=MAX_WORKERS, help="worker pool size")
        sub.add_argument("--output", type=Path, default=OUTPUT_DIR,
                         help="directory for JSON and text reports")
        sub.add_argument("-v", "--verbose", action="store_true", help="print search progress")

    generate = commands.add_parser("generate", help="generate puzzles")
    generate.add_argument("-t", "--template", type=board_arg, default=None,
                          help="81-digit board to complete before pruning (0 = empty)")
    generate.add_argument("-d", "--difficulty", type=difficulty_arg, default=DEFAULT_DIFFICULTY,
                          help="hardest tier to produce: easy, medium or hard")
    generate.add_argument("-c", "--count", type=int, default=DEFAULT_COUNT,
                          help="number of puzzles, 0 for no limit")
    generate.add_argument("--shuffle-rounds", type=int, default=SHUFFLE_ROUNDS,
                          help="random transformations applied to each solution")
    add_search_options(generate)

    solve = commands.add_parser("solve", help="solve a puzzle")
    solve.add_argument("-p", "--puzzle", type=board_arg, required=True,
                       help="81-digit board, 0 for empty cells")
    add_search_options(solve)

    play = commands.add_parser("play", help="print a puzzle to solve on paper")
    play.add_argument("-p", "--puzzle", type=board_arg, default=None,
                      help="81-digit board to play instead of a generated one")
    play.add_argument("-d", "--difficulty", type=difficulty_arg, default=DEFAULT_DIFFICULTY,
                      help="difficulty of the generated puzzle")
    play.add_argument("--seed", type=int, default=None, help="seed for reproducible runs")

    return parser


def _banner(title: str):
    print(f"\n{'='*60}")
    print(title)
    print(f"{'='*60}")


def _show(title: str, grid: Grid):
    print(f"\n{title}")
    print(SolutionFormatter.format_grid(grid))
    print(SolutionFormatter.format_digits(grid))


# ============================================================================
# Commands
# ============================================================================
def run_generate(args) -> int:
    if args.count < 0:
        print("Error: --count must be 0 or positive", file=sys.stderr)
        return 2

    generator = PuzzleGenerator(
        rng=random.Random(args.seed),
        verbose=args.verbose,
        parallel=args.parallel,
        backend=args.backend,
        max_workers=args.workers,
        shuffle_rounds=args.shuffle_rounds,
    )
    if args.output is not None:
        args.output.mkdir(parents=True, exist_ok=True)

    produced = 0
    try:
        for result in generator.generate_many(args.count, args.difficulty, args.template):
            produced += 1
            _banner(f"Puzzle {produced} ({result.difficulty.value}, {result.removed} cells removed)")
            for tier, puzzle in result.puzzles.items():
                _show(f"{tier.value.upper()} ({puzzle.empty_count()} empty)", puzzle)
            _show("SOLUTION", result.solution)

            if args.output is not None:
                stats = {'removed': result.removed, 'target': result.difficulty.holes}
                stem = args.output / f"puzzle_{produced:03d}"
                SolutionFormatter.save_solution(result.puzzle, result.solution, stats,
                                                f"{stem}.json", result.difficulty)
                SolutionFormatter.save_human_readable(result.puzzle, result.solution,
                                                      f"{stem}.txt", result.difficulty)

    except KeyboardInterrupt:
        _banner("⚠ Generation interrupted by user (Ctrl+C)")
        print(f"\nPuzzles generated: {produced}")
        return 0

    except GridError as e:
        _banner("FAILED: Could not use template ✗")
        print(f"{e}")
        return 1

    return 0


def run_solve(args) -> int:
    puzzle = args.puzzle
    solver = BacktrackingSolver(
        puzzle,
        rng=random.Random(args.seed),
        verbose=args.verbose,
        parallel=args.parallel,
        backend=args.backend,
        max_workers=args.workers,
    )
    _show(f"Solving puzzle ({puzzle.empty_count()} empty cells)", puzzle)

    try:
        solution = solver.solve()
    except KeyboardInterrupt:
        _banner("⚠ Solving interrupted by user (Ctrl+C)")
        solver.print_stats()
        return 1

    if solution is None:
        _banner("FAILED: Could not solve puzzle ✗")
        conflicts = ConstraintChecker.list_inconsistencies(puzzle)
        if conflicts:
            print(f"Fixed cells conflict at: {conflicts}")
        else:
            print("The puzzle has no completion")
        return 1

    _banner("SUCCESS! Puzzle solved ✓")
    _show("SOLUTION", solution)

    if args.output is not None:
        args.output.mkdir(parents=True, exist_ok=True)
        SolutionFormatter.save_solution(puzzle, solution, solver.stats,
                                        str(args.output / "solution.json"))
        SolutionFormatter.save_human_readable(puzzle, solution,
                                              str(args.output / "solution.txt"))

    if args.verbose:
        GridDiagnostics.print_summary(puzzle, solver)

    return 0


def run_play(args) -> int:
    if args.puzzle is not None:
        puzzle = args.puzzle
        conflicts = ConstraintChecker.list_inconsistencies(puzzle)
        if conflicts:
            print(f"Error: fixed cells conflict at: {conflicts}", file=sys.stderr)
            return 1
        title = f"PUZZLE ({puzzle.empty_count()} empty)"
    else:
        try:
            puzzle = PuzzleGenerator(rng=random.Random(args.seed)).generate(args.difficulty).puzzle
        except KeyboardInterrupt:
            _banner("⚠ Generation interrupted by user (Ctrl+C)")
            return 1
        title = f"{args.difficulty.value.upper()} PUZZLE ({puzzle.empty_count()} empty)"

    _show(title, puzzle)
    print(f"\nCheck your answer with: sudoku solve -p {SolutionFormatter.format_digits(puzzle)}")
    return 0


COMMANDS = {
    'generate': run_generate,
    'solve': run_solve,
    'play': run_play,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
