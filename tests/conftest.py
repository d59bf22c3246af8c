# tests/conftest.py
import random
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "Sudoku" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from Sudoku.grid import Grid  # noqa: E402


CANONICAL = [
    1, 2, 3, 4, 5, 6, 7, 8, 9,
    4, 5, 6, 7, 8, 9, 1, 2, 3,
    7, 8, 9, 1, 2, 3, 4, 5, 6,
    2, 3, 4, 5, 6, 7, 8, 9, 1,
    5, 6, 7, 8, 9, 1, 2, 3, 4,
    8, 9, 1, 2, 3, 4, 5, 6, 7,
    3, 4, 5, 6, 7, 8, 9, 1, 2,
    6, 7, 8, 9, 1, 2, 3, 4, 5,
    9, 1, 2, 3, 4, 5, 6, 7, 8,
]


@pytest.fixture
def canonical():
    return Grid.from_sequence(CANONICAL)


@pytest.fixture
def rng():
    return random.Random(20240611)


@pytest.fixture
def unsolvable():
    # Consistent, but r0c8 can only be 9 and column 8 already holds one
    values = [0] * 81
    values[0:8] = [1, 2, 3, 4, 5, 6, 7, 8]
    values[17] = 9
    return Grid.from_sequence(values)
