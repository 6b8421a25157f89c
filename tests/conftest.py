# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "sudoku_solver" and "sudoku_web" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


EASY_PUZZLE = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

EASY_SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


def empty_board():
    return [[None] * 9 for _ in range(9)]


def assert_valid_solution(grid):
    """Every row, column and 3x3 box must be a permutation of 1..9."""
    rows = [list(map(int, grid[r])) for r in range(9)]
    digits = list(range(1, 10))
    for r in range(9):
        assert sorted(rows[r]) == digits, f"row {r}"
    for c in range(9):
        assert sorted(rows[r][c] for r in range(9)) == digits, f"col {c}"
    for b in range(9):
        r0, c0 = (b // 3) * 3, (b % 3) * 3
        box = [rows[r0 + i][c0 + j] for i in range(3) for j in range(3)]
        assert sorted(box) == digits, f"box {b}"


@pytest.fixture
def easy_puzzle():
    return [row[:] for row in EASY_PUZZLE]


@pytest.fixture
def easy_solution():
    return [row[:] for row in EASY_SOLUTION]
