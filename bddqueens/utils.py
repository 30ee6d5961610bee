"""Utility helpers for verdict grids and plain queen placements.

Two representations appear throughout the project:

- a verdict grid ``grid[col][row]`` with values in {-1, 0, 1}, as produced by
  :class:`bddqueens.board.QueensBoard`;
- a placement ``board[col] = row``, one queen per column, used to validate
  finished boards independently of the decision diagram.
"""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .inference import FORBIDDEN, QUEEN, UNDETERMINED


def grid_to_board(grid: Sequence[Sequence[int]]) -> Optional[List[int]]:
    """Return ``board[col] = row`` for a grid with exactly one queen per column.

    Returns None when some column holds no queen or more than one.
    """
    board: List[int] = []
    for column in grid:
        rows = [row for row, value in enumerate(column) if value == QUEEN]
        if len(rows) != 1:
            return None
        board.append(rows[0])
    return board


def conflicts(board: Sequence[int]) -> int:
    """Compute the number of conflicting queen pairs in O(N).

    Counts pairs sharing a row or a diagonal; columns are unique by
    representation.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    def _pairs(counter: Counter[int]) -> int:
        return sum(count * (count - 1) // 2 for count in counter.values() if count > 1)

    return _pairs(row_count) + _pairs(diag1) + _pairs(diag2)


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if ``board`` is a complete N-Queens solution.

    Contract
    - Input: sequence of length N where board[col] = row (0-based indices)
    - Valid if: all 0 <= row < N and no pairs of queens attack each other
    """
    n = len(board)
    if n == 0:
        return False
    for row in board:
        if not isinstance(row, int) or row < 0 or row >= n:
            return False
    return conflicts(board) == 0


def undecided_cells(grid: Sequence[Sequence[int]]) -> List[Tuple[int, int]]:
    """Return ``(col, row)`` of every cell still at 0, in row-major order."""
    size = len(grid)
    return [(col, row) for row in range(size) for col in range(size) if grid[col][row] == UNDETERMINED]


def is_solved(grid: Sequence[Sequence[int]]) -> bool:
    """True when no cell is undetermined and every row holds exactly one queen."""
    size = len(grid)
    if size == 0 or undecided_cells(grid):
        return False
    return all(sum(1 for col in range(size) if grid[col][row] == QUEEN) == 1 for row in range(size))


def has_contradiction(grid: Sequence[Sequence[int]]) -> bool:
    """True when some row has every cell forbidden (no candidate left)."""
    size = len(grid)
    return any(all(grid[col][row] == FORBIDDEN for col in range(size)) for row in range(size))


def render_grid(grid: Sequence[Sequence[int]]) -> str:
    """Plain-text dump, one line per row: ``Q`` queen, ``x`` forbidden, ``.`` open."""
    symbols = {QUEEN: "Q", FORBIDDEN: "x", UNDETERMINED: "."}
    size = len(grid)
    return "\n".join(" ".join(symbols[grid[col][row]] for col in range(size)) for row in range(size))
