"""Derivation of the three-valued verdict grid from the board formula.

Grid values (indexed ``grid[col][row]``):

- ``-1``: no valid completion places a queen here (forbidden),
- ``+1``: a queen is here, or every completion places one here (forced),
- ``0``: undetermined.

Two passes run after every change to the formula:

1. Impossibility: every cell still at 0 whose restriction to "queen here"
   makes the formula unsatisfiable becomes -1. This is a pure query.
2. Forced singletons: in every row where exactly one cell is still 0, that
   cell becomes +1 (it is the last candidate left to cover the row).

The default strategy, ``"rows"``, scans rows only. A cell can be the last
undetermined candidate in its column and still stay at 0. The
``"rows_and_columns"`` strategy additionally scans columns. Both only ever move
a cell from 0 to -1 or +1, so the grid converges monotonically.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .store import ConstraintStore
from .variables import VariableMapping

logger = logging.getLogger(__name__)

Grid = List[List[int]]

FORBIDDEN = -1
UNDETERMINED = 0
QUEEN = 1


def _row_lines(size: int) -> List[List[Tuple[int, int]]]:
    return [[(col, row) for col in range(size)] for row in range(size)]


def _column_lines(size: int) -> List[List[Tuple[int, int]]]:
    return [[(col, row) for row in range(size)] for col in range(size)]


def _rows_and_columns(size: int) -> List[List[Tuple[int, int]]]:
    return _row_lines(size) + _column_lines(size)


INFERENCE_STRATEGIES: Dict[str, Callable[[int], List[List[Tuple[int, int]]]]] = {
    "rows": _row_lines,
    "rows_and_columns": _rows_and_columns,
}


def get_line_builder(strategy: str) -> Callable[[int], List[List[Tuple[int, int]]]]:
    """Return the function enumerating the lines scanned by ``strategy``.

    Parameters
    ----------
    strategy : str
        One of ``"rows"`` or ``"rows_and_columns"``.
    """
    try:
        return INFERENCE_STRATEGIES[strategy]
    except KeyError as exc:
        raise ValueError(
            f"Unknown inference strategy: {strategy}. Available: {', '.join(INFERENCE_STRATEGIES)}"
        ) from exc


def empty_grid(size: int) -> Grid:
    return [[UNDETERMINED] * size for _ in range(size)]


class BoardInference:
    """Recompute the verdict grid from a :class:`ConstraintStore`."""

    def __init__(self, mapping: VariableMapping, strategy: str = "rows"):
        self.mapping = mapping
        self.strategy = strategy
        self._lines = get_line_builder(strategy)(mapping.size)

    def update(self, grid: Grid, store: ConstraintStore) -> Grid:
        """Apply both passes to ``grid`` in place and return it."""
        forbidden = self.impossibility_pass(grid, store)
        forced = self.singleton_pass(grid)
        logger.debug(
            "Inference (%s): %d cells forbidden, %d cells forced",
            self.strategy,
            forbidden,
            forced,
        )
        return grid

    def impossibility_pass(self, grid: Grid, store: ConstraintStore) -> int:
        """Mark every undetermined cell that admits no completion as -1."""
        marked = 0
        for col, row in self.mapping.cells():
            if grid[col][row] != UNDETERMINED:
                continue
            if not store.admits(self.mapping.index(col, row)):
                grid[col][row] = FORBIDDEN
                marked += 1
        return marked

    def singleton_pass(self, grid: Grid) -> int:
        """Mark the sole undetermined cell of each scanned line as +1."""
        marked = 0
        for line in self._lines:
            candidate: Optional[Tuple[int, int]] = None
            count = 0
            for col, row in line:
                if grid[col][row] == UNDETERMINED:
                    candidate = (col, row)
                    count += 1
            if count == 1 and candidate is not None:
                grid[candidate[0]][candidate[1]] = QUEEN
                marked += 1
        return marked
