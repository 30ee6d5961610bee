"""Board-facing entry point: incremental N-Queens with a BDD.

Contract (public API)
---------------------
- ``initialize_board(size)``: allocate ``size**2`` variables, build the
  formula, reset the grid to all zeros (or run inference right away when
  ``infer_on_init`` is set). ``size`` must be an int >= 1.
- ``get_board()``: copy of the verdict grid, indexed ``[col][row]``, with
  values in {-1, 0, 1}. Columns are counted left to right and rows top to
  bottom, both from 0.
- ``insert_queen(col, row)``: place a queen. A no-op when the cell is already
  decided (-1 or 1); otherwise the cell becomes 1, the formula is restricted
  and the grid is recomputed.

Placing a queen that no valid completion can contain (for instance a corner
of the 4x4 board, or any cell when N is 2 or 3) does not raise: every other
undetermined cell becomes -1 and ``has_contradiction()`` reports the row left
without candidates.

The instance is not thread-safe. Each initialization creates a fresh engine,
so capacity exhaustion only ever poisons the current board. Once
``EngineResourceExhausted`` has escaped, every call other than
``initialize_board`` raises ``RuntimeError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from time import perf_counter
from typing import List, Optional, Tuple

from .constraints import ConstraintBuilder
from .engine import DEFAULT_CACHE_SIZE, DEFAULT_NODE_LIMIT, DiagramEngine
from .exceptions import EngineResourceExhausted
from .inference import FORBIDDEN, QUEEN, BoardInference, Grid, empty_grid, get_line_builder
from .store import ConstraintStore
from .utils import has_contradiction, is_solved
from .variables import VariableMapping

logger = logging.getLogger(__name__)


class QueensLogic(ABC):
    """Interface consumed by board front-ends."""

    @abstractmethod
    def initialize_board(self, size: int) -> None:
        """Set up an empty ``size x size`` board."""

    @abstractmethod
    def get_board(self) -> Grid:
        """Return the verdict grid indexed ``[col][row]``."""

    @abstractmethod
    def insert_queen(self, col: int, row: int) -> None:
        """Place a queen and update the verdicts of every other cell."""


class QueensBoard(QueensLogic):
    """:class:`QueensLogic` backed by a binary decision diagram.

    Parameters
    ----------
    node_limit : int, default 2_000_000
        Node-table capacity handed to each :class:`DiagramEngine`.
    cache_size : int, default 200_000
        Restriction-cache capacity handed to each :class:`DiagramEngine`.
    strategy : str, default "rows"
        Forced-singleton strategy, see :mod:`bddqueens.inference`.
    infer_on_init : bool, default False
        Run both inference passes right after the build. By default the
        initial grid is all zeros and verdicts only appear once the first
        queen is placed.
    """

    def __init__(
        self,
        node_limit: int = DEFAULT_NODE_LIMIT,
        cache_size: int = DEFAULT_CACHE_SIZE,
        strategy: str = "rows",
        infer_on_init: bool = False,
    ):
        get_line_builder(strategy)
        self.node_limit = node_limit
        self.cache_size = cache_size
        self.strategy = strategy
        self.infer_on_init = infer_on_init
        self._size: Optional[int] = None
        self._grid: Grid = []
        self._mapping: Optional[VariableMapping] = None
        self._engine: Optional[DiagramEngine] = None
        self._store: Optional[ConstraintStore] = None
        self._inference: Optional[BoardInference] = None
        self._failure: Optional[EngineResourceExhausted] = None
        self.build_time = 0.0

    # -- QueensLogic --------------------------------------------------------

    def initialize_board(self, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"Board size must be an integer >= 1, got {size!r}")

        self._failure = None
        mapping = VariableMapping(size)
        engine = DiagramEngine(node_limit=self.node_limit, cache_size=self.cache_size)
        engine.allocate(mapping.count)

        builder = ConstraintBuilder(engine, mapping)
        try:
            formula = builder.build()
        except EngineResourceExhausted as exc:
            self._failure = exc
            raise

        self._size = size
        self._mapping = mapping
        self._engine = engine
        self._store = ConstraintStore(engine, formula)
        self._inference = BoardInference(mapping, self.strategy)
        self._grid = empty_grid(size)
        self.build_time = builder.build_time

        # All zeros by default so a first queen anywhere is accepted (N=1 and the N=4 corner).
        if self.infer_on_init:
            self._update(self._store, self._inference)
            if has_contradiction(self._grid):
                logger.warning("N=%d admits no valid placement; every cell is forbidden", size)

    def get_board(self) -> Grid:
        self._require_initialized()
        return [list(column) for column in self._grid]

    def insert_queen(self, col: int, row: int) -> None:
        mapping, store, inference = self._require_initialized()
        index = mapping.index(col, row)
        if self._grid[col][row] in (FORBIDDEN, QUEEN):
            logger.debug("Cell (%d, %d) already decided as %d; ignoring", col, row, self._grid[col][row])
            return

        start = perf_counter()
        try:
            store.restrict_true(index)
        except EngineResourceExhausted as exc:
            self._failure = exc
            raise
        self._grid[col][row] = QUEEN
        self._update(store, inference)
        logger.debug("Queen inserted at (%d, %d) in %.4fs", col, row, perf_counter() - start)
        if has_contradiction(self._grid):
            logger.warning("Board has a row without candidates after (%d, %d)", col, row)

    # -- extras -------------------------------------------------------------

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def decisions(self) -> List[Tuple[int, int]]:
        """Cells chosen through :meth:`insert_queen`, in order."""
        mapping, store, _ = self._require_initialized()
        return [mapping.cell(index) for index in store.decisions]

    def count_solutions(self) -> int:
        _, store, _ = self._require_initialized()
        return store.count_solutions()

    def node_count(self) -> int:
        self._require_initialized()
        assert self._engine is not None
        return self._engine.node_count()

    def is_solved(self) -> bool:
        self._require_initialized()
        return is_solved(self._grid)

    def has_contradiction(self) -> bool:
        self._require_initialized()
        return has_contradiction(self._grid)

    def _update(self, store: ConstraintStore, inference: BoardInference) -> None:
        try:
            inference.update(self._grid, store)
        except EngineResourceExhausted as exc:
            self._failure = exc
            raise

    def _require_initialized(self) -> Tuple[VariableMapping, ConstraintStore, BoardInference]:
        if self._failure is not None:
            raise RuntimeError("Board unusable after engine exhaustion; call initialize_board() again") from self._failure
        if self._mapping is None or self._store is None or self._inference is None:
            raise RuntimeError("Board not initialized; call initialize_board() first")
        return self._mapping, self._store, self._inference
