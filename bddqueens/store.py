"""Owner of the current board formula.

The store holds the formula produced by :class:`ConstraintBuilder` and
narrows it as queens are placed. Decisions are permanent: there is no way to
restrict a variable to false or to retract an earlier restriction.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .engine import DiagramEngine, Formula

logger = logging.getLogger(__name__)


class ConstraintStore:
    """Append-only holder of the board formula."""

    def __init__(self, engine: DiagramEngine, formula: Formula):
        self._engine = engine
        self._formula = formula
        self._decisions: List[int] = []

    @property
    def formula(self) -> Formula:
        return self._formula

    @property
    def decisions(self) -> Tuple[int, ...]:
        """Restricted variable indices, in the order they were applied."""
        return tuple(self._decisions)

    def restrict_true(self, index: int) -> None:
        """Fix variable ``index`` to true in the stored formula."""
        self._formula = self._engine.restrict(self._formula, index, True)
        self._decisions.append(index)
        logger.debug(
            "Restricted x%d := 1 (%d decisions, %d nodes)",
            index,
            len(self._decisions),
            self._engine.node_count(),
        )

    def admits(self, index: int) -> bool:
        """Return True if some completion puts a queen on variable ``index``."""
        return not self._engine.is_false(self._engine.restrict(self._formula, index, True))

    def is_unsatisfiable(self) -> bool:
        return self._engine.is_false(self._formula)

    def count_solutions(self) -> int:
        """Number of complete placements consistent with the formula and decisions."""
        constrained = self._formula
        for index in self._decisions:
            constrained = self._engine.and_(constrained, self._engine.ith_var(index))
        return self._engine.count_models(constrained)
