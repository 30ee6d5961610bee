"""Construction of the global N-Queens formula.

The formula is built once per board and is the conjunction of two rule
families:

1. Row coverage: every row holds at least one queen,
   ``OR_c v(c, r)`` for each row ``r``.
2. Local non-attack consistency: for every cell ``(c, r)``,
   ``NOT v(c, r) OR SafeIfPresent(c, r)``, where ``SafeIfPresent`` forbids a
   second queen in the same column, the same row and both diagonals.

Together they describe exactly the complete, valid placements: N queens with
no two sharing a row, column or diagonal.

Index roles
-----------
The loop variable ``i`` runs over ``0..N-1`` and is reused both as a row probe
(same column, descending diagonal) and as a column probe (same row, ascending
diagonal). Diagonal cells are only added when their derived coordinate lies
strictly inside ``(0, N)``; every pair excluded that way is still covered by
the clause of the partner cell.

Complexity
----------
O(N^2) clause constructions, O(N^3) literal conjunctions. The size of the
resulting diagram is the engine's concern and can grow quickly with N.
"""

from __future__ import annotations

import logging
from time import perf_counter

from .engine import DiagramEngine, Formula
from .variables import VariableMapping

logger = logging.getLogger(__name__)


class ConstraintBuilder:
    """Build the "valid N-Queens placement" formula for one board."""

    def __init__(self, engine: DiagramEngine, mapping: VariableMapping):
        if engine.var_count != mapping.count:
            raise ValueError(
                f"Engine holds {engine.var_count} variables, board needs {mapping.count}"
            )
        self.engine = engine
        self.mapping = mapping
        self.clause_count = 0
        self.build_time = 0.0

    def build(self) -> Formula:
        """Return the conjunction of all row-coverage and per-cell clauses."""
        start = perf_counter()
        self.clause_count = 0
        formula = self.engine.true

        for row in range(self.mapping.size):
            formula = self.engine.and_(formula, self.row_coverage(row))
            self.clause_count += 1

        for row in range(self.mapping.size):
            for col in range(self.mapping.size):
                formula = self.engine.and_(formula, self.cell_clause(col, row))
                self.clause_count += 1

        self.build_time = perf_counter() - start
        logger.info(
            "Built formula for N=%d: %d clauses, %d nodes, %.4fs",
            self.mapping.size,
            self.clause_count,
            self.engine.node_count(),
            self.build_time,
        )
        return formula

    def row_coverage(self, row: int) -> Formula:
        """At least one queen in ``row``."""
        clause = self.engine.false
        for col in range(self.mapping.size):
            clause = self.engine.or_(clause, self.engine.ith_var(self.mapping.index(col, row)))
        return clause

    def cell_clause(self, col: int, row: int) -> Formula:
        """A queen on ``(col, row)`` implies no attacking queen anywhere."""
        clause = self.engine.or_(self.engine.false, self.engine.nith_var(self.mapping.index(col, row)))
        return self.engine.or_(clause, self.safe_if_present(col, row))

    def safe_if_present(self, col: int, row: int) -> Formula:
        """Conjunction of negative literals for every cell attacking ``(col, row)``."""
        size = self.mapping.size
        index = self.mapping.index
        safe = self.engine.true
        for i in range(size):
            if i != row:
                # same column
                safe = self.engine.and_(safe, self.engine.nith_var(index(col, i)))
                if 0 < row + col - i < size:
                    # descending diagonal
                    safe = self.engine.and_(safe, self.engine.nith_var(index(row + col - i, i)))
            if i != col:
                # same row
                safe = self.engine.and_(safe, self.engine.nith_var(index(i, row)))
                if 0 < row - col + i < size:
                    # ascending diagonal
                    safe = self.engine.and_(safe, self.engine.nith_var(index(i, row - col + i)))
        return safe
