"""Tests for the verdict-grid inference passes and strategies."""

import unittest

from tests._helpers import ROOT  # noqa: F401

from bddqueens.engine import DiagramEngine
from bddqueens.inference import (
    FORBIDDEN,
    INFERENCE_STRATEGIES,
    QUEEN,
    UNDETERMINED,
    BoardInference,
    empty_grid,
    get_line_builder,
)
from bddqueens.store import ConstraintStore
from bddqueens.variables import VariableMapping


def _unconstrained_store(n):
    engine = DiagramEngine()
    engine.allocate(n * n)
    return engine, ConstraintStore(engine, engine.true)


class BoardInferenceTests(unittest.TestCase):

    def _column_singleton_grid(self):
        # Columns 0 and 2 each keep one open cell, both in row 1, which keeps two.
        grid = empty_grid(3)
        grid[0][0] = FORBIDDEN
        grid[0][2] = FORBIDDEN
        grid[1][1] = FORBIDDEN
        grid[2][0] = FORBIDDEN
        grid[2][2] = FORBIDDEN
        return grid

    def test_rows_strategy_ignores_column_singletons(self):
        _, store = _unconstrained_store(3)
        grid = self._column_singleton_grid()
        BoardInference(VariableMapping(3), "rows").update(grid, store)
        self.assertEqual(grid[1][0], QUEEN)
        self.assertEqual(grid[1][2], QUEEN)
        self.assertEqual(grid[0][1], UNDETERMINED)
        self.assertEqual(grid[2][1], UNDETERMINED)

    def test_rows_and_columns_strategy_fills_column_singletons(self):
        _, store = _unconstrained_store(3)
        grid = self._column_singleton_grid()
        BoardInference(VariableMapping(3), "rows_and_columns").update(grid, store)
        self.assertEqual(grid[0][1], QUEEN)
        self.assertEqual(grid[2][1], QUEEN)

    def test_impossibility_pass_only_touches_open_cells(self):
        engine, _ = _unconstrained_store(2)
        mapping = VariableMapping(2)
        # Only x0 may be true.
        formula = engine.true
        for index in range(1, 4):
            formula = engine.and_(formula, engine.nith_var(index))
        store = ConstraintStore(engine, formula)
        grid = empty_grid(2)
        grid[1][1] = QUEEN
        marked = BoardInference(mapping).impossibility_pass(grid, store)
        self.assertEqual(marked, 2)
        self.assertEqual(grid, [[UNDETERMINED, FORBIDDEN], [FORBIDDEN, QUEEN]])

    def test_decided_cells_never_revert(self):
        _, store = _unconstrained_store(2)
        grid = [[FORBIDDEN, QUEEN], [QUEEN, FORBIDDEN]]
        BoardInference(VariableMapping(2), "rows_and_columns").update(grid, store)
        self.assertEqual(grid, [[FORBIDDEN, QUEEN], [QUEEN, FORBIDDEN]])

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            get_line_builder("diagonals")
        with self.assertRaises(ValueError):
            BoardInference(VariableMapping(2), "columns")

    def test_known_strategies(self):
        self.assertEqual(set(INFERENCE_STRATEGIES), {"rows", "rows_and_columns"})
        self.assertEqual(len(get_line_builder("rows")(4)), 4)
        self.assertEqual(len(get_line_builder("rows_and_columns")(4)), 8)


if __name__ == "__main__":
    unittest.main()
