"""Tests for the append-only formula store."""

import unittest

from tests._helpers import completions

from bddqueens.constraints import ConstraintBuilder
from bddqueens.engine import DiagramEngine
from bddqueens.exceptions import EngineResourceExhausted
from bddqueens.store import ConstraintStore
from bddqueens.variables import VariableMapping


def _store(n, **engine_kwargs):
    mapping = VariableMapping(n)
    engine = DiagramEngine(**engine_kwargs)
    engine.allocate(mapping.count)
    return mapping, ConstraintStore(engine, ConstraintBuilder(engine, mapping).build())


class ConstraintStoreTests(unittest.TestCase):

    def test_restrict_true_narrows_the_formula(self):
        mapping, store = _store(5)
        self.assertEqual(store.count_solutions(), 10)
        store.restrict_true(mapping.index(0, 0))
        self.assertEqual(store.count_solutions(), len(completions(5, [(0, 0)])))
        store.restrict_true(mapping.index(1, 2))
        self.assertEqual(store.count_solutions(), len(completions(5, [(0, 0), (1, 2)])))
        self.assertEqual(store.decisions, (mapping.index(0, 0), mapping.index(1, 2)))

    def test_admits_matches_completions(self):
        mapping, store = _store(6)
        store.restrict_true(mapping.index(1, 0))
        for col, row in mapping.cells():
            with self.subTest(cell=(col, row)):
                expected = bool(completions(6, [(1, 0), (col, row)]))
                self.assertEqual(store.admits(mapping.index(col, row)), expected)

    def test_unsatisfiable_after_conflicting_decision(self):
        mapping, store = _store(4)
        self.assertFalse(store.is_unsatisfiable())
        store.restrict_true(mapping.index(0, 0))
        self.assertTrue(store.is_unsatisfiable())
        self.assertEqual(store.count_solutions(), 0)

    def test_no_retraction_api(self):
        _, store = _store(1)
        self.assertFalse(hasattr(store, "restrict_false"))
        self.assertFalse(hasattr(store, "undo"))

    def test_exhaustion_is_surfaced(self):
        with self.assertRaises(EngineResourceExhausted):
            _store(5, node_limit=20)


if __name__ == "__main__":
    unittest.main()
