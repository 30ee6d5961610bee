"""Tests for the capacity-bounded decision-diagram adapter."""

import unittest

from tests._helpers import ROOT  # noqa: F401

from bddqueens.engine import DiagramEngine
from bddqueens.exceptions import EngineResourceExhausted, InvalidCoordinate


class DiagramEngineTests(unittest.TestCase):

    def setUp(self):
        self.engine = DiagramEngine(node_limit=10_000, cache_size=16)
        self.engine.allocate(3)

    def test_constants(self):
        self.assertTrue(self.engine.is_true(self.engine.true))
        self.assertTrue(self.engine.is_false(self.engine.false))
        self.assertFalse(self.engine.is_false(self.engine.true))

    def test_literals_and_combinators(self):
        x0 = self.engine.ith_var(0)
        not_x0 = self.engine.nith_var(0)
        self.assertTrue(self.engine.is_false(self.engine.and_(x0, not_x0)))
        self.assertTrue(self.engine.is_true(self.engine.or_(x0, not_x0)))
        self.assertEqual(self.engine.count_models(x0), 4)
        both = self.engine.and_(x0, self.engine.ith_var(1))
        self.assertEqual(self.engine.count_models(both), 2)

    def test_restrict(self):
        formula = self.engine.and_(self.engine.ith_var(0), self.engine.nith_var(1))
        self.assertTrue(self.engine.is_false(self.engine.restrict(formula, 1, True)))
        narrowed = self.engine.restrict(formula, 0, True)
        self.assertEqual(narrowed, self.engine.nith_var(1))
        self.assertTrue(self.engine.is_false(self.engine.restrict(formula, 0, False)))

    def test_restrict_cache_hits(self):
        formula = self.engine.or_(self.engine.ith_var(0), self.engine.ith_var(2))
        first = self.engine.restrict(formula, 0, False)
        second = self.engine.restrict(formula, 0, False)
        self.assertEqual(first, second)
        self.assertEqual(self.engine.cache_hits, 1)
        self.assertEqual(self.engine.stats()["cache_entries"], 1)

    def test_cache_is_bounded(self):
        engine = DiagramEngine(cache_size=2)
        engine.allocate(4)
        formula = engine.and_(engine.ith_var(0), engine.ith_var(1))
        for index in range(4):
            engine.restrict(formula, index, True)
        self.assertEqual(engine.stats()["cache_entries"], 2)

    def test_cache_evicts_least_recently_used(self):
        engine = DiagramEngine(cache_size=2)
        engine.allocate(3)
        formula = engine.or_(engine.ith_var(0), engine.ith_var(1))
        engine.restrict(formula, 0, True)
        engine.restrict(formula, 1, True)
        engine.restrict(formula, 0, True)
        engine.restrict(formula, 2, True)
        self.assertEqual(engine.cache_hits, 1)
        engine.restrict(formula, 0, True)
        self.assertEqual(engine.cache_hits, 2)
        engine.restrict(formula, 1, True)
        self.assertEqual(engine.cache_hits, 2)
        self.assertEqual(engine.cache_misses, 4)

    def test_cache_disabled(self):
        engine = DiagramEngine(cache_size=0)
        engine.allocate(2)
        formula = engine.and_(engine.ith_var(0), engine.ith_var(1))
        first = engine.restrict(formula, 0, True)
        second = engine.restrict(formula, 0, True)
        self.assertEqual(first, second)
        self.assertEqual(engine.cache_hits, 0)
        self.assertEqual(engine.cache_misses, 2)
        self.assertEqual(engine.stats()["cache_entries"], 0)

    def test_variable_index_out_of_range(self):
        with self.assertRaises(InvalidCoordinate):
            self.engine.ith_var(3)
        with self.assertRaises(InvalidCoordinate):
            self.engine.restrict(self.engine.true, -1)

    def test_allocate_only_once(self):
        with self.assertRaises(RuntimeError):
            self.engine.allocate(2)

    def test_node_limit_exhaustion(self):
        engine = DiagramEngine(node_limit=4)
        engine.allocate(8)
        with self.assertRaises(EngineResourceExhausted) as ctx:
            formula = engine.true
            for index in range(0, 8, 2):
                clause = engine.or_(engine.ith_var(index), engine.ith_var(index + 1))
                formula = engine.and_(formula, clause)
        self.assertEqual(ctx.exception.node_limit, 4)
        self.assertIsInstance(ctx.exception, MemoryError)

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            DiagramEngine(node_limit=0)
        with self.assertRaises(ValueError):
            DiagramEngine(cache_size=-1)


if __name__ == "__main__":
    unittest.main()
