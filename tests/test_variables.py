"""Tests for the cell <-> variable mapping."""

import unittest

from tests._helpers import ROOT  # noqa: F401

from bddqueens.exceptions import InvalidCoordinate
from bddqueens.variables import VariableMapping


class VariableMappingTests(unittest.TestCase):

    def test_index_is_row_major(self):
        mapping = VariableMapping(4)
        self.assertEqual(mapping.index(0, 0), 0)
        self.assertEqual(mapping.index(3, 0), 3)
        self.assertEqual(mapping.index(0, 1), 4)
        self.assertEqual(mapping.index(2, 3), 14)

    def test_index_and_cell_are_inverse(self):
        mapping = VariableMapping(5)
        seen = set()
        for col, row in mapping.cells():
            index = mapping.index(col, row)
            self.assertEqual(mapping.cell(index), (col, row))
            seen.add(index)
        self.assertEqual(seen, set(range(mapping.count)))
        self.assertEqual(mapping.count, 25)

    def test_cells_follow_index_order(self):
        mapping = VariableMapping(3)
        self.assertEqual([mapping.index(c, r) for c, r in mapping.cells()], list(range(9)))

    def test_out_of_range_coordinates(self):
        mapping = VariableMapping(4)
        for col, row in [(-1, 0), (0, -1), (4, 0), (0, 4), (7, 7)]:
            with self.assertRaises(InvalidCoordinate) as ctx:
                mapping.index(col, row)
            self.assertEqual((ctx.exception.col, ctx.exception.row, ctx.exception.size), (col, row, 4))

    def test_invalid_coordinate_is_an_index_error(self):
        mapping = VariableMapping(2)
        with self.assertRaises(IndexError):
            mapping.index(2, 0)
        with self.assertRaises(InvalidCoordinate):
            mapping.cell(4)

    def test_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            VariableMapping(0)


if __name__ == "__main__":
    unittest.main()
