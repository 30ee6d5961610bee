"""Bijection between board cells and propositional variable indices.

Cell ``(col, row)`` on an ``N x N`` board maps to ``row * N + col``.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from .exceptions import InvalidCoordinate


class VariableMapping:
    """Stateless cell <-> variable mapping for a fixed board size."""

    def __init__(self, size: int):
        if not isinstance(size, int) or size < 1:
            raise ValueError(f"Board size must be a positive integer, got {size!r}")
        self.size = size

    @property
    def count(self) -> int:
        """Number of variables (one per cell)."""
        return self.size * self.size

    def index(self, col: int, row: int) -> int:
        """Return the variable index of cell ``(col, row)``."""
        if not (0 <= col < self.size and 0 <= row < self.size):
            raise InvalidCoordinate(col, row, self.size)
        return row * self.size + col

    def cell(self, index: int) -> Tuple[int, int]:
        """Return ``(col, row)`` for a variable index."""
        if not 0 <= index < self.count:
            raise InvalidCoordinate(
                index,
                None,
                self.size,
                message=f"Variable index {index} outside [0, {self.count})",
            )
        row, col = divmod(index, self.size)
        return col, row

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Iterate over all cells in row-major order (matching index order)."""
        for row in range(self.size):
            for col in range(self.size):
                yield col, row

    def __repr__(self) -> str:
        return f"VariableMapping(size={self.size})"
