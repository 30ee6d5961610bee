"""Exception hierarchy for the BDD N-Queens core.

Only two conditions are errors: asking for a cell outside the board and the
decision-diagram engine running out of room. Inserting a queen on a cell that
is already decided is deliberately *not* an error (it is a silent no-op).
"""

from __future__ import annotations

from typing import Optional


class QueensError(Exception):
    """Base exception for all errors raised by ``bddqueens``."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidCoordinate(QueensError, IndexError):
    """Raised when a cell or variable index lies outside the board.

    This is a programming error on the caller's side; nothing retries it.
    """

    def __init__(self, col: int, row: Optional[int], size: int, message: Optional[str] = None):
        if message is None:
            message = f"Cell ({col}, {row}) is outside a {size}x{size} board"
        super().__init__(message, {"col": col, "row": row, "size": size})
        self.col = col
        self.row = row
        self.size = size


class EngineResourceExhausted(QueensError, MemoryError):
    """Raised when the decision-diagram engine cannot grow any further.

    Fatal for the board instance: retrying with the same capacity reproduces
    the failure.
    """

    def __init__(self, message: str, node_count: Optional[int] = None, node_limit: Optional[int] = None):
        super().__init__(message, {"node_count": node_count, "node_limit": node_limit})
        self.node_count = node_count
        self.node_limit = node_limit
