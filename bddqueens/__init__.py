"""Incremental N-Queens inference over a binary decision diagram."""

from .board import QueensBoard, QueensLogic
from .constraints import ConstraintBuilder
from .engine import DiagramEngine
from .exceptions import EngineResourceExhausted, InvalidCoordinate, QueensError
from .inference import INFERENCE_STRATEGIES, BoardInference
from .store import ConstraintStore
from .utils import has_contradiction, is_solved, is_valid_solution
from .variables import VariableMapping

__all__ = [
    "QueensBoard",
    "QueensLogic",
    "ConstraintBuilder",
    "ConstraintStore",
    "BoardInference",
    "DiagramEngine",
    "VariableMapping",
    "INFERENCE_STRATEGIES",
    "QueensError",
    "InvalidCoordinate",
    "EngineResourceExhausted",
    "is_solved",
    "has_contradiction",
    "is_valid_solution",
]
