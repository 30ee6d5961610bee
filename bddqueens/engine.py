"""Capacity-bounded adapter over the ``dd`` decision-diagram library.

The N-Queens core never touches ``dd`` directly. It talks to
:class:`DiagramEngine`, which exposes exactly the capabilities the constraint
code relies on:

- creation with a node limit and a restriction-cache size,
- one-shot allocation of a fixed number of variables,
- the Boolean constants,
- positive and negative literals for a variable index,
- binary AND / OR,
- restriction of a formula by fixing one variable to a constant,
- constant tests (is-false, is-true).

Variables are declared in index order and dynamic reordering is disabled, so
the diagram variable order is ``x0 < x1 < ... < x{n-1}``.

Capacity
--------
``dd.autoref`` grows without bound on its own. After every combinator the
adapter compares the size of the shared node table with ``node_limit``; when
the limit is exceeded it collects garbage once and, if the table is still too
large, raises :class:`~bddqueens.exceptions.EngineResourceExhausted`. Nothing
is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from cachetools import LRUCache
from dd import autoref as _bdd

from .exceptions import EngineResourceExhausted, InvalidCoordinate

logger = logging.getLogger(__name__)

# Node table and cache sizes used by the original board factory.
DEFAULT_NODE_LIMIT: int = 2_000_000
DEFAULT_CACHE_SIZE: int = 200_000

Formula = Any


def _var_str(index: int) -> str:
    """Return the engine variable name for variable ``index``."""
    return f"x{index}"


class DiagramEngine:
    """Thin, capacity-checked facade over ``dd.autoref.BDD``.

    Parameters
    ----------
    node_limit : int, default 2_000_000
        Maximum number of nodes the shared table may hold.
    cache_size : int, default 200_000
        Maximum number of memoised restriction results. ``0`` disables the
        cache.
    """

    def __init__(self, node_limit: int = DEFAULT_NODE_LIMIT, cache_size: int = DEFAULT_CACHE_SIZE):
        if node_limit < 1:
            raise ValueError(f"node_limit must be >= 1, got {node_limit}")
        if cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {cache_size}")
        self.node_limit = node_limit
        self.cache_size = cache_size
        self._bdd = _bdd.BDD()
        self._bdd.configure(reordering=False)
        self._var_count = 0
        self._allocated = False
        # (node, index, value) -> (operand, result); holding the operand keeps its node id valid.
        self._restrict_cache: Optional[LRUCache] = LRUCache(maxsize=cache_size) if cache_size else None
        self.cache_hits = 0
        self.cache_misses = 0

    # -- allocation ---------------------------------------------------------

    def allocate(self, count: int) -> None:
        """Declare ``count`` variables. May be called only once per engine."""
        if self._allocated:
            raise RuntimeError("Variables already allocated for this engine")
        if count < 0:
            raise ValueError(f"Variable count must be >= 0, got {count}")
        names = [_var_str(i) for i in range(count)]
        if names:
            self._bdd.declare(*names)
        self._var_count = count
        self._allocated = True
        logger.debug("Allocated %d variables (node_limit=%d, cache_size=%d)", count, self.node_limit, self.cache_size)

    @property
    def var_count(self) -> int:
        return self._var_count

    # -- constants and literals ---------------------------------------------

    @property
    def true(self) -> Formula:
        return self._bdd.true

    @property
    def false(self) -> Formula:
        return self._bdd.false

    def ith_var(self, index: int) -> Formula:
        """Positive literal of variable ``index``."""
        return self._checked(self._bdd.var, self._name(index))

    def nith_var(self, index: int) -> Formula:
        """Negative literal of variable ``index``."""
        return self._checked(lambda name: ~self._bdd.var(name), self._name(index))

    # -- combinators --------------------------------------------------------

    def and_(self, u: Formula, v: Formula) -> Formula:
        return self._checked(lambda a, b: a & b, u, v)

    def or_(self, u: Formula, v: Formula) -> Formula:
        return self._checked(lambda a, b: a | b, u, v)

    def restrict(self, u: Formula, index: int, value: bool = True) -> Formula:
        """Return ``u`` with variable ``index`` fixed to ``value``."""
        name = self._name(index)
        key = (u.node, index, bool(value))
        cached = self._restrict_cache.get(key) if self._restrict_cache is not None else None
        if cached is not None and cached[0] == u:
            self.cache_hits += 1
            return cached[1]
        self.cache_misses += 1
        result = self._checked(self._bdd.let, {name: bool(value)}, u)
        if self._restrict_cache is not None:
            self._restrict_cache[key] = (u, result)
        return result

    # -- queries ------------------------------------------------------------

    def is_false(self, u: Formula) -> bool:
        return u == self._bdd.false

    def is_true(self, u: Formula) -> bool:
        return u == self._bdd.true

    def node_count(self) -> int:
        """Number of nodes currently held by the shared table."""
        return len(self._bdd)

    def count_models(self, u: Formula) -> int:
        """Count satisfying assignments of ``u`` over all allocated variables."""
        if self._var_count == 0:
            return 1 if self.is_true(u) else 0
        return int(self._bdd.count(u, nvars=self._var_count))

    def clear_cache(self) -> None:
        if self._restrict_cache is not None:
            self._restrict_cache.clear()

    # -- internals ----------------------------------------------------------

    def _name(self, index: int) -> str:
        if not 0 <= index < self._var_count:
            raise InvalidCoordinate(
                index,
                None,
                self._var_count,
                message=f"Variable index {index} outside [0, {self._var_count})",
            )
        return _var_str(index)

    def _checked(self, operation: Callable[..., Formula], *args: Any) -> Formula:
        try:
            result = operation(*args)
        except (MemoryError, RecursionError) as exc:
            raise EngineResourceExhausted(
                f"Decision-diagram engine failed while growing: {exc!r}",
                node_count=None,
                node_limit=self.node_limit,
            ) from exc
        if len(self._bdd) > self.node_limit:
            self.clear_cache()
            self._bdd.collect_garbage()
            nodes = len(self._bdd)
            if nodes > self.node_limit:
                logger.error("Node table exhausted: %d nodes > limit %d", nodes, self.node_limit)
                raise EngineResourceExhausted(
                    f"Node table holds {nodes} nodes, above the limit of {self.node_limit}",
                    node_count=nodes,
                    node_limit=self.node_limit,
                )
        return result

    def stats(self) -> Dict[str, int]:
        """Return a small snapshot of engine counters."""
        return {
            "nodes": self.node_count(),
            "node_limit": self.node_limit,
            "cache_entries": len(self._restrict_cache) if self._restrict_cache is not None else 0,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
        }
