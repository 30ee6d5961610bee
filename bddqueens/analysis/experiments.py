"""Experiment runners for the BDD N-Queens board (sequential and parallel).

Two kinds of measurement are taken for every board size N:

- Build: construct the formula once and record time, diagram size, clause
  count and the number of complete placements it admits.
- Random play: starting from an empty board, repeatedly insert a queen on a
  uniformly chosen undetermined cell until no undetermined cell remains.
  Every forced (+1) cell the user did not choose, and every forbidden (-1)
  cell, is credited to inference.

Verdicts only appear once the first queen is placed (unless boards are built
with ``infer_on_init``), so the first random choice may already rule out
every completion; such plays end with a row of forbidden cells and are
reported as contradictions. From the second decision on the impossibility
pass is exact and every later choice keeps the board solvable.

Outputs are structured dictionaries suitable for CSV export and plotting.
"""
from __future__ import annotations

import logging
import random
from concurrent.futures import ProcessPoolExecutor
from time import perf_counter
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    BuildRecord,
    ExperimentResults,
    PlayRecord,
    PlayResultEntry,
    ProgressPrinter,
    compute_grouped_statistics,
)
from bddqueens.board import QueensBoard
from bddqueens.constraints import ConstraintBuilder
from bddqueens.engine import DiagramEngine
from bddqueens.inference import FORBIDDEN, QUEEN
from bddqueens.utils import grid_to_board, is_valid_solution, undecided_cells
from bddqueens.variables import VariableMapping

logger = logging.getLogger(__name__)


def run_build(N: int, node_limit: Optional[int] = None, cache_size: Optional[int] = None) -> BuildRecord:
    """Build the formula for size ``N`` and measure it."""
    mapping = VariableMapping(N)
    engine = DiagramEngine(
        node_limit=node_limit if node_limit is not None else settings.NODE_LIMIT,
        cache_size=cache_size if cache_size is not None else settings.CACHE_SIZE,
    )
    engine.allocate(mapping.count)
    builder = ConstraintBuilder(engine, mapping)
    formula = builder.build()
    return {
        "n": N,
        "time": builder.build_time,
        "nodes": engine.node_count(),
        "clauses": builder.clause_count,
        "solutions": engine.count_models(formula),
    }


def run_single_play(
    N: int,
    strategy: str = "rows",
    seed: Optional[int] = None,
    node_limit: Optional[int] = None,
    cache_size: Optional[int] = None,
    infer_on_init: Optional[bool] = None,
) -> PlayRecord:
    """Play one random game on an ``N x N`` board.

    ``None`` arguments fall back to the values in
    :mod:`bddqueens.analysis.settings`.

    Returns
    -------
    PlayRecord
        Outcome flags, number of user decisions, cells decided by inference,
        wall time (including the formula build), the largest node-table size
        observed, and the final placement (``board[col] = row``) when solved.
    """
    rng = random.Random(seed)
    board = QueensBoard(
        node_limit=node_limit if node_limit is not None else settings.NODE_LIMIT,
        cache_size=cache_size if cache_size is not None else settings.CACHE_SIZE,
        strategy=strategy,
        infer_on_init=infer_on_init if infer_on_init is not None else settings.INFER_ON_INIT,
    )

    start = perf_counter()
    board.initialize_board(N)
    max_nodes = board.node_count()

    while True:
        grid = board.get_board()
        candidates = undecided_cells(grid)
        if not candidates:
            break
        col, row = rng.choice(candidates)
        board.insert_queen(col, row)
        max_nodes = max(max_nodes, board.node_count())
    elapsed = perf_counter() - start

    grid = board.get_board()
    chosen = set(board.decisions)
    forced = [[c, r] for c in range(N) for r in range(N) if grid[c][r] == QUEEN and (c, r) not in chosen]
    forbidden = sum(1 for c in range(N) for r in range(N) if grid[c][r] == FORBIDDEN)
    logger.debug(
        "Play N=%d (%s, seed=%s): %d decisions, %d forced, solved=%s",
        N,
        strategy,
        seed,
        len(chosen),
        len(forced),
        board.is_solved(),
    )

    return {
        "n": N,
        "strategy": strategy,
        "seed": seed,
        "solved": board.is_solved(),
        "contradiction": board.has_contradiction(),
        "decisions": len(chosen),
        "forced_cells": len(forced),
        "forced": forced,
        "forbidden_cells": forbidden,
        "time": elapsed,
        "max_nodes": max_nodes,
        "board": grid_to_board(grid) if board.is_solved() else None,
    }


def run_single_play_worker(params: Tuple[int, str, Optional[int], int, int, bool]) -> PlayRecord:
    """Worker wrapper to invoke a single play (for parallel mapping)."""
    N, strategy, seed, node_limit, cache_size, infer_on_init = params
    return run_single_play(
        N,
        strategy=strategy,
        seed=seed,
        node_limit=node_limit,
        cache_size=cache_size,
        infer_on_init=infer_on_init,
    )


def _run_seed(base_seed: Optional[int], N: int, run_index: int) -> Optional[int]:
    if base_seed is None:
        return None
    return base_seed + 1000 * N + run_index


def forced_frequency(runs: List[PlayRecord], N: int) -> List[List[float]]:
    """Fraction of runs in which each cell ended as a queen the user did not pick.

    Indexed ``[row][col]`` so it can be passed straight to a heatmap.
    """
    counts = [[0.0] * N for _ in range(N)]
    if not runs:
        return counts
    for run in runs:
        for col, row in run["forced"]:
            counts[row][col] += 1
    return [[value / len(runs) for value in row] for row in counts]


def _summarize(runs: List[PlayRecord], N: int, validate: bool) -> PlayResultEntry:
    if validate:
        for run in runs:
            if run["solved"] and not is_valid_solution(run["board"] or []):
                raise AssertionError(f"Invalid solved board for N={N} ({run['strategy']}): {run['board']}")
            if not run["solved"] and not run["contradiction"]:
                raise AssertionError(f"Random play on N={N} ended undecided without contradiction")
    entry: Any = compute_grouped_statistics(list(runs))
    entry["forced_frequency"] = forced_frequency(runs, N)
    entry["raw_runs"] = runs
    return entry


def run_experiments(
    N_values: List[int],
    runs: int,
    strategies: Optional[List[str]] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_build: bool = True,
) -> ExperimentResults:
    """Run build measurements and random plays sequentially.

    For each N in ``N_values``: one build measurement, then ``runs`` random
    plays per strategy.
    """
    strategies = strategies or list(settings.STRATEGIES)
    results: Any = {"build": {}, "play": {strategy: {} for strategy in strategies}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        print(f"=== N = {N}, strategies: {', '.join(strategies)} ===")

        if include_build:
            record = run_build(N)
            results["build"][N] = record
            print(f"  Build: {record['nodes']} nodes, {record['solutions']} solutions, {record['time']:.4f}s")

        for strategy in strategies:
            play_runs = [
                run_single_play(N, strategy=strategy, seed=_run_seed(seed, N, i))
                for i in range(runs)
            ]
            entry = _summarize(play_runs, N, validate)
            results["play"][strategy][N] = entry
            print(
                f"  [{strategy}] solved {entry['solved']}/{entry['total_runs']}, "
                f"mean decisions {entry.get('all_decisions', {}).get('mean')}"
            )

    return results


def run_experiments_parallel(
    N_values: List[int],
    runs: int,
    strategies: Optional[List[str]] = None,
    seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_build: bool = True,
    processes: Optional[int] = None,
) -> ExperimentResults:
    """Parallel variant of :func:`run_experiments` using a process pool.

    Each worker builds its own boards; no diagram is shared across processes.
    Build measurements stay in the parent process so their timings are not
    disturbed by pool contention.
    """
    strategies = strategies or list(settings.STRATEGIES)
    results: Any = {"build": {}, "play": {strategy: {} for strategy in strategies}}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
    workers = processes or settings.NUM_PROCESSES

    with ProcessPoolExecutor(max_workers=workers) as executor:
        for index, N in enumerate(N_values, start=1):
            if progress:
                progress.update(index, f"N={N}")
            print(f"=== (parallel) N = {N}, strategies: {', '.join(strategies)} ===")

            if include_build:
                results["build"][N] = run_build(N)

            for strategy in strategies:
                params = [
                    (N, strategy, _run_seed(seed, N, i), settings.NODE_LIMIT, settings.CACHE_SIZE, settings.INFER_ON_INIT)
                    for i in range(runs)
                ]
                play_runs: List[PlayRecord] = list(executor.map(run_single_play_worker, params))
                results["play"][strategy][N] = _summarize(play_runs, N, validate)

    return results


def flatten_runs(results: ExperimentResults) -> List[Dict[str, Any]]:
    """Return every raw play record across strategies and sizes, cell lists excluded."""
    rows: List[Dict[str, Any]] = []
    for per_n in results["play"].values():
        for entry in per_n.values():
            for run_id, run in enumerate(entry.get("raw_runs", []), start=1):
                row = {key: value for key, value in run.items() if key not in ("board", "forced")}
                row["run_id"] = run_id
                rows.append(row)
    return rows
