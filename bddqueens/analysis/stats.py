"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute aggregate statistics across per-run records.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, List, Optional, TypedDict

# Numeric fields of a PlayRecord summarized per outcome group
PLAY_METRICS: List[str] = ["time", "decisions", "forced_cells", "forbidden_cells", "max_nodes"]


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class BuildRecord(TypedDict):
    n: int
    time: float
    nodes: int
    clauses: int
    solutions: int


class PlayRecord(TypedDict):
    n: int
    strategy: str
    seed: Optional[int]
    solved: bool
    contradiction: bool
    decisions: int
    forced_cells: int
    forced: List[List[int]]
    forbidden_cells: int
    time: float
    max_nodes: int
    board: Optional[List[int]]


class PlayResultEntry(TypedDict, total=False):
    solved_rate: float
    contradiction_rate: float
    total_runs: int
    solved: int
    contradictions: int
    all_time: StatsSummary
    all_decisions: StatsSummary
    all_forced_cells: StatsSummary
    all_forbidden_cells: StatsSummary
    all_max_nodes: StatsSummary
    solved_time: StatsSummary
    solved_decisions: StatsSummary
    solved_forced_cells: StatsSummary
    solved_forbidden_cells: StatsSummary
    solved_max_nodes: StatsSummary
    forced_frequency: List[List[float]]
    raw_runs: List[PlayRecord]


class ExperimentResults(TypedDict):
    build: Dict[int, BuildRecord]
    play: Dict[str, Dict[int, PlayResultEntry]]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps expected. Values <= 0 are coerced to 1 to avoid
        division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Parameters
    ----------
    values : List[float]
        Numeric values to summarize.
    label : str, optional
        Carried for debugging contexts; not used in calculations.

    Returns
    -------
    StatsSummary
        count, mean, median, std (population), min, max, q25, q75 and range.
        When ``values`` is empty all numeric fields are ``None`` and ``count``
        is 0 to keep CSV/plot generation consistent.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)

    min_val = min(values)
    max_val = max(values)

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0,
        "min": min_val,
        "max": max_val,
        "q25": sorted_vals[n // 4] if n >= 4 else min_val,
        "q75": sorted_vals[3 * n // 4] if n >= 4 else max_val,
        "range": max_val - min_val,
    }


def compute_grouped_statistics(results_list: List[Dict[str, Any]], success_key: str = "solved") -> Dict[str, Any]:
    """Aggregate play metrics over all runs and over solved runs.

    Parameters
    ----------
    results_list : List[Dict[str, Any]]
        Per-run records (see ``PlayRecord``).
    success_key : str, optional
        Key interpreted as the success flag (default: ``"solved"``).

    Returns
    -------
    Dict[str, Any]
        Rates (``solved_rate``, ``contradiction_rate``), counters
        (``total_runs``, ``solved``, ``contradictions``) and, for every metric
        in ``PLAY_METRICS`` present in the records, ``all_<metric>`` and
        ``solved_<metric>`` summaries.
    """
    solved = [r for r in results_list if r.get(success_key, False)]
    contradictions = [r for r in results_list if r.get("contradiction", False)]
    total = len(results_list)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "solved": len(solved),
        "contradictions": len(contradictions),
        "solved_rate": len(solved) / total if total else 0,
        "contradiction_rate": len(contradictions) / total if total else 0,
    }

    for group_name, group in (("all", results_list), ("solved", solved)):
        for metric in PLAY_METRICS:
            if any(metric in r for r in group):
                values = [r[metric] for r in group if metric in r]
                stats[f"{group_name}_{metric}"] = compute_detailed_statistics(values, f"{group_name}_{metric}")

    return stats
