"""CSV export utilities for experiment outputs (aggregates and raw runs).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection. A pandas summary
table groups the raw runs by strategy and N.
"""
from __future__ import annotations

import csv
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from . import settings
from .experiments import flatten_runs
from .stats import ExperimentResults


def _summary_value(entry: Dict[str, Any], key: str, stat: str) -> Optional[float]:
    return entry.get(key, {}).get(stat)


def save_build_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> Optional[str]:
    """Write one row per N with the formula build measurements."""
    if not results.get("build"):
        return None
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"build_results{settings.filename_suffix()}.csv")
    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["n", "build_time_seconds", "nodes", "clauses", "solutions"])
        for N in N_values:
            record = results["build"].get(N)
            if record is None:
                continue
            writer.writerow([N, record["time"], record["nodes"], record["clauses"], record["solutions"]])
    print(f"Build results saved: {filename}")
    return filename


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-(strategy, N) aggregate metrics for random play to CSV."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"play_results{settings.filename_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "strategy",
            "n",
            "total_runs",
            "solved",
            "contradictions",
            "solved_rate",
            "contradiction_rate",
            "decisions_mean",
            "decisions_median",
            "decisions_min",
            "decisions_max",
            "forced_cells_mean",
            "forbidden_cells_mean",
            "time_mean",
            "time_median",
            "max_nodes_mean",
            "max_nodes_max",
        ])
        for strategy, per_n in results["play"].items():
            for N in N_values:
                entry: Dict[str, Any] = dict(per_n.get(N, {}))
                if not entry:
                    continue
                writer.writerow([
                    strategy,
                    N,
                    entry.get("total_runs", 0),
                    entry.get("solved", 0),
                    entry.get("contradictions", 0),
                    entry.get("solved_rate", 0.0),
                    entry.get("contradiction_rate", 0.0),
                    _summary_value(entry, "all_decisions", "mean"),
                    _summary_value(entry, "all_decisions", "median"),
                    _summary_value(entry, "all_decisions", "min"),
                    _summary_value(entry, "all_decisions", "max"),
                    _summary_value(entry, "all_forced_cells", "mean"),
                    _summary_value(entry, "all_forbidden_cells", "mean"),
                    _summary_value(entry, "all_time", "mean"),
                    _summary_value(entry, "all_time", "median"),
                    _summary_value(entry, "all_max_nodes", "mean"),
                    _summary_value(entry, "all_max_nodes", "max"),
                ])
    print(f"Play results saved: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, out_dir: str) -> str:
    """Write every random-play run to CSV, one row per run."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_data_play{settings.filename_suffix()}.csv")
    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "strategy",
            "n",
            "run_id",
            "seed",
            "solved",
            "contradiction",
            "decisions",
            "forced_cells",
            "forbidden_cells",
            "time_seconds",
            "max_nodes",
        ])
        for row in flatten_runs(results):
            writer.writerow([
                row["strategy"],
                row["n"],
                row["run_id"],
                row["seed"],
                row["solved"],
                row["contradiction"],
                row["decisions"],
                row["forced_cells"],
                row["forbidden_cells"],
                row["time"],
                row["max_nodes"],
            ])
    print(f"Raw play data saved: {filename}")
    return filename


def build_summary_frame(results: ExperimentResults) -> pd.DataFrame:
    """Return a DataFrame of mean/std play metrics grouped by strategy and N."""
    frame = pd.DataFrame(flatten_runs(results))
    if frame.empty:
        return frame
    grouped = frame.groupby(["strategy", "n"]).agg(
        runs=("run_id", "count"),
        solved_rate=("solved", "mean"),
        decisions_mean=("decisions", "mean"),
        decisions_std=("decisions", "std"),
        forced_cells_mean=("forced_cells", "mean"),
        forbidden_cells_mean=("forbidden_cells", "mean"),
        time_mean=("time", "mean"),
        max_nodes_max=("max_nodes", "max"),
    )
    return grouped.reset_index()


def save_summary_table(results: ExperimentResults, out_dir: str) -> Optional[str]:
    """Persist the pandas summary table as CSV and echo it to stdout."""
    frame = build_summary_frame(results)
    if frame.empty:
        print("Summary table skipped: no play runs recorded.")
        return None
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"summary_table{settings.filename_suffix()}.csv")
    frame.to_csv(filename, index=False)
    print(frame.to_string(index=False))
    print(f"Summary table saved: {filename}")
    return filename
