"""Visualization utilities for analysis outputs.

Overview
--------
Plotting helpers that turn the ``ExperimentResults`` produced by
:mod:`bddqueens.analysis.experiments` into PNG charts.

Chart map
---------
- 01_build_time_vs_N.png — Formula build time vs N (log scale)
    - X: N (board size). Y: build time [s].
- 02_nodes_vs_N.png — Diagram size after the build vs N (log scale)
    - X: N. Y: nodes in the shared table; the exponential fit is overlaid.
- 03_decisions_vs_N.png — User decisions needed to settle a board vs N
    - X: N. Y: mean ± std of decisions per strategy.
- 04_inferred_cells_vs_N.png — Cells decided by inference vs N
    - X: N. Y: mean forced (+1) and forbidden (-1) cells per strategy.
- heatmap_forced_{strategy}_N{N}.png — Forced-queen frequency per cell
    - What: fraction of random plays in which a cell was forced rather than
      chosen. Rows top to bottom, columns left to right.

All functions write into ``out_dir`` (created if missing) and return None.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, cast

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402

from . import settings  # noqa: E402
from .stats import ExperimentResults  # noqa: E402

_MARKERS = ["o", "s", "^", "D", "v"]


def plot_build_analysis(results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Plot build time and diagram size against N."""
    build = results.get("build", {})
    sizes = [N for N in N_values if N in build]
    if not sizes:
        print("Build plots skipped: no build measurements.")
        return
    os.makedirs(out_dir, exist_ok=True)
    suffix = settings.filename_suffix()

    times = [max(build[N]["time"], 1e-6) for N in sizes]
    plt.figure(figsize=(12, 8))
    plt.semilogy(sizes, times, marker="o", linewidth=2, markersize=8, label="Formula build")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Build time [s] (log scale)", fontsize=12)
    plt.title("Formula Build Time vs Problem Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(sizes)
    fname = os.path.join(out_dir, f"01_build_time_vs_N{suffix}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved build-time chart: {fname}")

    nodes = [max(build[N]["nodes"], 1) for N in sizes]
    plt.figure(figsize=(12, 8))
    plt.semilogy(sizes, nodes, marker="s", linewidth=2, markersize=8, label="Nodes after build")
    if len(sizes) >= 2:
        # log-linear fit: nodes ≈ exp(a*N + b)
        a, b = np.polyfit(np.array(sizes, dtype=float), np.log(np.array(nodes, dtype=float)), 1)
        x_trend = np.linspace(min(sizes), max(sizes), 100)
        plt.semilogy(x_trend, np.exp(a * x_trend + b), "--", alpha=0.8, label=f"exp fit (growth ×{np.exp(a):.2f} per N)")
    for n, count in zip(sizes, nodes):
        plt.annotate(str(count), (n, count), textcoords="offset points", xytext=(0, 5), ha="center", fontsize=9)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Nodes (log scale)", fontsize=12)
    plt.title("Decision Diagram Size vs Problem Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(sizes)
    fname = os.path.join(out_dir, f"02_nodes_vs_N{suffix}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved node-count chart: {fname}")


def plot_play_analysis(results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Plot decisions and inferred cells per strategy against N."""
    play = results.get("play", {})
    if not any(play.values()):
        print("Play plots skipped: no random-play runs.")
        return
    os.makedirs(out_dir, exist_ok=True)
    suffix = settings.filename_suffix()

    plt.figure(figsize=(12, 8))
    for i, (strategy, per_n) in enumerate(play.items()):
        sizes = [N for N in N_values if N in per_n]
        means = [cast(float, per_n[N].get("all_decisions", {}).get("mean") or 0.0) for N in sizes]
        stds = [cast(float, per_n[N].get("all_decisions", {}).get("std") or 0.0) for N in sizes]
        plt.errorbar(sizes, means, yerr=stds, marker=_MARKERS[i % len(_MARKERS)], linewidth=2, markersize=8, capsize=4, label=strategy)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("User decisions (mean ± std)", fontsize=12)
    plt.title("Decisions Needed to Settle the Board", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    fname = os.path.join(out_dir, f"03_decisions_vs_N{suffix}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved decisions chart: {fname}")

    plt.figure(figsize=(12, 8))
    for i, (strategy, per_n) in enumerate(play.items()):
        sizes = [N for N in N_values if N in per_n]
        forced = [cast(float, per_n[N].get("all_forced_cells", {}).get("mean") or 0.0) for N in sizes]
        forbidden = [cast(float, per_n[N].get("all_forbidden_cells", {}).get("mean") or 0.0) for N in sizes]
        marker = _MARKERS[i % len(_MARKERS)]
        plt.plot(sizes, forced, marker=marker, linewidth=2, markersize=8, label=f"forced (+1), {strategy}")
        plt.plot(sizes, forbidden, marker=marker, linestyle="--", linewidth=2, markersize=8, label=f"forbidden (-1), {strategy}")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Cells decided by inference (mean)", fontsize=12)
    plt.title("Inference Yield vs Problem Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    fname = os.path.join(out_dir, f"04_inferred_cells_vs_N{suffix}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved inference-yield chart: {fname}")


def plot_forced_heatmaps(results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """One seaborn heatmap per (strategy, N) of forced-queen frequency."""
    os.makedirs(out_dir, exist_ok=True)
    suffix = settings.filename_suffix()
    for strategy, per_n in results.get("play", {}).items():
        for N in N_values:
            entry: Dict[str, Any] = dict(per_n.get(N, {}))
            matrix = entry.get("forced_frequency")
            if not matrix:
                continue
            plt.figure(figsize=(max(4, N), max(3, N * 0.8)))
            sns.heatmap(np.array(matrix), annot=N <= 10, fmt=".2f", cmap="viridis", vmin=0.0, vmax=1.0, square=True, cbar=True)
            plt.xlabel("Column", fontsize=11)
            plt.ylabel("Row", fontsize=11)
            plt.title(f"Forced-queen frequency, N={N} ({strategy})", fontsize=12)
            fname = os.path.join(out_dir, f"heatmap_forced_{strategy}_N{N}{suffix}.png")
            plt.savefig(fname, bbox_inches="tight", dpi=150)
            plt.close()
            print(f"Saved forced-cell heatmap: {fname}")


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Generate every chart for an experiment bundle."""
    plot_build_analysis(results, N_values, out_dir)
    plot_play_analysis(results, N_values, out_dir)
    plot_forced_heatmaps(results, N_values, out_dir)
