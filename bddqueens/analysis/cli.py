"""Command-line interface and high-level pipelines for the BDD N-Queens board.

This module wires together configuration loading, a small demo that places
queens and prints the resulting verdict grid, and the experiment pipeline
(build measurements plus random play). It isolates I/O, argument parsing and
progress reporting from the core modules so that the rest of the codebase
remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

from . import settings
from .experiments import run_experiments, run_experiments_parallel, run_single_play
from .reporting import (
    save_build_results_to_csv,
    save_raw_data_to_csv,
    save_results_to_csv,
    save_summary_table,
)
from config_manager import ConfigManager
from bddqueens.board import QueensBoard
from bddqueens.exceptions import EngineResourceExhausted, InvalidCoordinate
from bddqueens.inference import INFERENCE_STRATEGIES
from bddqueens.utils import render_grid

logger = logging.getLogger(__name__)


# ------------- Utils --------------------------------------------------------

def parse_placements(place_args: Optional[List[str]]) -> List[Tuple[int, int]]:
    """Normalize ``--place`` inputs into a list of ``(col, row)`` pairs.

    Accepts repeated flags (``--place 0,0 --place 2,1``) and ``;``-separated
    lists (``--place "0,0;2,1"``).
    """
    placements: List[Tuple[int, int]] = []
    if not place_args:
        return placements
    for entry in place_args:
        for token in entry.split(";"):
            token = token.strip()
            if not token:
                continue
            parts = [p.strip() for p in token.split(",")]
            if len(parts) != 2:
                raise ValueError(f"Invalid placement '{token}'. Expected 'col,row'.")
            try:
                placements.append((int(parts[0]), int(parts[1])))
            except ValueError as exc:
                raise ValueError(f"Invalid placement '{token}'. Coordinates must be integers.") from exc
    return placements


def parse_strategy_filters(strategy_args: Optional[List[str]]) -> Optional[List[str]]:
    """Normalize strategy filter inputs (repeated flags or comma-separated).

    Returns None when no filter is provided (meaning the configured set).
    """
    if not strategy_args:
        return None
    selected: List[str] = []
    for entry in strategy_args:
        for token in entry.split(","):
            token = token.strip().lower()
            if token:
                if token not in INFERENCE_STRATEGIES:
                    raise ValueError(
                        f"Unknown strategy '{token}'. Allowed: {', '.join(INFERENCE_STRATEGIES)}"
                    )
                selected.append(token)
    return list(dict.fromkeys(selected)) or None


def apply_configuration(config_path: str, strategy_filter: Optional[List[str]] = None) -> Tuple[ConfigManager, List[str]]:
    """Load configuration into ``settings`` and apply optional strategy filtering.

    Returns the ``ConfigManager`` used and the list of selected strategies.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS_PLAY_FINAL = int(experiment_settings.get("runs_play_final", settings.RUNS_PLAY_FINAL))
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)
        seed = experiment_settings.get("seed", settings.SEED)
        settings.SEED = int(seed) if seed is not None else None

    engine_settings = config_mgr.get_engine_settings()
    if engine_settings:
        settings.set_capacity(
            node_limit=engine_settings.get("node_limit", settings.NODE_LIMIT),
            cache_size=engine_settings.get("cache_size", settings.CACHE_SIZE),
        )

    inference_settings = config_mgr.get_inference_settings()
    if inference_settings:
        strategy = str(inference_settings.get("strategy", settings.STRATEGY)).lower()
        if strategy not in INFERENCE_STRATEGIES:
            raise ValueError(f"Unknown inference strategy in configuration: {strategy}")
        settings.STRATEGY = strategy
        settings.INFER_ON_INIT = bool(inference_settings.get("infer_on_init", settings.INFER_ON_INIT))

    configured = [s.lower() for s in config_mgr.get_strategies()] or [settings.STRATEGY]
    unknown = set(configured).difference(INFERENCE_STRATEGIES)
    if unknown:
        raise ValueError("Unknown strategies in configuration: " + ", ".join(sorted(unknown)))

    selected = strategy_filter or configured
    if not selected:
        raise ValueError("No strategies selected after applying filters.")

    settings.STRATEGIES = selected
    return config_mgr, selected


# ------------- Pipelines ----------------------------------------------------

def run_demo(size: int, placements: List[Tuple[int, int]], strategy: str) -> QueensBoard:
    """Initialize a board, apply ``placements`` in order and print the result."""
    board = QueensBoard(
        node_limit=settings.NODE_LIMIT,
        cache_size=settings.CACHE_SIZE,
        strategy=strategy,
        infer_on_init=settings.INFER_ON_INIT,
    )
    board.initialize_board(size)
    print(f"Board N={size} ({strategy}): {board.count_solutions()} solutions, {board.node_count()} nodes")

    for col, row in placements:
        board.insert_queen(col, row)
        print(f"\nQueen at ({col}, {row}): {board.count_solutions()} solutions left")
        print(render_grid(board.get_board()))

    if not placements:
        print(render_grid(board.get_board()))

    if board.is_solved():
        print("\nStatus: solved")
    elif board.has_contradiction():
        print("\nStatus: no valid placement remains")
    else:
        print("\nStatus: open")
    return board


def main_experiments(strategies: List[str], parallel: bool = False, validate: bool = False, plots: bool = True) -> None:
    """Run the experiment bundle and persist CSVs, the summary table and charts."""
    N_values = settings.N_VALUES
    runner = run_experiments_parallel if parallel else run_experiments
    results = runner(
        N_values,
        settings.RUNS_PLAY_FINAL,
        strategies=strategies,
        seed=settings.SEED,
        progress_label="Experiments",
        validate=validate,
    )

    out_dir = settings.OUT_DIR
    save_build_results_to_csv(results, N_values, out_dir)
    save_results_to_csv(results, N_values, out_dir)
    save_raw_data_to_csv(results, out_dir)
    save_summary_table(results, out_dir)

    if plots:
        from .plots import plot_and_save

        plot_and_save(results, N_values, out_dir)


def run_quick_regression_tests() -> None:
    """Run fast end-to-end checks of the board and the experiment pipeline."""
    print("Running quick regression tests...")

    expected_solutions = {1: 1, 2: 0, 3: 0, 4: 2, 5: 10, 6: 4}
    for N, expected in expected_solutions.items():
        board = QueensBoard()
        board.initialize_board(N)
        found = board.count_solutions()
        if found != expected:
            raise AssertionError(f"Formula for N={N} admits {found} placements, expected {expected}.")
    print("  Formula model counts match for N=1..6")

    board = QueensBoard()
    board.initialize_board(4)
    board.insert_queen(0, 0)
    grid = board.get_board()
    if grid[0][0] != 1 or any(grid[i][i] != -1 for i in range(1, 4)):
        raise AssertionError(f"Unexpected grid after queen at (0, 0) on N=4: {grid}")
    print("  N=4 propagation scenario passed")

    board.insert_queen(1, 0)
    if board.get_board() != grid:
        raise AssertionError("Inserting on a decided cell changed the grid.")
    if not board.has_contradiction():
        raise AssertionError("Corner queen on N=4 should leave a row without candidates.")
    print("  N=4 contradiction path passed")

    for strategy in INFERENCE_STRATEGIES:
        record = run_single_play(6, strategy=strategy, seed=7, infer_on_init=True)
        if not record["solved"]:
            raise AssertionError(f"Random play on N=6 ({strategy}) did not solve the board.")
        print(f"  Random play N=6 ({strategy}): {record['decisions']} decisions, {record['time']:.4f}s")

    results = run_experiments([5], runs=2, strategies=["rows"], seed=1, validate=True)
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [5], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Incremental N-Queens inference with binary decision diagrams.")
    parser.add_argument(
        "--mode",
        choices=["demo", "experiments"],
        default="demo",
        help="demo: place queens on one board and print it (default); experiments: run the analysis pipeline.",
    )
    parser.add_argument("--size", "-n", type=int, default=8, help="Board size for demo mode (default: 8).")
    parser.add_argument(
        "--place",
        "-p",
        action="append",
        help="Queen placement 'col,row' for demo mode (repeatable, or ';'-separated).",
    )
    parser.add_argument(
        "--strategy",
        "-s",
        action="append",
        help="Inference strategy: rows, rows_and_columns (comma-separated or multiple flags).",
    )
    parser.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    parser.add_argument(
        "--infer-on-init",
        action="store_true",
        help="Mark forbidden/forced cells right after the build instead of after the first queen.",
    )
    parser.add_argument("--parallel", action="store_true", help="Run random plays in a process pool.")
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation in experiments mode.")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate every solved board (extra assertions).")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for library messages (default: WARNING).",
    )
    return parser


def main() -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        strategy_filter = parse_strategy_filters(args.strategy)
        placements = parse_placements(args.place)
        if os.path.exists(args.config) or args.config != "config.json":
            _, selected = apply_configuration(args.config, strategy_filter)
        else:
            logger.info("No config.json found; using built-in settings")
            selected = strategy_filter or list(settings.STRATEGIES)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    if args.infer_on_init:
        settings.INFER_ON_INIT = True

    try:
        if args.mode == "demo":
            run_demo(args.size, placements, selected[0] if strategy_filter else settings.STRATEGY)
        else:
            print(f"Selected strategies: {selected}")
            main_experiments(selected, parallel=args.parallel, validate=args.validate, plots=not args.no_plots)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except InvalidCoordinate as exc:
        print(f"Invalid placement: {exc}")
        raise SystemExit(1) from exc
    except EngineResourceExhausted as exc:
        print(f"Decision-diagram capacity exhausted: {exc}. Raise node_limit in the configuration.")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
