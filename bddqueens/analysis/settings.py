"""Global settings for the BDD N-Queens analysis pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`bddqueens.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from datetime import datetime
from typing import List, Optional

# Board sizes to evaluate (in ascending order). Pure-Python diagrams get slow past N=9.
N_VALUES: List[int] = [4, 5, 6, 7, 8]

# Number of random plays per (strategy, N)
RUNS_PLAY_FINAL: int = 20

# Decision-diagram capacity for every board built by the experiments
NODE_LIMIT: int = 2_000_000
CACHE_SIZE: int = 200_000

# Default forced-singleton strategy for demo boards
STRATEGY: str = "rows"

# Run inference right after the build instead of waiting for the first queen
INFER_ON_INIT: bool = False

# Strategies compared by the experiment runners
STRATEGIES: List[str] = ["rows", "rows_and_columns"]

# Base seed for random play (None = nondeterministic)
SEED: Optional[int] = 42

# Output directory for CSV and charts
OUT_DIR: str = "results_bddqueens"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# Output naming policy --------------------------------------------------------

# When True, results and plots carry a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run label appended to filenames
RUN_TAG: Optional[str] = None


def set_capacity(node_limit: int = NODE_LIMIT, cache_size: int = CACHE_SIZE) -> None:
    """Configure the decision-diagram capacity used by the experiments.

    Side effects
    - Updates module-level globals and prints a concise summary to stdout so
      the active limits are explicit at run start.
    """
    global NODE_LIMIT, CACHE_SIZE
    NODE_LIMIT = int(node_limit)
    CACHE_SIZE = int(cache_size)

    print("Engine capacity configured:")
    print(f"   - node limit: {NODE_LIMIT}")
    print(f"   - restriction cache: {CACHE_SIZE}" if CACHE_SIZE else "   - restriction cache: disabled")


def filename_suffix() -> str:
    """Build an optional filename suffix from RUN_TAG and the run datestamp.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    if RUN_TAG:
        parts.append(str(RUN_TAG))
    if DATE_IN_FILENAMES and RUN_ID:
        parts.append(str(RUN_ID))
    return ("_" + "_".join(parts)) if parts else ""
