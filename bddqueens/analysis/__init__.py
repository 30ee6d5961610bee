"""
Analysis and orchestration package for BDD N-Queens experiments.

This package contains:
- settings: global knobs (sizes, runs, engine capacity, strategies)
- stats: typed result shapes and aggregation helpers
- experiments: build measurements and random-play runners
- reporting: CSV exports and the pandas summary table
- plots: chart utilities (matplotlib, seaborn)
- cli: top-level pipeline entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    BuildRecord,
    PlayRecord,
    PlayResultEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "BuildRecord",
    "PlayRecord",
    "PlayResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
