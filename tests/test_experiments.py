"""Tests for the experiment runners, CSV/pandas reporting and charts."""

import csv
import os
import tempfile
import unittest

from tests._helpers import ROOT  # noqa: F401

from bddqueens.analysis import settings
from bddqueens.analysis.experiments import (
    flatten_runs,
    forced_frequency,
    run_build,
    run_experiments,
    run_single_play,
)
from bddqueens.analysis.reporting import (
    build_summary_frame,
    save_build_results_to_csv,
    save_raw_data_to_csv,
    save_results_to_csv,
    save_summary_table,
)
from bddqueens.analysis.stats import compute_detailed_statistics, compute_grouped_statistics
from bddqueens.utils import is_valid_solution


class RunnerTests(unittest.TestCase):

    def test_run_build(self):
        record = run_build(5)
        self.assertEqual(record["n"], 5)
        self.assertEqual(record["solutions"], 10)
        self.assertEqual(record["clauses"], 30)
        self.assertGreater(record["nodes"], 0)

    def test_single_play_is_reproducible(self):
        first = run_single_play(6, seed=3)
        second = run_single_play(6, seed=3)
        for key in ("solved", "contradiction", "decisions", "forced_cells", "forced", "forbidden_cells", "board"):
            self.assertEqual(first[key], second[key])

    def test_single_play_terminates_settled(self):
        for seed in range(6):
            record = run_single_play(5, strategy="rows_and_columns", seed=seed)
            self.assertNotEqual(record["solved"], record["contradiction"])
            if record["solved"]:
                self.assertTrue(is_valid_solution(record["board"]))
                self.assertEqual(record["decisions"] + record["forced_cells"], 5)
                self.assertEqual(record["forbidden_cells"], 20)
            else:
                self.assertIsNone(record["board"])
                self.assertEqual(record["decisions"], 1)

    def test_eager_play_always_solves(self):
        for seed in range(4):
            record = run_single_play(6, seed=seed, infer_on_init=True)
            self.assertTrue(record["solved"])
            self.assertFalse(record["contradiction"])

    def test_forced_frequency(self):
        runs = [{"forced": [[0, 1], [2, 0]]}, {"forced": [[0, 1]]}]
        freq = forced_frequency(runs, 3)
        self.assertEqual(freq[1][0], 1.0)
        self.assertEqual(freq[0][2], 0.5)
        self.assertEqual(sum(map(sum, freq)), 1.5)
        self.assertEqual(forced_frequency([], 2), [[0.0, 0.0], [0.0, 0.0]])


class StatsTests(unittest.TestCase):

    def test_detailed_statistics(self):
        summary = compute_detailed_statistics([1, 2, 3, 4])
        self.assertEqual(summary["count"], 4)
        self.assertEqual(summary["mean"], 2.5)
        self.assertEqual(summary["range"], 3)
        self.assertIsNone(compute_detailed_statistics([])["mean"])

    def test_grouped_statistics(self):
        runs = [
            {"solved": True, "contradiction": False, "decisions": 2},
            {"solved": False, "contradiction": True, "decisions": 1},
        ]
        stats = compute_grouped_statistics(runs)
        self.assertEqual(stats["total_runs"], 2)
        self.assertEqual(stats["solved_rate"], 0.5)
        self.assertEqual(stats["contradictions"], 1)
        self.assertEqual(stats["all_decisions"]["mean"], 1.5)
        self.assertEqual(stats["solved_decisions"]["count"], 1)


class PipelineTests(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.results = run_experiments([4, 5], runs=3, strategies=["rows", "rows_and_columns"], seed=11, validate=True)

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.out_dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_results_shape(self):
        self.assertEqual(set(self.results["build"]), {4, 5})
        self.assertEqual(self.results["build"][4]["solutions"], 2)
        for strategy in ("rows", "rows_and_columns"):
            entry = self.results["play"][strategy][5]
            self.assertEqual(entry["total_runs"], 3)
            self.assertEqual(len(entry["raw_runs"]), 3)
            self.assertEqual(len(entry["forced_frequency"]), 5)

    def test_flatten_runs_drops_cell_lists(self):
        rows = flatten_runs(self.results)
        self.assertEqual(len(rows), 2 * 2 * 3)
        self.assertNotIn("board", rows[0])
        self.assertNotIn("forced", rows[0])
        self.assertEqual(rows[0]["run_id"], 1)

    def test_csv_exports(self):
        build_path = save_build_results_to_csv(self.results, [4, 5], self.out_dir)
        play_path = save_results_to_csv(self.results, [4, 5], self.out_dir)
        raw_path = save_raw_data_to_csv(self.results, self.out_dir)
        with open(build_path, newline="") as f:
            self.assertEqual(len(list(csv.reader(f))), 3)
        with open(play_path, newline="") as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual({row["strategy"] for row in rows}, {"rows", "rows_and_columns"})
        with open(raw_path, newline="") as f:
            self.assertEqual(len(list(csv.reader(f))), 13)

    def test_summary_frame(self):
        frame = build_summary_frame(self.results)
        self.assertEqual(len(frame), 4)
        self.assertTrue((frame["runs"] == 3).all())
        path = save_summary_table(self.results, self.out_dir)
        self.assertTrue(os.path.exists(path))

    def test_empty_results(self):
        empty = {"build": {}, "play": {}}
        self.assertIsNone(save_build_results_to_csv(empty, [4], self.out_dir))
        self.assertTrue(build_summary_frame(empty).empty)
        self.assertIsNone(save_summary_table(empty, self.out_dir))

    def test_plots_are_written(self):
        from bddqueens.analysis.plots import plot_and_save

        plot_and_save(self.results, [4, 5], self.out_dir)
        names = os.listdir(self.out_dir)
        suffix_free = {name.split("_N")[0] for name in names if name.startswith("heatmap_")}
        self.assertEqual(suffix_free, {"heatmap_forced_rows", "heatmap_forced_rows_and_columns"})
        for prefix in ("01_build_time", "02_nodes", "03_decisions", "04_inferred_cells"):
            self.assertTrue(any(name.startswith(prefix) for name in names), prefix)


class SettingsTests(unittest.TestCase):

    def test_set_capacity(self):
        saved = (settings.NODE_LIMIT, settings.CACHE_SIZE)
        try:
            settings.set_capacity(node_limit="1000", cache_size=0)
            self.assertEqual(settings.NODE_LIMIT, 1000)
            self.assertEqual(settings.CACHE_SIZE, 0)
        finally:
            settings.set_capacity(*saved)

    def test_filename_suffix(self):
        saved = (settings.RUN_TAG, settings.DATE_IN_FILENAMES, settings.RUN_ID)
        try:
            settings.RUN_TAG, settings.DATE_IN_FILENAMES, settings.RUN_ID = None, False, "20260101-000000"
            self.assertEqual(settings.filename_suffix(), "")
            settings.RUN_TAG = "smoke"
            self.assertEqual(settings.filename_suffix(), "_smoke")
            settings.DATE_IN_FILENAMES = True
            self.assertEqual(settings.filename_suffix(), "_smoke_20260101-000000")
        finally:
            settings.RUN_TAG, settings.DATE_IN_FILENAMES, settings.RUN_ID = saved

    def test_exports_share_the_suffix(self):
        saved = (settings.RUN_TAG, settings.DATE_IN_FILENAMES)
        settings.RUN_TAG, settings.DATE_IN_FILENAMES = "tagged", False
        try:
            results = {"build": {4: run_build(4)}, "play": {}}
            with tempfile.TemporaryDirectory() as out_dir:
                path = save_build_results_to_csv(results, [4], out_dir)
                self.assertEqual(os.path.basename(path), "build_results_tagged.csv")
        finally:
            settings.RUN_TAG, settings.DATE_IN_FILENAMES = saved


if __name__ == "__main__":
    unittest.main()
