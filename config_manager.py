"""Configuration management for the BDD N-Queens board and experiments.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize decision-diagram capacity, the inference strategy, and the
experiment settings used by the analysis pipeline.

File format (high-level)
------------------------
- engine_settings: node_limit and cache_size for each board's engine.
- inference_settings: default forced-singleton strategy ("rows" or
  "rows_and_columns") and whether inference runs right after the build.
- experiment_settings: N values, runs per N, output directory, random seed.
- strategies: list of strategy labels the experiments compare.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_engine_settings(self):
        """Return decision-diagram capacity settings (node_limit, cache_size)."""
        return self.config.get("engine_settings", {})

    def get_inference_settings(self):
        """Return the inference settings (default strategy, infer_on_init)."""
        return self.config.get("inference_settings", {})

    def get_experiment_settings(self):
        """Return high-level experiment settings (sizes, runs, output dir, seed)."""
        return self.config.get("experiment_settings", {})

    def get_strategies(self):
        """Return the list of inference strategies to compare."""
        return self.config.get("strategies", ["rows"])

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
