"""Centralized configuration for the taxi fare pipeline.

Defaults live in ``DEFAULT_CONFIG``; a YAML file (``config/config.yaml``)
can override any of them. Relative paths are resolved against the current
working directory when they are used, not when the config is loaded.
"""

from __future__ import annotations

from pathlib import Path

from omegaconf import DictConfig, OmegaConf

DEFAULT_CONFIG = {
    "paths": {
        "train_csv": "Data/taxi-fare-train.csv",
        "test_csv": "Data/taxi-fare-test.csv",
        "model_path": "Data/Model.zip",
        "output_dir": "outputs",
    },
    "data": {
        "separator": ",",
    },
    "train": {
        "seed": 0,
        # FastTree-like defaults
        "regressor": {
            "n_estimators": 100,
            "learning_rate": 0.2,
            "max_leaf_nodes": 20,
            "min_samples_leaf": 10,
        },
    },
    "tracking": {
        "enabled": True,
        "experiment_name": "Taxi-Fare-Prediction",
    },
    "logging": {
        "level": "INFO",
    },
}


def load_config(path: str | None = None) -> DictConfig:
    """Load defaults, merged with the YAML file at ``path`` if given."""
    cfg = OmegaConf.create(DEFAULT_CONFIG)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(path))
    return cfg


def resolve_path(cfg: DictConfig, key: str, base_dir: str | Path | None = None) -> Path:
    """Resolve ``cfg.paths[key]`` against ``base_dir`` (default: cwd)."""
    path = Path(cfg.paths[key])
    if path.is_absolute():
        return path
    return Path(base_dir if base_dir is not None else Path.cwd()) / path
