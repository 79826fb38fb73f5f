import os
import sys

# ensure the src package is importable when running tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import mlflow
import pytest
from omegaconf import OmegaConf

from taxi_fare.config import load_config
from taxi_fare.data.synthetic import generate_trips
from taxi_fare.features.pipeline_builder import FeaturePipelineBuilder
from taxi_fare.train.training import FareTrainer


class DummyRun:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture(autouse=True)
def no_mlflow(monkeypatch):
    """Keep MLflow from creating runs on disk; record what would be logged."""
    logged = {"params": {}, "metrics": {}, "experiments": []}

    monkeypatch.setattr(mlflow, "set_experiment", lambda name, *a, **k: logged["experiments"].append(name))
    monkeypatch.setattr(mlflow, "start_run", lambda *a, **k: DummyRun())
    monkeypatch.setattr(mlflow, "log_params", lambda params, *a, **k: logged["params"].update(params))
    monkeypatch.setattr(mlflow, "log_metric", lambda key, value, *a, **k: logged["metrics"].__setitem__(key, value))
    return logged


@pytest.fixture
def cfg():
    return load_config()


def _untracked_config():
    cfg = load_config()
    OmegaConf.update(cfg, "tracking.enabled", False)
    return cfg


@pytest.fixture(scope="session")
def train_df():
    return generate_trips(2_000, seed=0)


@pytest.fixture(scope="session")
def test_df():
    return generate_trips(400, seed=1)


@pytest.fixture(scope="session")
def fitted_model(train_df):
    cfg = _untracked_config()
    pipeline = FeaturePipelineBuilder(cfg).build()
    return FareTrainer(cfg).fit(pipeline, train_df)
