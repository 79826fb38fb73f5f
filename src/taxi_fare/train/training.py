import logging

import mlflow
import pandas as pd
from pandas.api import types as ptypes
from sklearn.base import clone

from taxi_fare.config import DEFAULT_CONFIG
from taxi_fare.errors import TrainingError
from taxi_fare.features.pipeline_builder import FarePipeline
from taxi_fare.schema.records import TAXI_TRIP_SCHEMA, ColumnKind, Schema
from taxi_fare.train.model import FittedModel

logger = logging.getLogger("TaxiFare")


class FareTrainer:
    """
    Fits a FarePipeline against a training view, producing a FittedModel.

    Given the same seed and input order, two fits produce the same model.
    """

    def __init__(self, config=None, schema: Schema = TAXI_TRIP_SCHEMA):
        cfg = config if config is not None else DEFAULT_CONFIG
        self.schema = schema
        self.track = bool(cfg["tracking"]["enabled"])
        self.experiment_name = cfg["tracking"]["experiment_name"]

        if self.track:
            mlflow.set_experiment(self.experiment_name)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self, pipeline: FarePipeline, df: pd.DataFrame) -> None:
        missing = [c for c in pipeline.required_columns if c not in df.columns]
        if missing:
            raise TrainingError(f"Missing required columns: {missing}")

        if df.empty:
            raise TrainingError("Training view has no rows")

        for name in pipeline.required_columns:
            kind = self.schema[name].kind
            series = df[name]
            if kind is ColumnKind.CATEGORICAL:
                ok = ptypes.is_object_dtype(series) or ptypes.is_string_dtype(series)
            elif kind is ColumnKind.INTEGER:
                ok = ptypes.is_integer_dtype(series)
            else:
                ok = ptypes.is_numeric_dtype(series) and not ptypes.is_bool_dtype(series)
            if not ok:
                raise TrainingError(
                    f"Column {name} has dtype {series.dtype}, expected {kind.value}"
                )

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def _fit(self, pipeline: FarePipeline, df: pd.DataFrame) -> FittedModel:
        input_columns = tuple(c for c in pipeline.required_columns if c != pipeline.label_source)
        X = df[list(input_columns)]
        y = df[pipeline.label_source].astype(float).rename(pipeline.label_column)

        estimator = clone(pipeline.estimator)
        try:
            estimator.fit(X, y)
        except (ValueError, TypeError) as exc:
            raise TrainingError(f"Fitting failed: {exc}") from exc

        return FittedModel(
            estimator=estimator,
            input_columns=input_columns,
            label_source=pipeline.label_source,
            label_column=pipeline.label_column,
            score_column=pipeline.score_column,
        )

    def fit(self, pipeline: FarePipeline, df: pd.DataFrame) -> FittedModel:
        self.validate(pipeline, df)
        logger.info("Training on %d rows", len(df))

        if not self.track:
            model = self._fit(pipeline, df)
        else:
            regressor = pipeline.estimator.named_steps["regressor"]
            with mlflow.start_run(run_name="gradient_boosting"):
                mlflow.log_params(regressor.get_params())
                model = self._fit(pipeline, df)
                mlflow.log_metric("train_rows", len(df))
                mlflow.log_metric("n_features", len(model.feature_names))

        logger.info("Model fitted with %d features", len(model.feature_names))
        return model
