"""Model evaluation against a held-out test view.

Key Classes:
    RegressionMetrics - Container for evaluation results
    Evaluator - Scores a test view and computes metrics

Usage:
    evaluator = Evaluator()
    metrics = evaluator.evaluate(model, test_df)
    metrics.print_summary()
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score, root_mean_squared_error

from taxi_fare.errors import DataFormatError
from taxi_fare.train.model import FittedModel

logger = logging.getLogger("TaxiFare")


@dataclass(frozen=True)
class RegressionMetrics:
    r_squared: float
    root_mean_squared_error: float
    mean_absolute_error: float
    mean_squared_error: float
    n_samples: int

    def to_dict(self) -> dict:
        return asdict(self)

    def print_summary(self):
        print()
        print("*************************************************")
        print("*       Model quality metrics evaluation         ")
        print("*------------------------------------------------")
        print(f"*       RSquared Score:      {self.r_squared:.2f}")
        print(f"*       Root Mean Squared Error:      {self.root_mean_squared_error:.2f}")
        print(f"*       Mean Absolute Error:      {self.mean_absolute_error:.2f}")
        print(f"*       Samples:      {self.n_samples}")


def compute_metrics(y_true, y_pred) -> RegressionMetrics:
    """Compare predicted scores with true labels."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    return RegressionMetrics(
        r_squared=float(r2_score(y_true, y_pred)),
        root_mean_squared_error=float(root_mean_squared_error(y_true, y_pred)),
        mean_absolute_error=float(mean_absolute_error(y_true, y_pred)),
        mean_squared_error=float(mean_squared_error(y_true, y_pred)),
        n_samples=len(y_true),
    )


class Evaluator:
    """Applies a fitted model to a test view; reports, never corrects."""

    def evaluate(self, model: FittedModel, df: pd.DataFrame) -> RegressionMetrics:
        if len(df) < 2:
            # R-squared is undefined below two rows
            raise DataFormatError(f"Test view needs at least 2 rows to evaluate, got {len(df)}")
        if model.label_source not in df.columns:
            raise DataFormatError(f"Test view is missing label column {model.label_source}")

        scored = model.transform(df)
        metrics = compute_metrics(scored[model.label_column], scored[model.score_column])
        logger.info(
            "Evaluation on %d rows: R2=%.4f RMSE=%.4f",
            metrics.n_samples, metrics.r_squared, metrics.root_mean_squared_error,
        )
        return metrics
