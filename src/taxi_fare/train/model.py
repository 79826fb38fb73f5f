from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline


@dataclass(frozen=True, eq=False)
class FittedModel:
    """Immutable result of fitting a FarePipeline. Read-only once built."""

    estimator: Pipeline
    input_columns: tuple[str, ...]
    label_source: str
    label_column: str
    score_column: str

    @property
    def feature_names(self) -> list[str]:
        return self.estimator.named_steps["features"].get_feature_names_out().tolist()

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        return self.estimator.predict(df[list(self.input_columns)])

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of ``df`` with the label copy and the ``Score`` column."""
        out = df.copy()
        if self.label_source in out.columns:
            out[self.label_column] = out[self.label_source].astype(float)
        out[self.score_column] = self.predict(df)
        return out
