from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sklearn.compose import ColumnTransformer
from sklearn.ensemble import GradientBoostingRegressor
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder

from taxi_fare.config import DEFAULT_CONFIG


class StageKind(Enum):
    COPY = "copy"
    ONE_HOT = "one_hot"
    CONCATENATE = "concatenate"
    TRAIN = "train"


@dataclass(frozen=True)
class Stage:
    kind: StageKind
    output: str
    inputs: tuple[str, ...]


LABEL_COLUMN = "Label"
FEATURES_COLUMN = "Features"
SCORE_COLUMN = "Score"

FARE_STAGES = (
    Stage(StageKind.COPY, LABEL_COLUMN, ("FareAmount",)),
    Stage(StageKind.ONE_HOT, "VendorIdEncoded", ("VendorId",)),
    Stage(StageKind.ONE_HOT, "RateCodeEncoded", ("RateCode",)),
    Stage(StageKind.ONE_HOT, "PaymentTypeEncoded", ("PaymentType",)),
    Stage(
        StageKind.CONCATENATE,
        FEATURES_COLUMN,
        ("VendorIdEncoded", "RateCodeEncoded", "PassengerCount", "TripDistance", "PaymentTypeEncoded"),
    ),
    Stage(StageKind.TRAIN, SCORE_COLUMN, (FEATURES_COLUMN, LABEL_COLUMN)),
)


@dataclass(frozen=True)
class FarePipeline:
    """
    A composed, not-yet-fitted transformation sequence.

    ``estimator`` is the scikit-learn realisation of the feature and trainer
    stages; the label copy is applied by the trainer before fitting.
    """

    stages: tuple[Stage, ...]
    estimator: Pipeline
    label_source: str
    label_column: str = LABEL_COLUMN
    score_column: str = SCORE_COLUMN

    @property
    def required_columns(self) -> list[str]:
        """Raw input columns the stages read, label source included."""
        produced = {stage.output for stage in self.stages}
        needed = []
        for stage in self.stages:
            for name in stage.inputs:
                if name not in produced and name not in needed:
                    needed.append(name)
        return needed


class FeaturePipelineBuilder:
    """
    Turns the fixed stage list into an unfitted scikit-learn Pipeline:

        ColumnTransformer (one-hot encoders + passthrough, in Features order)
        -> GradientBoostingRegressor
    """

    def __init__(self, config=None, stages: tuple[Stage, ...] = FARE_STAGES):
        cfg = config if config is not None else DEFAULT_CONFIG
        self.seed = int(cfg["train"]["seed"])
        self.regressor_params = dict(cfg["train"]["regressor"])
        self.stages = stages

    def _build_regressor(self) -> GradientBoostingRegressor:
        return GradientBoostingRegressor(random_state=self.seed, **self.regressor_params)

    def build(self) -> FarePipeline:
        label_source = None
        encoders = {}
        features = None
        regressor = None

        for stage in self.stages:
            if stage.kind is StageKind.COPY:
                label_source = stage.inputs[0]
            elif stage.kind is StageKind.ONE_HOT:
                encoders[stage.output] = (
                    OneHotEncoder(handle_unknown="ignore", sparse_output=False),
                    list(stage.inputs),
                )
            elif stage.kind is StageKind.CONCATENATE:
                transformers = []
                for name in stage.inputs:
                    if name in encoders:
                        encoder, columns = encoders[name]
                        transformers.append((name, encoder, columns))
                    else:
                        transformers.append((name, "passthrough", [name]))
                features = ColumnTransformer(transformers, remainder="drop")
            elif stage.kind is StageKind.TRAIN:
                regressor = self._build_regressor()

        if label_source is None or features is None or regressor is None:
            raise ValueError("Stage list needs a copy, a concatenate and a train stage")

        estimator = Pipeline([
            ("features", features),
            ("regressor", regressor),
        ])
        return FarePipeline(
            stages=self.stages,
            estimator=estimator,
            label_source=label_source,
        )
