import logging
import os
from collections.abc import Mapping
from datetime import datetime

import pandas as pd
from pydantic import ValidationError

from taxi_fare.errors import PredictionError
from taxi_fare.schema.records import FarePrediction, TaxiTrip, records_to_frame
from taxi_fare.train.model import FittedModel

logger = logging.getLogger("TaxiFare")


class FarePredictor:
    def __init__(self, model: FittedModel = None):
        """
        Initialize the FarePredictor with a fitted model.
        :param model: A FittedModel, trained or loaded from the model store
        """
        self.model = model

    def _require_model(self) -> FittedModel:
        if self.model is None:
            raise PredictionError("Model is not loaded. Please load a model before inference.")
        return self.model

    @staticmethod
    def to_trip(record) -> TaxiTrip:
        """Coerce a TaxiTrip or a mapping of its fields into a TaxiTrip."""
        if isinstance(record, TaxiTrip):
            # model_copy(update=...) skips validation, so check instances again
            record = record.model_dump()
        if not isinstance(record, Mapping):
            raise PredictionError(f"Expected a TaxiTrip or mapping, got {type(record).__name__}")
        try:
            return TaxiTrip.model_validate(dict(record))
        except ValidationError as exc:
            raise PredictionError(f"Invalid trip record: {exc}") from exc

    def predict(self, record) -> FarePrediction:
        """
        Predict the fare of a single trip. The record's FareAmount is ignored.
        :param record: TaxiTrip or mapping with the TaxiTrip fields
        :return: FarePrediction
        """
        model = self._require_model()
        trip = self.to_trip(record)
        score = model.predict(records_to_frame([trip]))
        return FarePrediction(FareAmount=float(score[0]))

    def batch_inference(self, df: pd.DataFrame, save_path: str = None) -> pd.DataFrame:
        """
        Score every row of a trip view.
        :param df: Typed trip DataFrame
        :param save_path: Directory or file path to save predictions
        :return: Copy of df with prediction and timestamp columns
        """
        model = self._require_model()

        out = df.copy()
        out["prediction"] = model.predict(out)
        out["timestamp"] = datetime.now()

        if save_path:
            if os.path.isdir(save_path):
                date_str = datetime.now().strftime("%Y%m%d")
                save_file = os.path.join(save_path, f"{date_str}_predictions.csv")
            else:
                save_file = save_path
            out.to_csv(save_file, index=False)
            logger.info("Predictions saved to %s", save_file)

        return out
