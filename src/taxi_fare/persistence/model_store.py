import logging
from pathlib import Path

import joblib

from taxi_fare.errors import PersistenceError
from taxi_fare.schema.records import Schema
from taxi_fare.train.model import FittedModel

logger = logging.getLogger("TaxiFare")

FORMAT_VERSION = 1


class ModelStore:
    """
    Saves a fitted model together with the schema of the data it was
    trained on, and loads both back.
    """

    def __init__(self, compress: int = 3):
        self.compress = compress

    def save(self, model: FittedModel, schema: Schema, path) -> Path:
        path = Path(path)
        payload = {
            "format_version": FORMAT_VERSION,
            "model": model,
            "schema": schema.to_list(),
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            joblib.dump(payload, path, compress=self.compress)
        except OSError as exc:
            raise PersistenceError(f"Cannot write model to {path}: {exc}") from exc

        logger.info("Model saved to %s", path)
        return path

    def load(self, path) -> tuple[FittedModel, Schema]:
        path = Path(path)
        if not path.is_file():
            raise PersistenceError(f"Model file not found: {path}")

        try:
            payload = joblib.load(path)
        except Exception as exc:
            # joblib surfaces corrupt files as a mix of pickle, zlib and EOF errors
            raise PersistenceError(f"Cannot read model from {path}: {exc}") from exc

        if not isinstance(payload, dict) or "format_version" not in payload:
            raise PersistenceError(f"{path} is not a taxi fare model artifact")
        if payload["format_version"] != FORMAT_VERSION:
            raise PersistenceError(
                f"{path} has format version {payload['format_version']}, expected {FORMAT_VERSION}"
            )

        model = payload.get("model")
        if not isinstance(model, FittedModel):
            raise PersistenceError(f"{path} does not contain a fitted model")
        try:
            schema = Schema.from_list(payload["schema"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"{path} has an invalid schema: {exc}") from exc

        logger.info("Model loaded from %s", path)
        return model, schema
