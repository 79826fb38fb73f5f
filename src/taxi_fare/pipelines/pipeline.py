import logging
from enum import Enum

from taxi_fare.config import resolve_path
from taxi_fare.data.loader import DataLoader
from taxi_fare.evaluate.evaluator import Evaluator, RegressionMetrics
from taxi_fare.features.pipeline_builder import FeaturePipelineBuilder
from taxi_fare.inference.predictor import FarePredictor
from taxi_fare.persistence.model_store import ModelStore
from taxi_fare.schema.records import TAXI_TRIP_SCHEMA, FarePrediction, TaxiTrip
from taxi_fare.train.model import FittedModel
from taxi_fare.train.training import FareTrainer

logger = logging.getLogger("TaxiFare")

SAMPLE_TRIP = TaxiTrip(
    VendorId="VTS",
    RateCode="1",
    PassengerCount=1,
    TripTime=1140,
    TripDistance=3.75,
    PaymentType="CRD",
    FareAmount=0,  # to predict; observed fare is SAMPLE_ACTUAL_FARE
)
SAMPLE_ACTUAL_FARE = 15.5


class PipelineState(Enum):
    UNTRAINED = "untrained"
    TRAINED = "trained"
    PERSISTED = "persisted"
    LOADED = "loaded"
    PREDICTION_READY = "prediction_ready"


class TaxiFarePipeline:
    """
    Taxi fare prediction pipeline:
    - Loading train/test files
    - Feature pipeline construction and fitting
    - Evaluation on the test file
    - Model persistence and reload
    - Single-record prediction
    """

    def __init__(self, config):
        self.cfg = config
        self.schema = TAXI_TRIP_SCHEMA
        self.loader = DataLoader(separator=self.cfg.data.separator)
        self.builder = FeaturePipelineBuilder(self.cfg)
        self.evaluator = Evaluator()
        self.store = ModelStore()
        self.state = PipelineState.UNTRAINED

    @property
    def model_path(self):
        return resolve_path(self.cfg, "model_path")

    def load_data(self, key: str):
        return self.loader.load(resolve_path(self.cfg, key), self.schema)

    def train(self) -> FittedModel:
        df = self.load_data("train_csv")
        trainer = FareTrainer(self.cfg, schema=self.schema)
        model = trainer.fit(self.builder.build(), df)
        self.state = PipelineState.TRAINED

        self.store.save(model, self.schema, self.model_path)
        self.state = PipelineState.PERSISTED
        return model

    def evaluate(self, model: FittedModel) -> RegressionMetrics:
        metrics = self.evaluator.evaluate(model, self.load_data("test_csv"))
        metrics.print_summary()
        return metrics

    def test_single_prediction(self, model: FittedModel) -> FarePrediction:
        prediction = FarePredictor(model).predict(SAMPLE_TRIP)
        self.state = PipelineState.PREDICTION_READY

        print("**********************************************************************")
        print(f"Predicted fare: {prediction.FareAmount:.4f}, actual fare: {SAMPLE_ACTUAL_FARE}")
        print("**********************************************************************")
        return prediction

    def load_model(self) -> FittedModel:
        model, self.schema = self.store.load(self.model_path)
        self.state = PipelineState.LOADED
        return model

    def load_and_use_model(self) -> FarePrediction:
        return self.test_single_prediction(self.load_model())

    def score_test_file(self):
        """Batch-score the test file into ``paths.output_dir``."""
        output_dir = resolve_path(self.cfg, "output_dir")
        output_dir.mkdir(parents=True, exist_ok=True)
        predictor = FarePredictor(self.load_model())
        return predictor.batch_inference(self.load_data("test_csv"), save_path=str(output_dir))

    def run(self):
        model = self.train()
        metrics = self.evaluate(model)
        prediction = self.test_single_prediction(model)
        return model, metrics, prediction
