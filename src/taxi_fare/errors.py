"""Error kinds raised by the taxi fare pipeline.

Nothing in the pipeline recovers from these; they surface to the caller
and terminate the run.
"""


class TaxiFareError(Exception):
    """Base class for all pipeline errors."""


class DataFormatError(TaxiFareError, ValueError):
    """Malformed or missing input row, column or header."""


class TrainingError(TaxiFareError, ValueError):
    """Training data does not fit the pipeline's expected columns."""


class PersistenceError(TaxiFareError):
    """Model artifact cannot be written, read or understood."""


class PredictionError(TaxiFareError, ValueError):
    """A single record cannot be scored."""
