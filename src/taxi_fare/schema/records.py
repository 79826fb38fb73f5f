from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import pandas as pd
from pydantic import BaseModel, ConfigDict


class TaxiTrip(BaseModel):
    """One taxi trip observation. ``FareAmount`` is the training label."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", coerce_numbers_to_str=True, allow_inf_nan=False,
    )

    VendorId: str
    RateCode: str
    PassengerCount: int
    TripTime: int
    TripDistance: float
    PaymentType: str
    FareAmount: float = 0.0


class FarePrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    FareAmount: float


class ColumnKind(str, Enum):
    CATEGORICAL = "categorical"
    INTEGER = "integer"
    FLOAT = "float"


_DTYPES = {
    ColumnKind.CATEGORICAL: object,
    ColumnKind.INTEGER: "int64",
    ColumnKind.FLOAT: "float64",
}


@dataclass(frozen=True)
class Column:
    name: str
    kind: ColumnKind
    source: str

    @property
    def dtype(self):
        return _DTYPES[self.kind]

    def matches_header(self, header: str) -> bool:
        """True if a file header cell names this column (case and underscores ignored)."""
        cell = _normalize(header)
        return cell in (_normalize(self.name), _normalize(self.source))


def _normalize(name: str) -> str:
    return str(name).strip().replace("_", "").lower()


@dataclass(frozen=True)
class Schema:
    """Ordered (column name, semantic type) pairs describing a tabular view."""

    columns: tuple[Column, ...]

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def sources(self) -> list[str]:
        return [c.source for c in self.columns]

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    def to_list(self) -> list[dict]:
        return [
            {"name": c.name, "kind": c.kind.value, "source": c.source}
            for c in self.columns
        ]

    @classmethod
    def from_list(cls, items: Iterable[dict]) -> "Schema":
        return cls(tuple(
            Column(item["name"], ColumnKind(item["kind"]), item["source"])
            for item in items
        ))


TAXI_TRIP_SCHEMA = Schema((
    Column("VendorId", ColumnKind.CATEGORICAL, "vendor_id"),
    Column("RateCode", ColumnKind.CATEGORICAL, "rate_code"),
    Column("PassengerCount", ColumnKind.INTEGER, "passenger_count"),
    Column("TripTime", ColumnKind.INTEGER, "trip_time_in_secs"),
    Column("TripDistance", ColumnKind.FLOAT, "trip_distance"),
    Column("PaymentType", ColumnKind.CATEGORICAL, "payment_type"),
    Column("FareAmount", ColumnKind.FLOAT, "fare_amount"),
))


def records_to_frame(records: Iterable[TaxiTrip], schema: Schema = TAXI_TRIP_SCHEMA) -> pd.DataFrame:
    """Build a typed DataFrame from trip records, columns in schema order."""
    rows = [record.model_dump() for record in records]
    df = pd.DataFrame(rows, columns=schema.names)
    return df.astype({c.name: c.dtype for c in schema.columns})
