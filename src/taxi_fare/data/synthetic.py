from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from taxi_fare.data.loader import DataLoader
from taxi_fare.schema.records import TAXI_TRIP_SCHEMA

logger = logging.getLogger("TaxiFare")

VENDORS = ["VTS", "CMT"]
RATE_CODES = ["1", "2", "3", "4", "5"]
PAYMENT_TYPES = ["CRD", "CSH", "NOC", "DIS"]

# Flat airport fare for rate code 2
JFK_FLAT_FARE = 52.0


def generate_trips(n: int = 5_000, seed: int = 0) -> pd.DataFrame:
    """Generate trips shaped like the reference taxi-fare files."""
    rng = np.random.default_rng(seed)

    trip_distance = rng.lognormal(mean=0.7, sigma=0.7, size=n).clip(0.1, 30.0).round(2)
    speed_mph = rng.normal(11, 3, size=n).clip(3, 35)
    trip_time = ((trip_distance / speed_mph) * 3600).astype(int).clip(30, 7200)

    rate_code = rng.choice(RATE_CODES, size=n, p=[0.9, 0.04, 0.02, 0.02, 0.02])
    fare = 3.0 + 3.3 * trip_distance + rng.normal(0, 0.8, size=n)
    fare = np.where(rate_code == "2", JFK_FLAT_FARE, fare)
    fare = np.where(np.isin(rate_code, ["3", "4"]), fare * 1.5, fare)
    fare = fare.clip(2.5, 300).round(2)

    df = pd.DataFrame({
        "VendorId": rng.choice(VENDORS, size=n, p=[0.55, 0.45]),
        "RateCode": rate_code,
        "PassengerCount": rng.choice([1, 2, 3, 4, 5, 6], size=n, p=[0.7, 0.12, 0.06, 0.04, 0.05, 0.03]),
        "TripTime": trip_time,
        "TripDistance": trip_distance,
        "PaymentType": rng.choice(PAYMENT_TYPES, size=n, p=[0.6, 0.37, 0.02, 0.01]),
        "FareAmount": fare,
    })
    return df.astype({c.name: c.dtype for c in TAXI_TRIP_SCHEMA.columns})


def write_reference_files(
    train_path,
    test_path,
    n_train: int = 5_000,
    n_test: int = 1_000,
    seed: int = 0,
    separator: str = ",",
) -> tuple[Path, Path]:
    """Write synthetic train/test CSV files in the reference layout."""
    loader = DataLoader(separator=separator)
    train = loader.save(generate_trips(n_train, seed=seed), train_path)
    test = loader.save(generate_trips(n_test, seed=seed + 1), test_path)
    logger.info("Generated synthetic %s (%d rows) and %s (%d rows)", train, n_train, test, n_test)
    return train, test
