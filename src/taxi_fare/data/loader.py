import logging
from pathlib import Path

import numpy as np
import pandas as pd

from taxi_fare.errors import DataFormatError
from taxi_fare.schema.records import TAXI_TRIP_SCHEMA, ColumnKind, Schema

logger = logging.getLogger("TaxiFare")


def _fits_int64(text: str, limits) -> bool:
    try:
        value = int(float(text)) if not text.lstrip("+-").isdigit() else int(text)
    except (ValueError, OverflowError):
        return False
    return limits.min <= value <= limits.max


class DataLoader:
    """
    Reads delimited trip files into typed DataFrames and writes them back.

    A file is accepted whole or not at all: any malformed row raises
    DataFormatError and no rows are returned.
    """

    def __init__(self, separator: str = ","):
        if len(separator) != 1:
            raise ValueError(f"Separator must be a single character, got {separator!r}")
        self.separator = separator

    # ----------------------------------------------------
    # Reading
    # ----------------------------------------------------
    def _read_raw(self, path: Path) -> pd.DataFrame:
        # header=None so pandas never guesses an index column; the first
        # line fixes the field count and longer rows fail to tokenize
        try:
            return pd.read_csv(
                path,
                sep=self.separator,
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError as exc:
            raise DataFormatError(f"{path}: file is empty, header row missing") from exc
        except pd.errors.ParserError as exc:
            raise DataFormatError(f"{path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DataFormatError(f"{path}: not valid UTF-8 text: {exc}") from exc

    def validate_header(self, header: list, schema: Schema, path: Path) -> None:
        if len(header) != len(schema):
            raise DataFormatError(
                f"{path}: header has {len(header)} columns, expected {len(schema)}"
            )
        mismatched = [
            (cell, column.source)
            for cell, column in zip(header, schema.columns)
            if not column.matches_header(cell)
        ]
        if mismatched:
            raise DataFormatError(f"{path}: header mismatch (found, expected): {mismatched}")

    def _convert(self, raw: pd.DataFrame, schema: Schema, path: Path) -> pd.DataFrame:
        if raw.empty:
            return pd.DataFrame({c.name: pd.Series(dtype=c.dtype) for c in schema.columns})

        values = raw.apply(lambda s: s.str.strip())
        missing = values.isna() | (values == "")
        if missing.values.any():
            line = int(missing.any(axis=1).idxmax()) + 1
            raise DataFormatError(f"{path}: line {line} has missing or empty fields")

        columns = {}
        for position, column in enumerate(schema.columns):
            series = values[position]
            if column.kind is ColumnKind.CATEGORICAL:
                columns[column.name] = series.astype(object)
                continue

            numbers = pd.to_numeric(series, errors="coerce")
            bad = numbers.isna() | ~np.isfinite(numbers.astype("float64"))
            if column.kind is ColumnKind.INTEGER:
                bad |= numbers.notna() & (numbers % 1 != 0)
                # compared as Python ints; float64 rounds the int64 bounds
                limits = np.iinfo("int64")
                bad |= series.map(lambda v: not _fits_int64(v, limits))
            if bad.any():
                line = int(bad.idxmax()) + 1
                raise DataFormatError(
                    f"{path}: line {line}: cannot parse {series[bad.idxmax()]!r} "
                    f"as {column.kind.value} for column {column.name}"
                )
            if column.kind is ColumnKind.FLOAT:
                # parse from text again so written values read back bit-exact
                columns[column.name] = series.astype(column.dtype)
            else:
                columns[column.name] = numbers.astype(column.dtype)

        return pd.DataFrame(columns, columns=schema.names).reset_index(drop=True)

    def load(self, path, schema: Schema = TAXI_TRIP_SCHEMA) -> pd.DataFrame:
        path = Path(path)
        raw = self._read_raw(path)
        self.validate_header(raw.iloc[0].tolist(), schema, path)

        df = self._convert(raw.iloc[1:], schema, path)
        logger.info("Loaded %d rows from %s", len(df), path)
        return df

    # ----------------------------------------------------
    # Writing
    # ----------------------------------------------------
    def save(self, df: pd.DataFrame, path, schema: Schema = TAXI_TRIP_SCHEMA) -> Path:
        """Write ``df`` with the file header spelling of ``schema``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df[schema.names].to_csv(
            path, sep=self.separator, header=schema.sources, index=False
        )
        return path
