import pandas as pd
import pytest

from taxi_fare.data.loader import DataLoader
from taxi_fare.errors import DataFormatError
from taxi_fare.schema.records import TAXI_TRIP_SCHEMA

HEADER = "vendor_id,rate_code,passenger_count,trip_time_in_secs,trip_distance,payment_type,fare_amount"


def _write(tmp_path, lines, name="trips.csv"):
    path = tmp_path / name
    path.write_text("\n".join(lines) + "\n")
    return path


def test_load_valid_file(tmp_path):
    path = _write(tmp_path, [
        HEADER,
        "VTS,1,1,1140,3.75,CRD,15.5",
        "CMT,1,2,300,0.9,CSH,5.0",
    ])
    df = DataLoader().load(path)

    assert list(df.columns) == TAXI_TRIP_SCHEMA.names
    assert len(df) == 2
    assert df.loc[0, "VendorId"] == "VTS"
    assert df.loc[0, "RateCode"] == "1"
    assert df.loc[0, "TripTime"] == 1140
    assert df.loc[1, "FareAmount"] == pytest.approx(5.0)
    assert df["PassengerCount"].dtype == "int64"
    assert df["TripDistance"].dtype == "float64"


def test_load_accepts_column_name_header(tmp_path):
    path = _write(tmp_path, [
        ",".join(TAXI_TRIP_SCHEMA.names),
        "VTS,1,1,1140,3.75,CRD,15.5",
    ])
    assert len(DataLoader().load(path)) == 1


def test_load_then_save_preserves_rows_and_values(tmp_path, train_df):
    loader = DataLoader()
    first = loader.save(train_df, tmp_path / "first.csv")
    loaded = loader.load(first)

    assert len(loaded) == len(train_df)
    pd.testing.assert_frame_equal(loaded, train_df.reset_index(drop=True), check_exact=True)

    second = loader.save(loaded, tmp_path / "second.csv")
    assert first.read_text() == second.read_text()


def test_too_many_fields_raises_and_loads_nothing(tmp_path):
    path = _write(tmp_path, [
        HEADER,
        "VTS,1,1,1140,3.75,CRD,15.5",
        "VTS,1,1,1140,3.75,CRD,15.5,extra",
    ])
    with pytest.raises(DataFormatError):
        DataLoader().load(path)


def test_too_few_fields_raises(tmp_path):
    path = _write(tmp_path, [
        HEADER,
        "VTS,1,1,1140,3.75,CRD,15.5",
        "VTS,1,1,1140",
    ])
    with pytest.raises(DataFormatError, match="line 3"):
        DataLoader().load(path)


def test_empty_field_raises(tmp_path):
    path = _write(tmp_path, [HEADER, "VTS,,1,1140,3.75,CRD,15.5"])
    with pytest.raises(DataFormatError):
        DataLoader().load(path)


def test_header_mismatch_raises(tmp_path):
    path = _write(tmp_path, [
        "vendor_id,rate_code,passenger_count,trip_time_in_secs,trip_distance,tip,fare_amount",
        "VTS,1,1,1140,3.75,CRD,15.5",
    ])
    with pytest.raises(DataFormatError, match="header mismatch"):
        DataLoader().load(path)


def test_missing_header_raises(tmp_path):
    path = _write(tmp_path, ["VTS,1,1,1140,3.75,CRD,15.5"])
    with pytest.raises(DataFormatError):
        DataLoader().load(path)


def test_empty_file_raises(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(DataFormatError, match="empty"):
        DataLoader().load(path)


def test_unparseable_number_raises(tmp_path):
    path = _write(tmp_path, [HEADER, "VTS,1,1,1140,far,CRD,15.5"])
    with pytest.raises(DataFormatError, match="TripDistance"):
        DataLoader().load(path)


def test_fractional_integer_raises(tmp_path):
    path = _write(tmp_path, [HEADER, "VTS,1,1.5,1140,3.75,CRD,15.5"])
    with pytest.raises(DataFormatError, match="PassengerCount"):
        DataLoader().load(path)


def test_header_only_gives_empty_typed_frame(tmp_path):
    df = DataLoader().load(_write(tmp_path, [HEADER]))
    assert df.empty
    assert list(df.columns) == TAXI_TRIP_SCHEMA.names


def test_custom_separator(tmp_path):
    path = _write(tmp_path, [
        HEADER.replace(",", ";"),
        "VTS;1;1;1140;3.75;CRD;15.5",
    ])
    df = DataLoader(separator=";").load(path)
    assert df.loc[0, "TripDistance"] == pytest.approx(3.75)


def test_invalid_utf8_raises(tmp_path):
    path = tmp_path / "trips.csv"
    path.write_bytes(HEADER.encode() + b"\nV\xffS,1,1,1140,3.75,CRD,15.5\n")
    with pytest.raises(DataFormatError, match="UTF-8"):
        DataLoader().load(path)


@pytest.mark.parametrize("value", ["inf", "-inf", "nan"])
def test_non_finite_float_raises(tmp_path, value):
    path = _write(tmp_path, [HEADER, f"VTS,1,1,1140,{value},CRD,15.5"])
    with pytest.raises(DataFormatError, match="TripDistance"):
        DataLoader().load(path)


def test_non_finite_integer_raises(tmp_path):
    path = _write(tmp_path, [HEADER, "VTS,1,1,inf,3.75,CRD,15.5"])
    with pytest.raises(DataFormatError, match="TripTime"):
        DataLoader().load(path)


@pytest.mark.parametrize("value", ["99999999999999999999", "-99999999999999999999", "1e20"])
def test_integer_out_of_int64_range_raises(tmp_path, value):
    path = _write(tmp_path, [HEADER, f"VTS,1,{value},1140,3.75,CRD,15.5"])
    with pytest.raises(DataFormatError, match="PassengerCount"):
        DataLoader().load(path)


def test_large_in_range_integer_loads(tmp_path):
    path = _write(tmp_path, [HEADER, "VTS,1,1,9000000000000000,3.75,CRD,15.5"])
    assert DataLoader().load(path).loc[0, "TripTime"] == 9000000000000000


def test_separator_must_be_single_character():
    with pytest.raises(ValueError):
        DataLoader(separator=";;")
