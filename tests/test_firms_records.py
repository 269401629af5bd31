from datetime import datetime, timezone

import polars as pl
import pytest

from fire_events.firms.firms_records import (
    add_acquired_at_column,
    detections_from_frame,
    drop_duplicate_detections,
    filter_high_confidence,
    load_detections,
    parse_firms_utc,
    read_firms_csv,
)


@pytest.mark.parametrize(
    "acq_date, acq_time, expected",
    [
        ("2024-01-15", "0345", datetime(2024, 1, 15, 3, 45, tzinfo=timezone.utc)),
        ("2024-01-15", "45", datetime(2024, 1, 15, 0, 45, tzinfo=timezone.utc)),
        ("2024-01-15", 345, datetime(2024, 1, 15, 3, 45, tzinfo=timezone.utc)),
        ("2024-13-01", "1200", None),
        ("bad-date", "1200", None),
        ("2024-01-15", "2561", None),
        (None, "1200", None),
    ],
)
def test_parse_firms_utc(acq_date, acq_time, expected):
    assert parse_firms_utc(acq_date, acq_time) == expected


def test_read_csv_text(firms_csv_text):
    df = read_firms_csv(firms_csv_text)
    assert len(df) == 6
    assert df.schema["latitude"] == pl.Utf8


def test_read_csv_file(tmp_path, firms_csv_text):
    path = tmp_path / "fires.csv"
    path.write_text(firms_csv_text)
    assert len(read_firms_csv(path)) == 6
    assert len(read_firms_csv(str(path))) == 6


def test_header_only_input_is_empty(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("latitude,longitude,acq_date,acq_time\n")
    assert read_firms_csv(path).is_empty()
    assert read_firms_csv("latitude,longitude\n").is_empty()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_firms_csv(str(tmp_path / "missing.csv"))


def test_acquired_at_column(firms_csv_text):
    df = add_acquired_at_column(read_firms_csv(firms_csv_text))
    values = df["acquired_at_utc"].to_list()

    assert values[0] == datetime(2024, 1, 15, 3, 45, tzinfo=timezone.utc)
    assert values[2] == datetime(2024, 1, 15, 0, 45, tzinfo=timezone.utc)
    assert values[3] is None


def test_acquired_at_column_without_time_columns():
    df = add_acquired_at_column(pl.DataFrame({"latitude": ["1.0"], "longitude": ["2.0"]}))
    assert df["acquired_at_utc"].null_count() == 1


def test_drop_duplicates_keeps_first_report(firms_csv_text):
    df = drop_duplicate_detections(read_firms_csv(firms_csv_text), verbose=False)
    assert len(df) == 5
    assert df["satellite"][0] == "N"


def test_high_confidence_filter(firms_csv_text):
    df = filter_high_confidence(read_firms_csv(firms_csv_text), verbose=False)
    assert df["confidence"].to_list() == ["n", "n", "h", "95"]


def test_high_confidence_filter_without_column():
    df = pl.DataFrame({"latitude": ["1.0"], "longitude": ["2.0"]})
    assert filter_high_confidence(df, verbose=False).equals(df)


def test_detections_from_frame(firms_csv_text):
    df = add_acquired_at_column(read_firms_csv(firms_csv_text))
    detections = detections_from_frame(df, verbose=False)

    # The row with a non-numeric latitude is skipped
    assert len(detections) == 5
    first = detections[0]
    assert first.lat == pytest.approx(-42.1)
    assert first.lon == pytest.approx(-71.5)
    assert first.radiative_power == pytest.approx(5.2)
    assert first.confidence == "n"
    assert first.acquired_at_utc == datetime(2024, 1, 15, 3, 45, tzinfo=timezone.utc)
    assert first.extras["satellite"] == "N"
    assert first.extras["bright_ti4"] == "330.1"
    assert "latitude" not in first.extras

    # Blank FRP becomes 0.0, unparseable timestamps stay None
    assert detections[2].radiative_power == 0.0
    assert detections[3].acquired_at_utc is None


def test_detections_from_frame_normalizes_values():
    df = pl.DataFrame(
        {
            "latitude": ["-42.0"],
            "longitude": ["-71.0"],
            "frp": ["-3"],
            "confidence": ["  "],
        }
    )
    [detection] = detections_from_frame(df, verbose=False)
    assert detection.radiative_power == 0.0
    assert detection.confidence is None
    assert detection.acquired_at_utc is None
    assert dict(detection.extras) == {}


def test_detections_from_frame_requires_coordinates():
    with pytest.raises(ValueError):
        detections_from_frame(pl.DataFrame({"lat": ["1.0"], "lon": ["2.0"]}))


def test_detections_from_empty_frame():
    assert detections_from_frame(pl.DataFrame()) == []


def test_load_detections(firms_csv_text):
    detections = load_detections(firms_csv_text, verbose=False)
    assert len(detections) == 4
    assert [d.confidence for d in detections] == ["n", "h", "l", "50"]


def test_load_high_confidence_detections(firms_csv_text):
    detections = load_detections(firms_csv_text, high_confidence_only=True, verbose=False)
    assert [d.confidence for d in detections] == ["n", "h"]


def test_load_without_deduplication(firms_csv_text):
    detections = load_detections(firms_csv_text, deduplicate=False, verbose=False)
    assert len(detections) == 5
