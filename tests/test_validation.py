import polars as pl

from fire_events.firms.firms_records import read_firms_csv
from fire_events.validation.data_validator import (
    validate_and_report,
    validate_detection_frame,
)


def _frame(**overrides):
    data = {
        "latitude": ["-42.1", "-42.2", "-42.3"],
        "longitude": ["-71.5", "-71.6", "-71.7"],
        "acq_date": ["2024-01-15", "2024-01-15", "2024-01-15"],
        "acq_time": ["0345", "0400", "1200"],
        "confidence": ["n", "h", "l"],
        "frp": ["5.2", "3.1", "0.0"],
    }
    data.update(overrides)
    return pl.DataFrame(data)


def test_clean_frame_is_valid():
    result = validate_detection_frame(_frame())
    assert result["is_valid"]
    assert result["record_count"] == 3
    assert result["errors"] == []
    assert result["warnings"] == []


def test_missing_columns_fail_validation():
    result = validate_detection_frame(_frame().drop("acq_time"))
    assert not result["is_valid"]
    assert result["missing_columns"] == ["acq_time"]


def test_too_few_records_fail_validation():
    result = validate_detection_frame(_frame(), min_records=10)
    assert not result["is_valid"]


def test_out_of_range_latitude_is_a_warning():
    result = validate_detection_frame(_frame(latitude=["-42.1", "95.0", "-42.3"]))
    assert result["is_valid"]
    assert any("latitude" in w for w in result["warnings"])


def test_non_numeric_coordinates():
    some_bad = validate_detection_frame(_frame(longitude=["-71.5", "abc", "-71.7"]))
    assert some_bad["is_valid"]
    assert some_bad["has_null_coordinates"]

    all_bad = validate_detection_frame(_frame(longitude=["a", "b", "c"]))
    assert not all_bad["is_valid"]
    assert not all_bad["data_types_valid"]


def test_unparseable_times():
    partly = validate_detection_frame(_frame(acq_date=["2024-01-15", "bad", "2024-01-15"]))
    assert partly["is_valid"]
    assert any("acquisition times" in w for w in partly["warnings"])

    entirely = validate_detection_frame(_frame(acq_date=["x", "y", "z"]))
    assert not entirely["is_valid"]


def test_negative_frp_and_duplicates_warn():
    result = validate_detection_frame(
        _frame(
            frp=["5.2", "-1.0", "0.0"],
            latitude=["-42.1", "-42.1", "-42.3"],
            longitude=["-71.5", "-71.5", "-71.7"],
            acq_time=["0345", "0345", "1200"],
        )
    )
    assert result["is_valid"]
    assert any("negative frp" in w for w in result["warnings"])
    assert any("duplicate" in w for w in result["warnings"])


def test_validate_and_report_prints(firms_csv_text, capsys):
    assert validate_and_report(read_firms_csv(firms_csv_text))
    output = capsys.readouterr().out
    assert "VALIDATION REPORT" in output
    assert "PASSED" in output


def test_empty_frame_fails():
    assert not validate_and_report(pl.DataFrame(), print_report=False)
