"""
Data validation utilities for FIRMS detection input.

Checks a raw detection frame before it enters the event pipeline and
reports problems that would silently shrink the result: missing columns,
bad coordinates, unparseable acquisition times and negative FRP.
"""

from typing import Any, Dict, List, Optional

import polars as pl

from ..firms.firms_records import DUPLICATE_COLUMNS, add_acquired_at_column


def _check_coordinate(
    df: pl.DataFrame, col: str, low: float, high: float, result: Dict[str, Any]
) -> Optional[str]:
    """Record warnings for one coordinate column; return a type issue if any."""
    values = df[col].cast(pl.Float64, strict=False)
    unparseable = values.null_count() - df[col].null_count()
    if unparseable == len(df):
        print(f"[ERROR] {col.capitalize()} column is not numeric")
        return f"{col} column is not numeric"

    if values.null_count() > 0:
        result["has_null_coordinates"] = True
        null_count = values.null_count()
        result["warnings"].append(f"Found {null_count} null or non-numeric values in {col} column")
        print(f"[WARNING] Found {null_count} null {col} values")

    valid = values.drop_nulls()
    invalid_count = int((~valid.is_between(low, high)).sum())
    if invalid_count > 0:
        result["warnings"].append(
            f"Found {invalid_count} {col} values outside valid range [{low:g}, {high:g}]"
        )
        print(f"[WARNING] Found {invalid_count} invalid {col} values")
    return None


def validate_detection_frame(
    df: pl.DataFrame,
    required_columns: Optional[List[str]] = None,
    min_records: int = 1,
) -> Dict[str, Any]:
    """
    Validate a FIRMS detection frame.

    Args:
        df: Raw detection records (as returned by read_firms_csv)
        required_columns: List of required column names. If None, uses default.
        min_records: Minimum number of records required

    Returns:
        Dictionary containing validation results and statistics
    """
    # Default required columns for fire detection data
    if required_columns is None:
        required_columns = ["latitude", "longitude", "acq_date", "acq_time"]

    validation_result = {
        "record_count": len(df),
        "column_count": len(df.columns),
        "missing_columns": [],
        "has_null_coordinates": False,
        "data_types_valid": True,
        "errors": [],
        "warnings": [],
    }

    if len(df) < min_records:
        validation_result["errors"].append(
            f"Insufficient records: {len(df)} (minimum required: {min_records})"
        )
        print(f"[ERROR] Insufficient records: {len(df)} < {min_records}")

    # Check for required columns
    missing_columns = [col for col in required_columns if col not in df.columns]
    validation_result["missing_columns"] = missing_columns

    if missing_columns:
        validation_result["errors"].append(
            f"Missing required columns: {missing_columns}"
        )
        print(f"[ERROR] Missing required columns: {missing_columns}")

    data_type_issues = []

    if not df.is_empty():
        # Check coordinate columns
        for col, low, high in (("latitude", -90, 90), ("longitude", -180, 180)):
            if col in df.columns:
                issue = _check_coordinate(df, col, low, high, validation_result)
                if issue:
                    data_type_issues.append(issue)

        # Check acquisition timestamps
        if "acq_date" in df.columns and "acq_time" in df.columns:
            unparseable = add_acquired_at_column(df)["acquired_at_utc"].null_count()
            if unparseable == len(df):
                data_type_issues.append("acq_date/acq_time cannot be parsed as timestamps")
                print("[ERROR] acq_date/acq_time are not valid FIRMS timestamps")
            elif unparseable > 0:
                validation_result["warnings"].append(
                    f"{unparseable} records have unparseable acquisition times and "
                    "will be left out of time-windowed views"
                )
                print(f"[WARNING] {unparseable} records have unparseable acquisition times")

        # Check radiative power values
        if "frp" in df.columns:
            frp = df["frp"].cast(pl.Float64, strict=False)
            negative_count = int((frp.drop_nulls() < 0).sum())
            if negative_count > 0:
                validation_result["warnings"].append(
                    f"Found {negative_count} negative frp values (treated as 0)"
                )
                print(f"[WARNING] Found {negative_count} negative frp values")

        # Check confidence values
        if "confidence" in df.columns and df["confidence"].null_count() == len(df):
            validation_result["warnings"].append("All confidence values are null")
            print("[WARNING] All confidence values are null")

        # Check for duplicate records
        if all(col in df.columns for col in DUPLICATE_COLUMNS):
            duplicate_count = len(df) - len(df.unique(subset=DUPLICATE_COLUMNS))
            if duplicate_count > 0:
                validation_result["warnings"].append(
                    f"Found {duplicate_count} potential duplicate records"
                )
                print(f"[WARNING] Found {duplicate_count} duplicate records")

    if data_type_issues:
        validation_result["data_types_valid"] = False
        validation_result["errors"].extend(data_type_issues)

    validation_result["is_valid"] = len(validation_result["errors"]) == 0

    return validation_result


def print_validation_report(validation_result: Dict[str, Any]) -> None:
    """Print a formatted validation report."""

    print("\n" + "=" * 50)
    print("VALIDATION REPORT")
    print("=" * 50)

    print("[DATA] Data Status:")
    print(f"   Records: {validation_result['record_count']:,}")
    print(f"   Columns: {validation_result['column_count']}")
    print(
        f"   Data types valid: {'OK' if validation_result['data_types_valid'] else 'FAIL'}"
    )

    if validation_result["errors"]:
        print(f"\n[ERROR] ERRORS ({len(validation_result['errors'])}):")
        for error in validation_result["errors"]:
            print(f"   - {error}")

    if validation_result["warnings"]:
        print(f"\n[WARN] WARNINGS ({len(validation_result['warnings'])}):")
        for warning in validation_result["warnings"]:
            print(f"   - {warning}")

    overall_status = "PASSED" if validation_result.get("is_valid", False) else "FAILED"
    print(f"\n[RESULT] Overall Status: {overall_status}")
    print("=" * 50)


def validate_and_report(
    df: pl.DataFrame,
    required_columns: Optional[List[str]] = None,
    min_records: int = 1,
    print_report: bool = True,
) -> bool:
    """
    Validate a detection frame and optionally print a formatted report.

    Args:
        df: Raw detection records
        required_columns: List of required column names
        min_records: Minimum number of records required
        print_report: Whether to print the validation report

    Returns:
        True if validation passed, False otherwise
    """
    validation_result = validate_detection_frame(
        df, required_columns=required_columns, min_records=min_records
    )

    if print_report:
        print_validation_report(validation_result)

    return validation_result.get("is_valid", False)
