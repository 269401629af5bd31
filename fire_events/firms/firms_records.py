"""
FIRMS Detection Records Helper Module

Turns NASA FIRMS active-fire CSV exports into Detection records for the
event pipeline. Handles the FIRMS date/time encoding, the mixed categorical
and numeric confidence formats of the different instruments, and duplicate
detections of the same fire reported by several satellites.
"""

import io
import math
import os
from datetime import datetime, timezone
from typing import List, Optional, Union

import polars as pl

from ..events.types import Detection

# Columns read into Detection fields; everything else goes into extras
COORDINATE_COLUMNS = ["latitude", "longitude"]
CORE_COLUMNS = COORDINATE_COLUMNS + ["frp", "confidence", "acquired_at_utc"]

HIGH_CONFIDENCE_LABELS = ["high", "h", "nominal", "n"]
HIGH_CONFIDENCE_NUMERIC = 90  # MODIS reports confidence as 0-100

DUPLICATE_COLUMNS = ["latitude", "longitude", "acq_date", "acq_time"]


def parse_firms_utc(acq_date, acq_time) -> Optional[datetime]:
    """
    Parse a FIRMS acquisition date (YYYY-MM-DD) and time (HHMM) as UTC.

    The time may arrive without leading zeros ("45" means 00:45).

    Returns:
        Timezone-aware UTC datetime, or None if either part is malformed
    """
    if acq_date is None or acq_time is None:
        return None
    try:
        time_padded = str(acq_time).strip().zfill(4)
        parsed = datetime.strptime(
            f"{str(acq_date).strip()} {time_padded}", "%Y-%m-%d %H%M"
        )
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def read_firms_csv(source: Union[str, os.PathLike]) -> pl.DataFrame:
    """
    Read a FIRMS CSV export with every column kept as text.

    Args:
        source: Path to a CSV file, or the CSV text itself (recognised by
            containing at least one newline)

    Returns:
        DataFrame of raw records; empty when the input holds only a header

    Raises:
        FileNotFoundError: If source is a path that does not exist
    """
    if isinstance(source, os.PathLike) or "\n" not in source:
        if not os.path.exists(source):
            raise FileNotFoundError(f"FIRMS CSV file not found at: {source}")
        with open(source, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        text = source

    if text.strip().count("\n") < 1:  # header only → no detections
        return pl.DataFrame()

    return pl.read_csv(io.StringIO(text), infer_schema_length=0)


def add_acquired_at_column(df: pl.DataFrame) -> pl.DataFrame:
    """Add an 'acquired_at_utc' column parsed from acq_date/acq_time (null if malformed)."""
    if "acq_date" not in df.columns or "acq_time" not in df.columns:
        return df.with_columns(
            pl.lit(None, dtype=pl.Datetime("us", "UTC")).alias("acquired_at_utc")
        )

    return df.with_columns(
        pl.concat_str(
            [
                pl.col("acq_date").cast(pl.Utf8).str.strip_chars(),
                pl.col("acq_time").cast(pl.Utf8).str.strip_chars().str.zfill(4),
            ],
            separator=" ",
        )
        .str.strptime(pl.Datetime("us"), "%Y-%m-%d %H%M", strict=False)
        .dt.replace_time_zone("UTC")
        .alias("acquired_at_utc")
    )


def filter_high_confidence(df: pl.DataFrame, verbose: bool = True) -> pl.DataFrame:
    """
    Keep high and nominal confidence detections.

    VIIRS reports categorical labels (l/n/h), MODIS a 0-100 percentage;
    numeric values count as high confidence from 90 upwards.
    """
    if "confidence" not in df.columns:
        if verbose:
            print("[WARNING] No confidence column found in data!")
        return df

    confidence = pl.col("confidence").cast(pl.Utf8).str.strip_chars().str.to_lowercase()
    categorical_mask = confidence.is_in(HIGH_CONFIDENCE_LABELS)
    numeric_mask = confidence.cast(pl.Float64, strict=False) >= HIGH_CONFIDENCE_NUMERIC

    filtered = df.filter((categorical_mask | numeric_mask).fill_null(False))
    if verbose:
        print(f"   After confidence filtering: {len(filtered)} detections")
    return filtered


def drop_duplicate_detections(df: pl.DataFrame, verbose: bool = True) -> pl.DataFrame:
    """Remove repeated detections of the same fire from different satellites."""
    missing_cols = [col for col in DUPLICATE_COLUMNS if col not in df.columns]
    if missing_cols:
        return df

    before_dedup = len(df)
    df = df.unique(subset=DUPLICATE_COLUMNS, keep="first", maintain_order=True)
    after_dedup = len(df)
    if verbose and before_dedup != after_dedup:
        print(f"   Removed {before_dedup - after_dedup} duplicate detections")
    return df


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def detections_from_frame(df: pl.DataFrame, verbose: bool = True) -> List[Detection]:
    """
    Convert FIRMS records into Detection values, one per usable row.

    Rows without numeric coordinates are skipped. Missing or unparseable FRP
    becomes 0.0, blank confidence becomes None and rows whose timestamp
    cannot be parsed keep acquired_at_utc=None.

    Raises:
        ValueError: If the frame has no latitude/longitude columns
    """
    if df.is_empty():
        return []

    missing_cols = [col for col in COORDINATE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Missing required columns for detections: {missing_cols}")

    if "acquired_at_utc" not in df.columns:
        df = add_acquired_at_column(df)

    extra_cols = [col for col in df.columns if col not in CORE_COLUMNS]

    detections = []
    skipped = 0
    for row in df.iter_rows(named=True):
        lat = _to_float(row["latitude"])
        lon = _to_float(row["longitude"])
        if lat is None or lon is None:
            skipped += 1
            continue

        frp = _to_float(row.get("frp"))
        if frp is None or not frp >= 0:
            frp = 0.0

        confidence = row.get("confidence")
        confidence = str(confidence).strip() if confidence is not None else ""

        detections.append(
            Detection(
                lat=lat,
                lon=lon,
                radiative_power=frp,
                confidence=confidence or None,
                acquired_at_utc=row["acquired_at_utc"],
                extras={
                    col: str(row[col]) for col in extra_cols if row[col] is not None
                },
            )
        )

    if verbose and skipped:
        print(f"[WARNING] Skipped {skipped} records with invalid coordinates")

    return detections


def load_detections(
    source: Union[str, os.PathLike],
    high_confidence_only: bool = False,
    deduplicate: bool = True,
    verbose: bool = True,
) -> List[Detection]:
    """
    Read a FIRMS CSV export and return its detections.

    Args:
        source: Path to a CSV file, or the CSV text itself
        high_confidence_only: Drop low-confidence detections
        deduplicate: Drop the same detection reported by several satellites
        verbose: Print progress information
    """
    df = read_firms_csv(source)
    if df.is_empty():
        if verbose:
            print("[WARNING] No detections found in FIRMS input")
        return []

    if verbose:
        print(f"   Read {len(df)} raw FIRMS records")

    if high_confidence_only:
        df = filter_high_confidence(df, verbose=verbose)
    if deduplicate:
        df = drop_duplicate_detections(df, verbose=verbose)

    return detections_from_frame(add_acquired_at_column(df), verbose=verbose)
