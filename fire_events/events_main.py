#!/usr/bin/env python3
"""
Fire Events - Main Entry Point

Groups satellite hotspot detections into fire events and classifies the
activity trend of each event.

Process:
1. Keeps detections acquired within the selected time range
2. Clusters co-located detections with geodesic DBSCAN
3. Reduces each cluster to a fire event (weighted centroid, FRP, confidence)
4. Compares activity near each event in the newer and older halves of the
   range to label it growing, shrinking, stable or extinguished

Usage:
    python -m fire_events.events_main --input fires.csv --time_range 48h
    python -m fire_events.events_main --input fires.csv --time_range 7d --output_dir results
"""

import argparse
import os
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from .config import (
    DEFAULT_EPS_METERS,
    DEFAULT_MIN_PTS,
    DEFAULT_TIME_RANGE,
    TIME_RANGE_HOURS,
    validate_clustering_params,
    validate_time_range,
)
from .events.aggregation import build_events
from .events.clustering import find_clusters
from .events.temporal import ensure_utc, select_within_range
from .events.trends import DEFAULT_THRESHOLDS, TrendThresholds, analyze_trends
from .events.types import Detection, FireEventsResult
from .firms.firms_records import (
    add_acquired_at_column,
    detections_from_frame,
    drop_duplicate_detections,
    filter_high_confidence,
    read_firms_csv,
)
from .helpers.export_geojson import create_events_geojson
from .helpers.summary import events_to_frame, print_sample_events, print_summary_statistics
from .validation.data_validator import validate_and_report


def detect_fire_events(
    detections: Sequence[Detection],
    now: datetime,
    time_range: str = DEFAULT_TIME_RANGE,
    eps_meters: float = DEFAULT_EPS_METERS,
    min_pts: int = DEFAULT_MIN_PTS,
    thresholds: TrendThresholds = DEFAULT_THRESHOLDS,
    verbose: bool = False,
) -> FireEventsResult:
    """
    Run the full filter -> cluster -> aggregate -> classify pipeline.

    Args:
        detections: Every detection supplied by the ingestion layer
        now: Reference instant for all time windows
        time_range: Named range ('6h', '12h', '24h', '48h', '7d')
        eps_meters: DBSCAN neighborhood radius, also used as the trend radius
        min_pts: DBSCAN minimum neighbor count
        thresholds: Trend rule constants
        verbose: Print progress information

    Returns:
        FireEventsResult with annotated events and the time-filtered detections

    Raises:
        ConfigurationError: If any parameter is invalid
    """
    validate_time_range(time_range)
    validate_clustering_params(eps_meters, min_pts)
    now = ensure_utc(now)

    if verbose:
        print(f"1. Filtering {len(detections)} detections to the last {time_range}...")
    windowed = select_within_range(detections, now, time_range)
    if verbose:
        print(f"   {len(windowed)} detections in window")

    if verbose:
        print(f"2. Clustering detections within {eps_meters:g}m (min_pts={min_pts})...")
    clusters = find_clusters(windowed, eps_meters=eps_meters, min_pts=min_pts)

    events = build_events(windowed, clusters)
    if verbose:
        clustered = sum(event.count for event in events)
        print(f"   Grouped {clustered} detections into {len(events)} fire events")

    if verbose:
        print("3. Classifying event trends...")
    events = analyze_trends(
        events,
        detections,
        now,
        time_range,
        event_radius_m=eps_meters,
        thresholds=thresholds,
    )

    return FireEventsResult(
        events=tuple(events),
        detections=tuple(windowed),
        time_range=time_range,
        generated_at_utc=now,
    )


def run_event_detection(
    input_path: str,
    time_range: str = DEFAULT_TIME_RANGE,
    now: Optional[datetime] = None,
    eps_meters: float = DEFAULT_EPS_METERS,
    min_pts: int = DEFAULT_MIN_PTS,
    high_confidence_only: bool = False,
    output_dir: str = "../output",
) -> FireEventsResult:
    """
    Load a FIRMS CSV export, detect fire events and save them as GeoJSON.

    Args:
        input_path (str): Path to the FIRMS CSV export
        time_range (str): Named range to analyse
        now (datetime, optional): Reference instant; defaults to the current time
        eps_meters (float): Clustering radius in meters
        min_pts (int): Clustering minimum neighbor count
        high_confidence_only (bool): Drop low-confidence detections
        output_dir (str): Directory to save the GeoJSON result
    """
    print("=== Fire Event Detection ===\n")

    if now is None:
        now = datetime.now(timezone.utc)

    os.makedirs(output_dir, exist_ok=True)

    print(f"Loading FIRMS detections from {input_path}...")
    df = read_firms_csv(input_path)

    print("\n=== Validating Input ===")
    if not validate_and_report(df):
        print("[WARNING] Some validation checks failed - please review the issues above")

    if df.is_empty():
        print("No detections available. Exiting.")
        return FireEventsResult(
            events=(), detections=(), time_range=time_range, generated_at_utc=ensure_utc(now)
        )

    if high_confidence_only:
        df = filter_high_confidence(df)
    df = drop_duplicate_detections(df)
    detections = detections_from_frame(add_acquired_at_column(df))
    print(f"   Loaded {len(detections)} detections\n")

    result = detect_fire_events(
        detections,
        now,
        time_range=time_range,
        eps_meters=eps_meters,
        min_pts=min_pts,
        verbose=True,
    )

    output_file = os.path.join(output_dir, f"fire_events_{time_range}.geojson")
    total_features = create_events_geojson(result, output_file)

    print("\n=== Detection Complete ===")
    print(f"[SUCCESS] Saved {total_features} features to: {output_file}")

    print_summary_statistics(result)
    if result.events:
        print_sample_events(events_to_frame(result.events))

    return result


def main():
    """Main command-line interface for fire event detection."""
    parser = argparse.ArgumentParser(
        description="Group FIRMS hotspot detections into fire events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fire_events.events_main --input fires.csv
  python -m fire_events.events_main --input fires.csv --time_range 7d --output_dir results
  python -m fire_events.events_main --input fires.csv --now 2024-01-15T12:00:00+00:00
        """,
    )

    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to a FIRMS CSV export",
    )

    parser.add_argument(
        "--time_range",
        type=str,
        default=DEFAULT_TIME_RANGE,
        choices=list(TIME_RANGE_HOURS),
        help=f"Time range to analyse (default: {DEFAULT_TIME_RANGE})",
    )

    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Reference instant in ISO-8601 (default: current UTC time)",
    )

    parser.add_argument(
        "--eps_meters",
        type=float,
        default=DEFAULT_EPS_METERS,
        help=f"Clustering radius in meters (default: {DEFAULT_EPS_METERS:g})",
    )

    parser.add_argument(
        "--min_pts",
        type=int,
        default=DEFAULT_MIN_PTS,
        help=f"Minimum neighbors to form a fire event (default: {DEFAULT_MIN_PTS})",
    )

    parser.add_argument(
        "--high_confidence",
        action="store_true",
        help="Keep only high and nominal confidence detections",
    )

    parser.add_argument(
        "--output_dir",
        type=str,
        default="../output",
        help="Directory to save results (default: ../output)",
    )

    args = parser.parse_args()

    try:
        run_event_detection(
            input_path=args.input,
            time_range=args.time_range,
            now=args.now,
            eps_meters=args.eps_meters,
            min_pts=args.min_pts,
            high_confidence_only=args.high_confidence,
            output_dir=args.output_dir,
        )
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
