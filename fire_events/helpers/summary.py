"""
Summary utilities for fire event results.

Provides a tabular (polars) view of events and console summaries of a
pipeline run.
"""

from collections import Counter
from typing import Sequence

import polars as pl

from ..events.temporal import time_ago
from ..events.types import FireEvent, FireEventsResult

EVENT_SUMMARY_SCHEMA = {
    "event_id": pl.Utf8,
    "event_ordinal": pl.Int64,
    "centroid_lat": pl.Float64,
    "centroid_lon": pl.Float64,
    "count": pl.Int64,
    "frp_sum": pl.Float64,
    "frp_avg": pl.Float64,
    "last_seen_utc": pl.Datetime("us", "UTC"),
    "trend": pl.Utf8,
    "current_window_count": pl.Int64,
    "previous_window_count": pl.Int64,
    "current_window_frp": pl.Float64,
    "previous_window_frp": pl.Float64,
    "trend_reason": pl.Utf8,
}


def events_to_frame(events: Sequence[FireEvent]) -> pl.DataFrame:
    """
    Get a summary of fire events with one row per event.

    Args:
        events: Events from one pipeline run

    Returns:
        DataFrame sorted by event ordinal; empty (with schema) for no events
    """
    rows = [
        {
            "event_id": event.id,
            "event_ordinal": int(event.id.rsplit("-", 1)[-1]),
            "centroid_lat": event.centroid[0],
            "centroid_lon": event.centroid[1],
            "count": event.count,
            "frp_sum": event.frp_sum,
            "frp_avg": event.frp_avg,
            "last_seen_utc": event.last_seen_utc,
            "trend": event.trend.value if event.trend is not None else None,
            "current_window_count": event.current_window_count,
            "previous_window_count": event.previous_window_count,
            "current_window_frp": event.current_window_frp,
            "previous_window_frp": event.previous_window_frp,
            "trend_reason": event.trend_reason,
        }
        for event in events
    ]
    return pl.DataFrame(rows, schema=EVENT_SUMMARY_SCHEMA).sort("event_ordinal")


def print_summary_statistics(result: FireEventsResult) -> None:
    """Print summary statistics for a pipeline run."""

    print("\n=== Summary Statistics ===")
    print(f"Detections in {result.time_range} window: {len(result.detections)}")
    print(f"Fire events: {len(result.events)}")

    if not result.events:
        return

    clustered = sum(event.count for event in result.events)
    print(
        f"Clustered detections: {clustered}/{len(result.detections)} "
        f"({clustered / len(result.detections) * 100:.1f}%)"
    )

    trends = Counter(
        event.trend.value for event in result.events if event.trend is not None
    )
    for trend, count in sorted(trends.items()):
        print(f"  {trend}: {count} events")

    largest = max(result.events, key=lambda event: event.frp_sum)
    print(
        f"Most intense event: {largest.id} with {largest.count} detections, "
        f"{largest.frp_sum:.1f} MW total"
    )
    if largest.last_seen_utc is not None:
        print(f"  Last seen {time_ago(largest.last_seen_utc, result.generated_at_utc)}")


def print_sample_events(frame: pl.DataFrame, n: int = 10) -> None:
    """Print the first rows of an event summary frame."""

    print("\n=== Sample Events ===")
    key_columns = [
        "event_id",
        "centroid_lat",
        "centroid_lon",
        "count",
        "frp_sum",
        "trend",
    ]

    # Only show columns that exist
    available_columns = [col for col in key_columns if col in frame.columns]

    try:
        print(frame.select(available_columns).head(n))
    except UnicodeEncodeError:
        # Handle Unicode encoding issues on Windows
        print(
            "Sample data contains special characters that cannot be displayed in this terminal."
        )
        print(f"Columns: {available_columns}")
        print(f"Number of rows: {len(frame)}")
