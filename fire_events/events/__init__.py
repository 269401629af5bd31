"""
Fire Events Core Package

Groups satellite hotspot detections into fire events with geodesic DBSCAN,
reduces each cluster to summary statistics and classifies its recent
activity trend. Everything in this package is a pure function of its
arguments.
"""

from .types import (
    Detection,
    FireEvent,
    FireEventsResult,
    TimeWindow,
    Trend,
    TrendInputs,
)
from .geo import distance_meters
from .temporal import (
    select_within_range,
    select_previous_half,
    select_current_half,
    select_with_coverage_extension,
    select_in_window,
    select_until,
)
from .clustering import find_clusters
from .aggregation import build_events
from .trends import TrendThresholds, analyze_trends, build_trend_inputs, classify_trend

__all__ = [
    'Detection',
    'FireEvent',
    'FireEventsResult',
    'TimeWindow',
    'Trend',
    'TrendInputs',
    'distance_meters',
    'select_within_range',
    'select_previous_half',
    'select_current_half',
    'select_with_coverage_extension',
    'select_in_window',
    'select_until',
    'find_clusters',
    'build_events',
    'TrendThresholds',
    'analyze_trends',
    'build_trend_inputs',
    'classify_trend',
]
