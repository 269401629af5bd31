"""
Fire Events

Turns satellite thermal-anomaly (hotspot) detections into discrete fire
events and labels each event's activity trend.

Subpackages:
- events: clustering, aggregation and trend classification core
- firms: NASA FIRMS CSV records -> Detection values
- helpers: GeoJSON export and tabular summaries
- validation: input quality checks
"""

from .config import ConfigurationError
from .events import (
    Detection,
    FireEvent,
    FireEventsResult,
    TimeWindow,
    Trend,
    TrendThresholds,
    analyze_trends,
    build_events,
    classify_trend,
    distance_meters,
    find_clusters,
)
from .events_main import detect_fire_events
from .firms import load_detections

__all__ = [
    "ConfigurationError",
    "Detection",
    "FireEvent",
    "FireEventsResult",
    "TimeWindow",
    "Trend",
    "TrendThresholds",
    "analyze_trends",
    "build_events",
    "classify_trend",
    "distance_meters",
    "find_clusters",
    "detect_fire_events",
    "load_detections",
]
