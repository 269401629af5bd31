"""
Output Helpers Package

Contains utility modules for exporting and summarising fire event results.
"""

from .export_geojson import (
    event_to_record,
    detection_to_record,
    create_event_feature,
    create_detection_feature,
    create_geojson_featurecollection,
    save_geojson,
    create_events_geojson,
)
from .summary import events_to_frame, print_summary_statistics, print_sample_events

__all__ = [
    "event_to_record",
    "detection_to_record",
    "create_event_feature",
    "create_detection_feature",
    "create_geojson_featurecollection",
    "save_geojson",
    "create_events_geojson",
    "events_to_frame",
    "print_summary_statistics",
    "print_sample_events",
]
