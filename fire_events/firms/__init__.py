"""
FIRMS (Fire Information for Resource Management System) Package

Converts NASA FIRMS active-fire CSV exports into the Detection records
consumed by the fire event pipeline.
"""

from .firms_records import (
    parse_firms_utc,
    read_firms_csv,
    add_acquired_at_column,
    filter_high_confidence,
    drop_duplicate_detections,
    detections_from_frame,
    load_detections,
)

__all__ = [
    'parse_firms_utc',
    'read_firms_csv',
    'add_acquired_at_column',
    'filter_high_confidence',
    'drop_duplicate_detections',
    'detections_from_frame',
    'load_detections',
]
