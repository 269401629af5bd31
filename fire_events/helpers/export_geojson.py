"""
GeoJSON Export Helper Module

Converts pipeline results into plain, JSON-serialisable records and GeoJSON
point features for the map layer: one point per fire event at its centroid,
and one point per detection for point-level display.
"""

import json
from datetime import datetime
from typing import List, Optional

from shapely.geometry import Point, mapping

from ..events.types import Detection, FireEvent, FireEventsResult


def _isoformat(instant: Optional[datetime]) -> Optional[str]:
    return instant.isoformat() if instant is not None else None


def event_to_record(event: FireEvent) -> dict:
    """
    Flatten a FireEvent into a JSON-serialisable dict (member detections excluded).

    Args:
        event: The event to convert

    Returns:
        dict: Event fields with ISO-8601 timestamps and the trend as its string value
    """
    lat, lon = event.centroid
    return {
        "id": event.id,
        "centroid_lat": float(lat),
        "centroid_lon": float(lon),
        "count": int(event.count),
        "frp_sum": float(event.frp_sum),
        "frp_avg": float(event.frp_avg),
        "confidence_histogram": dict(event.confidence_histogram),
        "last_seen_utc": _isoformat(event.last_seen_utc),
        "trend": event.trend.value if event.trend is not None else None,
        "trend_reason": event.trend_reason,
        "current_window_count": event.current_window_count,
        "previous_window_count": event.previous_window_count,
        "current_window_frp": event.current_window_frp,
        "previous_window_frp": event.previous_window_frp,
    }


def detection_to_record(detection: Detection) -> dict:
    """Flatten a Detection into a JSON-serialisable dict, source extras included."""
    record = dict(detection.extras)
    record.update(
        {
            "latitude": float(detection.lat),
            "longitude": float(detection.lon),
            "frp": float(detection.radiative_power),
            "confidence": detection.confidence,
            "acquired_at_utc": _isoformat(detection.acquired_at_utc),
        }
    )
    return record


def create_event_feature(event: FireEvent) -> dict:
    """
    Create a point feature at the event centroid.

    Args:
        event: Fire event

    Returns:
        dict: GeoJSON feature with point geometry
    """
    lat, lon = event.centroid
    properties = event_to_record(event)
    properties["feature_type"] = "fire_event"
    return {
        "type": "Feature",
        "geometry": mapping(Point(float(lon), float(lat))),  # GeoJSON order is [lon, lat]
        "properties": properties,
    }


def create_detection_feature(detection: Detection) -> dict:
    """Create a point feature for a single detection."""
    properties = detection_to_record(detection)
    properties["feature_type"] = "detection"
    return {
        "type": "Feature",
        "geometry": mapping(Point(float(detection.lon), float(detection.lat))),
        "properties": properties,
    }


def create_geojson_featurecollection(features: List[dict]) -> dict:
    """
    Create a GeoJSON FeatureCollection from a list of features.

    Args:
        features (list): List of GeoJSON features

    Returns:
        dict: GeoJSON FeatureCollection
    """
    return {"type": "FeatureCollection", "features": features}


def save_geojson(geojson: dict, filepath: str):
    """
    Save GeoJSON to file.

    Args:
        geojson (dict): GeoJSON object
        filepath (str): Output file path
    """
    with open(filepath, "w") as f:
        json.dump(geojson, f, indent=2)


def create_events_geojson(
    result: FireEventsResult, output_path: str, include_detections: bool = True
) -> int:
    """
    Write events (and optionally their source detections) as one FeatureCollection.

    Args:
        result: Pipeline output
        output_path: Path to save the GeoJSON file
        include_detections: Also emit one feature per filtered detection

    Returns:
        int: Total number of features written
    """
    features = [create_event_feature(event) for event in result.events]
    if include_detections:
        features.extend(create_detection_feature(d) for d in result.detections)

    save_geojson(create_geojson_featurecollection(features), output_path)
    return len(features)
