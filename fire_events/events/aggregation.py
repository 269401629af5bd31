"""
Reduction of detection clusters into FireEvent records.
"""

from typing import Dict, List, Sequence

import numpy as np

from .temporal import ensure_utc
from .types import Detection, FireEvent

DEFAULT_CONFIDENCE_LABEL = "n"


def event_id(ordinal: int) -> str:
    """Stable token for the 1-based position of an event within one run."""
    return f"event-{ordinal}"


def weighted_centroid(members: Sequence[Detection]) -> tuple:
    """
    FRP-weighted mean position of the members.

    Detections are weighted by radiative power; when no member carries any
    power every member weighs 1. The result is clamped to the members'
    bounding box so float rounding never places it outside the hull.
    """
    lats = np.array([d.lat for d in members], dtype=float)
    lons = np.array([d.lon for d in members], dtype=float)
    weights = np.array([d.radiative_power for d in members], dtype=float)

    if not (weights > 0).any():
        weights = np.ones_like(weights)

    lat = float(np.clip(np.average(lats, weights=weights), lats.min(), lats.max()))
    lon = float(np.clip(np.average(lons, weights=weights), lons.min(), lons.max()))
    return lat, lon


def confidence_histogram(members: Sequence[Detection]) -> Dict[str, int]:
    histogram: Dict[str, int] = {}
    for detection in members:
        label = detection.confidence or DEFAULT_CONFIDENCE_LABEL
        histogram[label] = histogram.get(label, 0) + 1
    return histogram


def aggregate_cluster(members: Sequence[Detection], ordinal: int) -> FireEvent:
    """Build the FireEvent for one non-empty cluster."""
    frp_sum = float(sum(d.radiative_power for d in members))
    count = len(members)
    timestamps = [
        ensure_utc(d.acquired_at_utc) for d in members if d.acquired_at_utc is not None
    ]

    return FireEvent(
        id=event_id(ordinal),
        detections=tuple(members),
        centroid=weighted_centroid(members),
        count=count,
        frp_sum=frp_sum,
        frp_avg=frp_sum / count,
        confidence_histogram=confidence_histogram(members),
        last_seen_utc=max(timestamps) if timestamps else None,
    )


def build_events(
    detections: Sequence[Detection], clusters: Sequence[Sequence[int]]
) -> List[FireEvent]:
    """
    Turn index clusters into FireEvents, numbered in cluster order.

    Args:
        detections: The sequence the cluster indices refer to
        clusters: Index groups as returned by find_clusters

    Returns:
        One FireEvent per non-empty cluster
    """
    events = []
    for members in clusters:
        if not members:
            continue
        events.append(
            aggregate_cluster([detections[i] for i in members], len(events) + 1)
        )
    return events
