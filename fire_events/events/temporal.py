"""
Time-window selection over detections.

All selections take the reference instant explicitly, so repeated calls with
the same arguments return the same result. Detections without an acquisition
timestamp never appear in a time-windowed view.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..config import (
    DEFAULT_EXTENSION_HOURS,
    TIME_RANGE_HOURS,
    ConfigurationError,
    validate_time_range,
)
from .types import Detection, TimeWindow

# Label for the newer half of each range
CURRENT_PERIOD_LABELS = {
    "6h": "3h",
    "12h": "6h",
    "24h": "12h",
    "48h": "24h",
    "7d": "3.5d",
}


def ensure_utc(instant: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def range_duration(time_range: str) -> timedelta:
    """Duration of a named range such as '24h' or '7d'."""
    return timedelta(hours=TIME_RANGE_HOURS[validate_time_range(time_range)])


def range_window(now: datetime, time_range: str) -> TimeWindow:
    """The full named window ending at now."""
    now = ensure_utc(now)
    return TimeWindow(now - range_duration(time_range), now)


def current_half_window(now: datetime, time_range: str) -> TimeWindow:
    """Newer half of the named window."""
    now = ensure_utc(now)
    return TimeWindow(now - range_duration(time_range) / 2, now)


def previous_half_window(now: datetime, time_range: str) -> TimeWindow:
    """Older half of the named window."""
    now = ensure_utc(now)
    duration = range_duration(time_range)
    return TimeWindow(now - duration, now - duration / 2)


def current_period_label(time_range: str) -> str:
    return CURRENT_PERIOD_LABELS[validate_time_range(time_range)]


def _timestamped(detections: Iterable[Detection]):
    for detection in detections:
        if detection.acquired_at_utc is not None:
            yield detection, ensure_utc(detection.acquired_at_utc)


def select_within_range(
    detections: Iterable[Detection], now: datetime, time_range: str
) -> List[Detection]:
    """Detections acquired at or after now minus the range duration."""
    cutoff = range_window(now, time_range).start
    return [d for d, ts in _timestamped(detections) if ts >= cutoff]


def select_previous_half(
    detections: Iterable[Detection], now: datetime, time_range: str
) -> List[Detection]:
    """Detections in the older half of the range, end exclusive."""
    window = previous_half_window(now, time_range)
    return [d for d, ts in _timestamped(detections) if window.start <= ts < window.end]


def select_current_half(
    detections: Iterable[Detection], now: datetime, time_range: str
) -> List[Detection]:
    """Detections acquired at or after the midpoint of the range."""
    cutoff = current_half_window(now, time_range).start
    return [d for d, ts in _timestamped(detections) if ts >= cutoff]


def select_in_window(
    detections: Iterable[Detection], window: TimeWindow
) -> List[Detection]:
    """Detections with start <= timestamp <= end."""
    start, end = ensure_utc(window.start), ensure_utc(window.end)
    return [d for d, ts in _timestamped(detections) if start <= ts <= end]


def select_until(
    detections: Iterable[Detection], max_time: datetime
) -> List[Detection]:
    """Detections acquired at or before max_time (time-slider playback)."""
    max_time = ensure_utc(max_time)
    return [d for d, ts in _timestamped(detections) if ts <= max_time]


def select_with_coverage_extension(
    detections: Iterable[Detection],
    end_time: datetime,
    window_hours: float,
    extension_hours: float = DEFAULT_EXTENSION_HOURS,
) -> List[Detection]:
    """
    Detections whose coverage interval overlaps the query window.

    A satellite pass is treated as representative of conditions from
    extension_hours before to extension_hours after its timestamp. The
    detection is kept when [ts - extension, ts + extension] intersects
    [end_time - window_hours, end_time]; touching endpoints count as overlap.

    Raises:
        ConfigurationError: If window_hours is not positive or
            extension_hours is negative
    """
    if not window_hours > 0:
        raise ConfigurationError(f"window_hours must be positive, got {window_hours}")
    if not extension_hours >= 0:
        raise ConfigurationError(
            f"extension_hours must not be negative, got {extension_hours}"
        )

    end_time = ensure_utc(end_time)
    window = TimeWindow(end_time - timedelta(hours=window_hours), end_time)
    extension = timedelta(hours=extension_hours)

    return [
        d
        for d, ts in _timestamped(detections)
        if ts + extension >= window.start and ts - extension <= window.end
    ]


def hours_since(instant: Optional[datetime], now: datetime) -> Optional[float]:
    """Elapsed hours from instant to now, or None when instant is unknown."""
    if instant is None:
        return None
    return (ensure_utc(now) - ensure_utc(instant)).total_seconds() / 3600


def time_ago(instant: datetime, now: datetime) -> str:
    """Compact elapsed-time label: '42m ago', '3h 5m ago', '2d ago'."""
    diff_minutes = int((ensure_utc(now) - ensure_utc(instant)).total_seconds() // 60)
    diff_hours = diff_minutes // 60

    if diff_minutes < 60:
        return f"{diff_minutes}m ago"
    if diff_hours < 24:
        minutes = diff_minutes % 60
        return f"{diff_hours}h {minutes}m ago" if minutes else f"{diff_hours}h ago"
    return f"{diff_hours // 24}d ago"
