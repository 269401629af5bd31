"""
Trend classification of fire events.

Each event's activity near its centroid is sampled in two windows derived
from the selected range: the newer half ("current") and the older half
("previous"). The classifier walks an ordered rule list over the two samples
and returns one of four trends plus a reason string quoting the compared
numbers.

Rules, first match wins:
1. no activity in either window            -> estable
2. activity now, none before               -> creciente
3. none now, significant activity before   -> extinto (long range or very
                                              significant) else decreciente
4. none now, minor activity before         -> decreciente
5. activity in both windows: combined count/FRP ratio against the ratio
   steady activity would give (1.0 for equal halves)
                                           -> creciente / decreciente / estable
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..config import (
    DEFAULT_EPS_METERS,
    TIME_RANGE_HOURS,
    ConfigurationError,
    validate_time_range,
)
from .geo import distance_meters
from .temporal import (
    current_half_window,
    current_period_label,
    hours_since,
    previous_half_window,
    select_current_half,
    select_previous_half,
)
from .types import Detection, FireEvent, Trend, TrendInputs

# Window lengths do not depend on the instant they end at
_REFERENCE_INSTANT = datetime(2000, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class TrendThresholds:
    """Calibration constants of the trend rules."""

    # Previous activity worth reporting as a decline
    significant_count: int = 10
    significant_frp: float = 100.0
    significant_total_count: int = 50

    # Previous activity large enough that silence means the fire is out
    very_significant_count: int = 50
    very_significant_frp: float = 500.0
    very_significant_total_count: int = 100

    growth_factor: float = 1.5
    decline_factor: float = 0.5
    zero_denominator_ratio: float = 2.0

    long_range_hours: int = 48
    short_range_hours: int = 24

    # Per-range overrides of the expected current/previous ratio; ranges not
    # listed expect the ratio of the two window lengths
    expected_ratios: Dict[str, float] = field(default_factory=dict)


DEFAULT_THRESHOLDS = TrendThresholds()


def expected_ratio(
    time_range: str, thresholds: TrendThresholds = DEFAULT_THRESHOLDS
) -> float:
    """
    Current/previous ratio that steady activity produces for a range.

    Steady activity yields detections in proportion to window length, so
    without an override this is the length of the current window over the
    length of the previous one (1.0 for the two halves of a range).
    """
    if time_range in thresholds.expected_ratios:
        return thresholds.expected_ratios[time_range]
    current = current_half_window(_REFERENCE_INSTANT, time_range)
    previous = previous_half_window(_REFERENCE_INSTANT, time_range)
    return (current.end - current.start) / (previous.end - previous.start)


def _ratio(current: float, previous: float, thresholds: TrendThresholds) -> float:
    if previous == 0:
        return thresholds.zero_denominator_ratio
    return current / previous


def _is_significant(inputs: TrendInputs, thresholds: TrendThresholds) -> bool:
    return (
        inputs.previous_count >= thresholds.significant_count
        or inputs.previous_frp >= thresholds.significant_frp
        or inputs.total_event_count >= thresholds.significant_total_count
    )


def _is_very_significant(inputs: TrendInputs, thresholds: TrendThresholds) -> bool:
    return (
        inputs.previous_count >= thresholds.very_significant_count
        or inputs.previous_frp >= thresholds.very_significant_frp
        or inputs.total_event_count >= thresholds.very_significant_total_count
    )


def _last_seen_note(inputs: TrendInputs) -> str:
    if inputs.hours_since_last_seen is None:
        return ""
    return f"; last seen {inputs.hours_since_last_seen:.1f}h ago"


def classify_trend(
    inputs: TrendInputs, thresholds: TrendThresholds = DEFAULT_THRESHOLDS
) -> Tuple[Trend, str]:
    """
    Classify one event's activity trajectory.

    Args:
        inputs: Window samples and context for the event
        thresholds: Rule constants

    Returns:
        (trend, reason) where reason quotes the compared counts and FRP
    """
    period = current_period_label(inputs.time_range)
    current = f"{inputs.current_count} detections, {inputs.current_frp:.1f} MW"
    previous = f"{inputs.previous_count} detections, {inputs.previous_frp:.1f} MW"

    has_current = inputs.current_count > 0 or inputs.current_frp > 0
    has_previous = inputs.previous_count > 0 or inputs.previous_frp > 0

    if not has_current and not has_previous:
        return (
            Trend.STABLE,
            f"No activity in either window (last {period}: {current}; "
            f"previous {period}: {previous})",
        )

    if has_current and not has_previous:
        return (
            Trend.GROWING,
            f"New activity: {current} in the last {period} "
            f"with no detections in the previous {period}",
        )

    if not has_current:
        if _is_significant(inputs, thresholds):
            if inputs.is_long_range or _is_very_significant(inputs, thresholds):
                return (
                    Trend.EXTINGUISHED,
                    f"No detections in the last {period} after significant activity "
                    f"({previous}; {inputs.total_event_count} in event)"
                    f"{_last_seen_note(inputs)}",
                )
            return (
                Trend.SHRINKING,
                f"Activity stopped in the last {period} after {previous} "
                f"in the previous {period}{_last_seen_note(inputs)}",
            )
        return (
            Trend.SHRINKING,
            f"No detections in the last {period}; previous activity was low "
            f"({previous}){_last_seen_note(inputs)}",
        )

    count_ratio = _ratio(inputs.current_count, inputs.previous_count, thresholds)
    frp_ratio = _ratio(inputs.current_frp, inputs.previous_frp, thresholds)
    combined_ratio = (count_ratio + frp_ratio) / 2
    expected = expected_ratio(inputs.time_range, thresholds)
    comparison = (
        f"combined ratio {combined_ratio:.2f} vs expected {expected:.2f} "
        f"(last {period}: {current}; previous {period}: {previous})"
    )

    if combined_ratio > thresholds.growth_factor * expected:
        return Trend.GROWING, f"Activity increasing: {comparison}"
    if combined_ratio < thresholds.decline_factor * expected and _is_significant(
        inputs, thresholds
    ):
        return Trend.SHRINKING, f"Activity decreasing: {comparison}"
    return Trend.STABLE, f"Activity steady: {comparison}"


def _window_arrays(detections: Sequence[Detection]):
    lats = np.array([d.lat for d in detections], dtype=float)
    lons = np.array([d.lon for d in detections], dtype=float)
    frp = np.array([d.radiative_power for d in detections], dtype=float)
    return lats, lons, frp


def _activity_near(arrays, centroid: Tuple[float, float], radius_m: float):
    """Detection count and summed FRP within radius_m of centroid."""
    lats, lons, frp = arrays
    if len(lats) == 0:
        return 0, 0.0
    within = distance_meters(centroid[0], centroid[1], lats, lons) <= radius_m
    return int(within.sum()), float(frp[within].sum())


def _trend_inputs(
    event: FireEvent,
    current_arrays,
    previous_arrays,
    now: datetime,
    time_range: str,
    event_radius_m: float,
    thresholds: TrendThresholds,
) -> TrendInputs:
    current_count, current_frp = _activity_near(
        current_arrays, event.centroid, event_radius_m
    )
    previous_count, previous_frp = _activity_near(
        previous_arrays, event.centroid, event_radius_m
    )
    range_hours = TIME_RANGE_HOURS[time_range]

    return TrendInputs(
        current_count=current_count,
        previous_count=previous_count,
        current_frp=current_frp,
        previous_frp=previous_frp,
        total_event_count=event.count,
        time_range=time_range,
        is_long_range=range_hours >= thresholds.long_range_hours,
        is_short_range=range_hours <= thresholds.short_range_hours,
        hours_since_last_seen=hours_since(event.last_seen_utc, now),
    )


def _validate_radius(event_radius_m: float) -> None:
    if not event_radius_m > 0:
        raise ConfigurationError(f"event_radius_m must be positive, got {event_radius_m}")


def build_trend_inputs(
    event: FireEvent,
    detections: Sequence[Detection],
    now: datetime,
    time_range: str,
    event_radius_m: float = DEFAULT_EPS_METERS,
    thresholds: TrendThresholds = DEFAULT_THRESHOLDS,
) -> TrendInputs:
    """Sample the current and previous windows around one event's centroid."""
    validate_time_range(time_range)
    _validate_radius(event_radius_m)
    return _trend_inputs(
        event,
        _window_arrays(select_current_half(detections, now, time_range)),
        _window_arrays(select_previous_half(detections, now, time_range)),
        now,
        time_range,
        event_radius_m,
        thresholds,
    )


def analyze_trends(
    events: Sequence[FireEvent],
    detections: Sequence[Detection],
    now: datetime,
    time_range: str,
    event_radius_m: float = DEFAULT_EPS_METERS,
    thresholds: TrendThresholds = DEFAULT_THRESHOLDS,
) -> List[FireEvent]:
    """
    Annotate events with trend, reason and the window samples behind them.

    Args:
        events: Events from one clustering run
        detections: All detections available for comparison (not only the
            event members)
        now: Reference instant
        time_range: Named range the two halves are taken from
        event_radius_m: Radius around each centroid that counts as the event
        thresholds: Rule constants

    Returns:
        New FireEvent values; the input events are left untouched
    """
    validate_time_range(time_range)
    _validate_radius(event_radius_m)

    current_arrays = _window_arrays(select_current_half(detections, now, time_range))
    previous_arrays = _window_arrays(select_previous_half(detections, now, time_range))

    annotated = []
    for event in events:
        inputs = _trend_inputs(
            event,
            current_arrays,
            previous_arrays,
            now,
            time_range,
            event_radius_m,
            thresholds,
        )
        trend, reason = classify_trend(inputs, thresholds)
        annotated.append(
            replace(
                event,
                trend=trend,
                trend_reason=reason,
                current_window_count=inputs.current_count,
                previous_window_count=inputs.previous_count,
                current_window_frp=inputs.current_frp,
                previous_window_frp=inputs.previous_frp,
            )
        )
    return annotated
