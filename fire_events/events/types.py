"""
Record types shared by the fire event pipeline.

Every type here is a plain frozen dataclass: the pipeline builds new values
instead of updating old ones, so results can be handed to other threads or
to the rendering layer without copying.
"""

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..config import ConfigurationError


class Trend(str, Enum):
    """Activity trajectory of a fire event."""

    GROWING = "creciente"
    SHRINKING = "decreciente"
    STABLE = "estable"
    EXTINGUISHED = "extinto"


@dataclass(frozen=True)
class Detection:
    """A single satellite thermal-anomaly record."""

    lat: float
    lon: float
    radiative_power: float = 0.0  # FRP in megawatts
    confidence: Optional[str] = None
    acquired_at_utc: Optional[datetime] = None
    # Source columns the core never reads (satellite, brightness, ...)
    extras: Mapping[str, str] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )

    def __post_init__(self):
        power = self.radiative_power
        if isinstance(power, bool) or not isinstance(power, numbers.Real):
            raise ConfigurationError(f"radiative_power must be a number, got {power!r}")
        if not (math.isfinite(power) and power >= 0):
            raise ConfigurationError(
                f"radiative_power must be finite and non-negative, got {power}"
            )
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))


@dataclass(frozen=True)
class TimeWindow:
    """A [start, end] span of UTC instants with end strictly after start."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.end > self.start:
            raise ConfigurationError(
                f"TimeWindow end must be after start (start={self.start}, end={self.end})"
            )


@dataclass(frozen=True)
class FireEvent:
    """One spatial cluster of detections reduced to summary statistics."""

    id: str
    detections: Tuple[Detection, ...]
    centroid: Tuple[float, float]  # (lat, lon)
    count: int
    frp_sum: float
    frp_avg: float
    confidence_histogram: Mapping[str, int]
    last_seen_utc: Optional[datetime]

    # Filled in by the trend classifier
    trend: Optional[Trend] = None
    trend_reason: Optional[str] = None
    current_window_count: Optional[int] = None
    previous_window_count: Optional[int] = None
    current_window_frp: Optional[float] = None
    previous_window_frp: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "detections", tuple(self.detections))
        object.__setattr__(
            self,
            "confidence_histogram",
            MappingProxyType(dict(self.confidence_histogram)),
        )


@dataclass(frozen=True)
class TrendInputs:
    """Activity samples and context flags the trend classifier decides on."""

    current_count: int
    previous_count: int
    current_frp: float
    previous_frp: float
    total_event_count: int
    time_range: str
    is_long_range: bool
    is_short_range: bool
    hours_since_last_seen: Optional[float] = None


@dataclass(frozen=True)
class FireEventsResult:
    """Output of one pipeline run, handed to the rendering layer."""

    events: Tuple[FireEvent, ...]
    detections: Tuple[Detection, ...]  # the time-filtered detections
    time_range: str
    generated_at_utc: datetime
