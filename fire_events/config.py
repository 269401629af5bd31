"""
Configuration for fire event detection.

Loads defaults from the environment (optionally via a .env file) and
provides the validation helpers that reject bad parameters at call time.
"""

import math
import numbers
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

EARTH_RADIUS_M = 6_371_000.0  # Spherical Earth model radius in meters

# Named comparison ranges, in hours
TIME_RANGE_HOURS = {
    "6h": 6,
    "12h": 12,
    "24h": 24,
    "48h": 48,
    "7d": 7 * 24,
}


class ConfigurationError(ValueError):
    """Raised when a caller passes parameters that can never be valid."""


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


# Clustering configuration
DEFAULT_EPS_METERS = _env_float("FIRE_EVENTS_EPS_METERS", "1500")
DEFAULT_MIN_PTS = _env_int("FIRE_EVENTS_MIN_PTS", "4")

# Time window configuration
DEFAULT_TIME_RANGE = os.getenv("FIRE_EVENTS_TIME_RANGE", "48h")
DEFAULT_EXTENSION_HOURS = _env_float("FIRE_EVENTS_EXTENSION_HOURS", "6")


def validate_clustering_params(eps_meters: float, min_pts: int) -> None:
    """
    Reject clustering parameters that cannot produce a meaningful result.

    Raises:
        ConfigurationError: If eps is not a positive finite distance or
            min_pts is smaller than 1
    """
    if not isinstance(eps_meters, numbers.Real) or not math.isfinite(eps_meters):
        raise ConfigurationError(f"eps_meters must be a finite number, got {eps_meters!r}")
    if eps_meters <= 0:
        raise ConfigurationError(f"eps_meters must be positive, got {eps_meters}")
    if isinstance(min_pts, bool) or not isinstance(min_pts, numbers.Integral):
        raise ConfigurationError(f"min_pts must be an integer, got {min_pts!r}")
    if min_pts < 1:
        raise ConfigurationError(f"min_pts must be at least 1, got {min_pts}")


def validate_time_range(time_range: str) -> str:
    """Return the range name unchanged if it is one of TIME_RANGE_HOURS."""
    if time_range not in TIME_RANGE_HOURS:
        raise ConfigurationError(
            f"Unsupported time range: {time_range!r}. "
            f"Available ranges: {', '.join(TIME_RANGE_HOURS)}"
        )
    return time_range
