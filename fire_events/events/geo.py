"""Great-circle distance on a spherical Earth."""

import numpy as np

from ..config import EARTH_RADIUS_M


def distance_meters(lat1, lon1, lat2, lon2):
    """
    Haversine distance in meters between two lat/lon positions in degrees.

    Accepts scalars or numpy arrays (broadcast against each other). Returns a
    Python float for scalar input. NaN coordinates propagate to NaN.
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    d_lat = lat1_rad - lat2_rad
    d_lon = np.radians(lon1) - np.radians(lon2)

    a = np.sin(d_lat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(
        d_lon / 2
    ) ** 2
    # Rounding can push a marginally outside [0, 1] for antipodal points
    a = np.clip(a, 0.0, 1.0)
    meters = EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    if np.ndim(meters) == 0:
        return float(meters)
    return meters
