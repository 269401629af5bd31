"""Shared fixtures for the fire events test suite."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from fire_events.config import EARTH_RADIUS_M
from fire_events.events.types import Detection

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
BASE_LAT = -42.0
BASE_LON = -71.5
METERS_PER_DEGREE_LAT = EARTH_RADIUS_M * math.pi / 180


def offset_position(lat, lon, north_m=0.0, east_m=0.0):
    """Shift a position by a small distance in meters."""
    new_lat = lat + north_m / METERS_PER_DEGREE_LAT
    new_lon = lon + east_m / (METERS_PER_DEGREE_LAT * math.cos(math.radians(lat)))
    return new_lat, new_lon


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_detection():
    """Factory for detections placed relative to a base position and NOW."""

    def _make(
        north_m=0.0,
        east_m=0.0,
        frp=10.0,
        confidence="n",
        hours_ago=0.0,
        lat=BASE_LAT,
        lon=BASE_LON,
    ):
        det_lat, det_lon = offset_position(lat, lon, north_m, east_m)
        acquired = None if hours_ago is None else NOW - timedelta(hours=hours_ago)
        return Detection(
            lat=det_lat,
            lon=det_lon,
            radiative_power=frp,
            confidence=confidence,
            acquired_at_utc=acquired,
        )

    return _make


@pytest.fixture
def make_cluster(make_detection):
    """Factory for n detections on an east-west line, spacing_m apart."""

    def _make(n, spacing_m=100.0, **kwargs):
        start_east = kwargs.pop("east_m", 0.0)
        return [
            make_detection(east_m=start_east + i * spacing_m, **kwargs) for i in range(n)
        ]

    return _make


@pytest.fixture
def firms_csv_text():
    return (
        "latitude,longitude,bright_ti4,acq_date,acq_time,satellite,instrument,confidence,frp,daynight\n"
        "-42.10000,-71.50000,330.1,2024-01-15,0345,N,VIIRS,n,5.2,N\n"
        "-42.10000,-71.50000,331.0,2024-01-15,0345,N20,VIIRS,n,5.2,N\n"
        "-42.20000,-71.60000,340.5,2024-01-15,45,N,VIIRS,h,,D\n"
        "-42.30000,-71.70000,310.2,bad-date,1200,N,VIIRS,l,3.0,D\n"
        "abc,-71.70000,310.2,2024-01-15,1200,Terra,MODIS,95,12.5,D\n"
        "-42.40000,-71.80000,305.0,2024-01-14,2330,Aqua,MODIS,50,1.5,N\n"
    )
