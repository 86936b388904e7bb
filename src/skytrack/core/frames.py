"""Coordinate-frame conversions between geodetic, ECEF and topocentric frames.

All Cartesian vectors are numpy arrays of shape (3,) in km. Geodetic
altitude is carried in metres, matching what location input provides.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from skytrack.utils.constants import (
    EARTH_ECCENTRICITY_SQ as E2,
    EARTH_RADIUS_KM as RE,
    GEODETIC_LATITUDE_ITERATIONS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeodeticPoint:
    """A point referenced to the WGS-84 ellipsoid.

    Attributes:
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: Longitude in degrees, east positive.
        altitude_m: Height above the ellipsoid in metres.
    """

    latitude_deg: float
    longitude_deg: float
    altitude_m: float


@dataclass(frozen=True)
class TopocentricFix:
    """Look angles from an observer to a target.

    Attributes:
        azimuth_deg: Azimuth in [0, 360), measured as atan2(east, south) in
            the South-East-Zenith frame, so 0 = south and 90 = east.
        elevation_deg: Elevation above the local horizon in degrees.
        range_km: Slant range in km.
    """

    azimuth_deg: float
    elevation_deg: float
    range_km: float

    @property
    def bearing_deg(self) -> float:
        """Compass bearing in [0, 360), clockwise from north."""
        bearing = (180.0 - self.azimuth_deg) % 360.0
        return 0.0 if bearing >= 360.0 else bearing


def _prime_vertical_radius(lat_rad: float) -> float:
    """Radius of curvature in the prime vertical, N(lat), in km."""
    sin_lat = math.sin(lat_rad)
    return RE / math.sqrt(1.0 - E2 * sin_lat * sin_lat)


def geodetic_to_ecef(latitude_deg: float, longitude_deg: float, altitude_m: float = 0.0) -> NDArray[np.float64]:
    """Convert geodetic coordinates to an Earth-fixed Cartesian vector.

    Args:
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: Longitude in degrees.
        altitude_m: Height above the ellipsoid in metres.

    Returns:
        ECEF position [x, y, z] in km.
    """
    lat = math.radians(latitude_deg)
    lon = math.radians(longitude_deg)
    alt_km = altitude_m / 1000.0

    n = _prime_vertical_radius(lat)
    cos_lat = math.cos(lat)

    return np.array(
        [
            (n + alt_km) * cos_lat * math.cos(lon),
            (n + alt_km) * cos_lat * math.sin(lon),
            ((1.0 - E2) * n + alt_km) * math.sin(lat),
        ],
        dtype=np.float64,
    )


def ecef_to_geodetic(ecef: NDArray[np.float64]) -> GeodeticPoint:
    """Convert an Earth-fixed Cartesian vector to geodetic coordinates.

    Latitude is found by fixed-point iteration starting from the surface
    solution. Three iterations bring the error below 1e-9 rad for anything
    from the ground up to geostationary altitude.

    Args:
        ecef: ECEF position [x, y, z] in km.

    Returns:
        The corresponding GeodeticPoint (altitude in metres).
    """
    x, y, z = (float(c) for c in ecef)
    lon = math.atan2(y, x)
    p = math.hypot(x, y)

    lat = math.atan2(z, p * (1.0 - E2))
    for _ in range(GEODETIC_LATITUDE_ITERATIONS):
        n = _prime_vertical_radius(lat)
        lat = math.atan2(z + E2 * n * math.sin(lat), p)

    # p/cos(lat) - N blows up near the poles; this form does not.
    sin_lat = math.sin(lat)
    alt_km = p * math.cos(lat) + z * sin_lat - RE * math.sqrt(1.0 - E2 * sin_lat * sin_lat)

    return GeodeticPoint(
        latitude_deg=math.degrees(lat),
        longitude_deg=math.degrees(lon),
        altitude_m=alt_km * 1000.0,
    )


def ecef_to_topocentric(observer_ecef: NDArray[np.float64], target_ecef: NDArray[np.float64]) -> TopocentricFix:
    """Compute azimuth, elevation and range of a target seen from an observer.

    The line-of-sight vector is rotated into the observer's
    South-East-Zenith frame.

    Args:
        observer_ecef: Observer ECEF position in km.
        target_ecef: Target ECEF position in km.

    Returns:
        TopocentricFix with azimuth in [0, 360).

    Raises:
        ValueError: If observer and target coincide.
    """
    observer_ecef = np.asarray(observer_ecef, dtype=np.float64)
    delta = np.asarray(target_ecef, dtype=np.float64) - observer_ecef
    range_km = float(np.linalg.norm(delta))
    if range_km == 0.0:
        raise ValueError("Target coincides with observer; look angles are undefined")

    site = ecef_to_geodetic(observer_ecef)
    lat = math.radians(site.latitude_deg)
    lon = math.radians(site.longitude_deg)
    sin_lat, cos_lat = math.sin(lat), math.cos(lat)
    sin_lon, cos_lon = math.sin(lon), math.cos(lon)

    sez_matrix = np.array(
        [
            [sin_lat * cos_lon, sin_lat * sin_lon, -cos_lat],
            [-sin_lon, cos_lon, 0.0],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ]
    )
    south, east, zenith = sez_matrix @ delta

    azimuth = math.degrees(math.atan2(east, south)) % 360.0
    if azimuth >= 360.0:
        azimuth = 0.0
    # Rounding can push the ratio a hair past 1 straight overhead.
    elevation = math.degrees(math.asin(max(-1.0, min(1.0, zenith / range_km))))

    return TopocentricFix(azimuth_deg=azimuth, elevation_deg=elevation, range_km=range_km)


def geodetic_to_topocentric(observer: GeodeticPoint, target_ecef: NDArray[np.float64]) -> TopocentricFix:
    """Look angles from a geodetic observer to an ECEF target."""
    observer_ecef = geodetic_to_ecef(observer.latitude_deg, observer.longitude_deg, observer.altitude_m)
    return ecef_to_topocentric(observer_ecef, target_ecef)
