"""Observer location on the Earth's surface."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from skytrack.core.frames import GeodeticPoint, geodetic_to_ecef

logger = logging.getLogger(__name__)


class InvalidLocationError(ValueError):
    """Raised when observer coordinates are not real numbers."""


def _is_number(value: object) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float, np.integer, np.floating))


def _as_real(value: object, label: str) -> float:
    if not _is_number(value):
        logger.error("Invalid %s: %r", label, value)
        raise InvalidLocationError(f"{label} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        logger.error("Invalid %s: %r", label, value)
        raise InvalidLocationError(f"{label} must be finite, got {value!r}")
    return value


def wrap_longitude(longitude_deg: float) -> float:
    """Wrap a longitude into (-180, 180]."""
    wrapped = (longitude_deg + 180.0) % 360.0 - 180.0
    return 180.0 if wrapped == -180.0 else wrapped


def is_valid_location(latitude: object, longitude: object, altitude: object) -> bool:
    """Strict range check, without normalization.

    Useful for input forms that want to reject rather than silently fix
    a typo before calling ObserverLocation.set.
    """
    if not all(_is_number(v) for v in (latitude, longitude, altitude)):
        return False
    # NaN fails every comparison below, so it is rejected too.
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0 and 0.0 <= altitude < math.inf


@dataclass
class ObserverLocation:
    """Where the observer stands.

    Values are normalized on every write: longitude is wrapped into
    (-180, 180], latitude is clamped to [-90, 90] and altitude to >= 0.

    Attributes:
        latitude: Geodetic latitude in degrees.
        longitude: Longitude in degrees, east positive.
        altitude: Height above the ellipsoid in metres.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0

    def __post_init__(self) -> None:
        self.set(self.latitude, self.longitude, self.altitude)

    def set(self, latitude: float, longitude: float, altitude: float = 0.0) -> None:
        """Validate, normalize and store a new location.

        Raises:
            InvalidLocationError: If any value is not a finite number.
        """
        lat = _as_real(latitude, "latitude")
        lon = _as_real(longitude, "longitude")
        alt = _as_real(altitude, "altitude")

        self.latitude = max(-90.0, min(90.0, lat))
        self.longitude = wrap_longitude(lon)
        self.altitude = max(0.0, alt)
        logger.debug(
            "Observer set to lat=%.4f lon=%.4f alt=%.0f m",
            self.latitude, self.longitude, self.altitude,
        )

    def to_geodetic(self) -> GeodeticPoint:
        return GeodeticPoint(self.latitude, self.longitude, self.altitude)

    def to_ecef(self) -> NDArray[np.float64]:
        """Observer position in ECEF km."""
        return geodetic_to_ecef(self.latitude, self.longitude, self.altitude)
