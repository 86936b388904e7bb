from __future__ import annotations

"""Physical constants and tuning values for sky tracking.

Distances in km and angles in degrees unless otherwise noted.
"""

# --- Earth parameters (WGS-84) ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_FLATTENING: float = 1.0 / 298.257223563
"""WGS-84 flattening (dimensionless)."""

EARTH_ECCENTRICITY_SQ: float = EARTH_FLATTENING * (2.0 - EARTH_FLATTENING)
"""First eccentricity squared, f(2 - f)."""

GEODETIC_LATITUDE_ITERATIONS: int = 3
"""Fixed-point iterations used when recovering geodetic latitude from ECEF."""

# --- Signal model (heuristic tuning, keep as-is) ---
HORIZON_THRESHOLD_DEG: float = -0.5
"""Elevation at or below which an object is considered not visible."""

REFERENCE_ALTITUDE_KM: float = 400.0
"""Range at which the distance factor equals one (roughly ISS altitude)."""

MIN_DISTANCE_FACTOR: float = 0.1
"""Floor on the inverse-square distance factor."""

ATMOSPHERIC_ATTENUATION: float = 0.1
"""Exponential attenuation coefficient applied at low elevations."""

SIGNAL_BARS: int = 5
"""Number of bars in the signal indicator."""

# --- Signal quality tiers (percent) ---
QUALITY_EXCELLENT: float = 75.0
QUALITY_GOOD: float = 50.0
QUALITY_FAIR: float = 25.0

# --- Doppler ---
SPEED_OF_LIGHT_KM_S: float = 299792.458
"""Speed of light in km/s."""

DEFAULT_CARRIER_HZ: float = 2400e6
"""Default carrier frequency for Doppler estimates in Hz."""

# --- Sky view ---
ELEVATION_RINGS_DEG: tuple[float, ...] = (30.0, 60.0, 90.0)
"""Elevation rings drawn on the polar sky view."""

DEFAULT_HIT_RADIUS: float = 15.0
"""Pick radius around a projected object, in view units."""

# --- Catalog retrieval ---
CELESTRAK_BASE_URL: str = "https://celestrak.org/NORAD/elements"
"""Base URL for Celestrak group element files."""

CELESTRAK_TIMEOUT_S: float = 8.0
"""Per-request timeout for Celestrak fetches in seconds."""

DEFAULT_GROUPS: tuple[str, ...] = ("starlink", "stations", "gps-ops", "iridium")
"""Celestrak groups loaded when none are requested."""

MIN_CATALOG_SIZE: int = 5
"""Below this many loaded objects, extra fallback objects are added."""
