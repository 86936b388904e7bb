"""Visibility and simulated signal strength.

This is a deliberately simple heuristic, not a link budget. The score
rises with elevation and falls with range, and nothing else feeds it.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from skytrack.utils.constants import (
    ATMOSPHERIC_ATTENUATION,
    DEFAULT_CARRIER_HZ,
    HORIZON_THRESHOLD_DEG,
    MIN_DISTANCE_FACTOR,
    QUALITY_EXCELLENT,
    QUALITY_FAIR,
    QUALITY_GOOD,
    REFERENCE_ALTITUDE_KM,
    SIGNAL_BARS,
    SPEED_OF_LIGHT_KM_S,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalState:
    """Visibility and signal strength of one object at one instant.

    Attributes:
        visible: True if the object is above the horizon threshold.
        signal_strength: Score in [0, 100].
        bars_active: Number of lit indicator bars, 0 to SIGNAL_BARS.
    """

    visible: bool
    signal_strength: float
    bars_active: int


NO_SIGNAL = SignalState(visible=False, signal_strength=0.0, bars_active=0)


class SignalQuality(Enum):
    """Coarse signal quality tiers shown to the user."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    WEAK = "WEAK"
    NONE = "NO SIGNAL"


def is_visible(elevation_deg: float) -> bool:
    """True if the elevation is strictly above the horizon threshold."""
    return elevation_deg > HORIZON_THRESHOLD_DEG


def evaluate(elevation_deg: float, range_km: float) -> SignalState:
    """Compute visibility and a 0-100 signal score from look angles.

    Args:
        elevation_deg: Elevation above the horizon in degrees.
        range_km: Slant range in km (must be positive when visible).

    Returns:
        SignalState. Objects at or below the horizon threshold always get
        zero signal.
    """
    if not is_visible(elevation_deg):
        return NO_SIGNAL

    # The +1 deg offset gives a small non-zero score right at the horizon.
    # Capped at 90 deg so the factor never turns down near zenith.
    elevation_factor = max(0.0, math.sin(math.radians(min(elevation_deg + 1.0, 90.0))))
    distance_factor = max(MIN_DISTANCE_FACTOR, (REFERENCE_ALTITUDE_KM / range_km) ** 2)
    atmospheric_factor = math.exp(-ATMOSPHERIC_ATTENUATION * (1.0 - elevation_factor))

    raw = elevation_factor * distance_factor * atmospheric_factor
    strength = min(100.0, raw * 100.0)
    bars = max(0, min(SIGNAL_BARS, math.ceil(strength / 100.0 * SIGNAL_BARS)))

    return SignalState(visible=True, signal_strength=strength, bars_active=bars)


def classify(signal_strength: float) -> SignalQuality:
    """Map a signal score onto a quality tier."""
    if signal_strength >= QUALITY_EXCELLENT:
        return SignalQuality.EXCELLENT
    if signal_strength >= QUALITY_GOOD:
        return SignalQuality.GOOD
    if signal_strength >= QUALITY_FAIR:
        return SignalQuality.FAIR
    if signal_strength > 0:
        return SignalQuality.WEAK
    return SignalQuality.NONE


def doppler_shift(
    position_eci: NDArray[np.float64],
    velocity_eci: NDArray[np.float64],
    frequency_hz: float = DEFAULT_CARRIER_HZ,
) -> float:
    """Rough Doppler-shifted frequency from the geocentric radial velocity.

    Uses the object's radial velocity relative to Earth's centre rather
    than relative to the observer, so it is only good for showing the
    order of magnitude of the shift.

    Args:
        position_eci: Inertial position in km.
        velocity_eci: Inertial velocity in km/s.
        frequency_hz: Transmitted frequency in Hz.

    Returns:
        Shifted frequency in Hz.
    """
    r = np.asarray(position_eci, dtype=np.float64)
    v = np.asarray(velocity_eci, dtype=np.float64)
    r_mag = float(np.linalg.norm(r))
    if r_mag == 0.0:
        raise ValueError("Position vector has zero length")

    radial_velocity = float(np.dot(r, v)) / r_mag
    return frequency_hz * (SPEED_OF_LIGHT_KM_S + radial_velocity) / SPEED_OF_LIGHT_KM_S
