"""
SkyTrack — which satellites are overhead right now, and how strong they'd be.

Converts SGP4 states into look angles for a ground observer, scores each
object with a simple visibility/signal model, keeps track of the best
visible object, and projects everything onto a polar sky view.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from skytrack.core.frames import (
    GeodeticPoint,
    TopocentricFix,
    geodetic_to_ecef,
    ecef_to_geodetic,
    ecef_to_topocentric,
)
from skytrack.core.rotation import inertial_to_fixed
from skytrack.core.signal import SignalState, SignalQuality, evaluate, classify, doppler_shift
from skytrack.core.observer import ObserverLocation, InvalidLocationError, is_valid_location
from skytrack.core.tle import TLE, parse_tle
from skytrack.core.propagation import propagate, sidereal_angle, StateVector, PropagationError
from skytrack.core.registry import Registry, TrackedObject, TrackingState, describe
from skytrack.core.projection import project, compass_point
from skytrack.data.celestrak import CelestrakClient, fallback_catalog, populate

__all__ = [
    "__version__",
    "GeodeticPoint",
    "TopocentricFix",
    "geodetic_to_ecef",
    "ecef_to_geodetic",
    "ecef_to_topocentric",
    "inertial_to_fixed",
    "SignalState",
    "SignalQuality",
    "evaluate",
    "classify",
    "doppler_shift",
    "ObserverLocation",
    "InvalidLocationError",
    "is_valid_location",
    "TLE",
    "parse_tle",
    "propagate",
    "sidereal_angle",
    "StateVector",
    "PropagationError",
    "Registry",
    "TrackedObject",
    "TrackingState",
    "describe",
    "project",
    "compass_point",
    "CelestrakClient",
    "fallback_catalog",
    "populate",
]
