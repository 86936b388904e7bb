"""Polar sky-view projection and pointing helpers.

The view is centred on the zenith with the horizon on the outer circle.
North is up and east is to the right. Coordinates are offsets from the
view centre in screen convention (y grows downward).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from skytrack.core.registry import TrackedObject
from skytrack.utils.constants import (
    DEFAULT_HIT_RADIUS,
    HORIZON_THRESHOLD_DEG,
    QUALITY_FAIR,
    QUALITY_GOOD,
    QUALITY_EXCELLENT,
)

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def elevation_ring_radius(elevation_deg: float, view_radius: float) -> float:
    """Distance from the centre at which an elevation lies on the view."""
    return view_radius * (1.0 - min(elevation_deg, 90.0) / 90.0)


def project(azimuth_deg: float, elevation_deg: float, view_radius: float) -> tuple[float, float]:
    """Map look angles to (x, y) offsets from the view centre.

    Args:
        azimuth_deg: Azimuth; 0 points up and 90 points right.
        elevation_deg: Elevation in degrees; 90 and above map to the centre.
        view_radius: Radius of the horizon circle in view units.

    Returns:
        ``(x, y)`` offsets: azimuth 0 on the horizon lands at ``(0, -R)`` and
        azimuth 90 at ``(R, 0)``.
    """
    r = elevation_ring_radius(elevation_deg, view_radius)
    az = math.radians(azimuth_deg)
    return r * math.sin(az), -r * math.cos(az)


@dataclass(frozen=True)
class MarkerStyle:
    size: float
    color: str
    ring: bool


def marker_style(signal_strength: float, active: bool = False) -> MarkerStyle:
    """Marker size and colour for an object on the sky view."""
    if signal_strength >= QUALITY_EXCELLENT:
        size, color = 12.0, "#00ff00"
    elif signal_strength >= QUALITY_GOOD:
        size, color = 10.0, "#00ff00"
    elif signal_strength >= QUALITY_FAIR:
        size, color = 8.0, "#ffff00"
    else:
        size, color = 5.0, "#ffff00"
    return MarkerStyle(size=size, color=color, ring=active)


def plottable(objects: Iterable[TrackedObject]) -> list[TrackedObject]:
    """Objects that belong on the sky view (visible, above the horizon threshold)."""
    return [
        obj for obj in objects
        if obj.visible and obj.topocentric is not None
        and obj.topocentric.elevation_deg > HORIZON_THRESHOLD_DEG
    ]


def object_at_point(
    x: float,
    y: float,
    objects: Iterable[TrackedObject],
    view_radius: float,
    hit_radius: float = DEFAULT_HIT_RADIUS,
) -> TrackedObject | None:
    """First plottable object whose marker lies within ``hit_radius`` of (x, y).

    (x, y) is an offset from the view centre, like the output of project().
    """
    for obj in plottable(objects):
        px, py = project(obj.topocentric.azimuth_deg, obj.topocentric.elevation_deg, view_radius)
        if math.hypot(x - px, y - py) < hit_radius:
            return obj
    return None


def compass_point(bearing_deg: float) -> str:
    """Nearest of the 16 compass points for a bearing clockwise from north."""
    return COMPASS_POINTS[round((bearing_deg % 360.0) / 22.5) % 16]


def heading_offset(heading_deg: float, bearing_deg: float) -> float:
    """Smallest unsigned angle between a device heading and a target bearing."""
    diff = abs(heading_deg - bearing_deg) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


class PointingHint(Enum):
    ALIGNED = "aligned"
    CLOSE = "close"
    PARTIAL = "partial"
    TURN = "turn"


def pointing_hint(offset_deg: float) -> PointingHint:
    """How well a heading offset lines up with the target."""
    if offset_deg < 10.0:
        return PointingHint.ALIGNED
    if offset_deg < 20.0:
        return PointingHint.CLOSE
    if offset_deg < 45.0:
        return PointingHint.PARTIAL
    return PointingHint.TURN
