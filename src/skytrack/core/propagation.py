"""SGP4 propagation and Greenwich sidereal angle."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import numpy as np
from numpy.typing import NDArray
from sgp4.api import jday
from sgp4.propagation import gstime

from skytrack.core.tle import TLE

logger = logging.getLogger(__name__)


class PropagationError(ValueError):
    """SGP4 could not produce a state (decayed orbit, bad elements)."""


@dataclass
class StateVector:
    """Position and velocity in the TEME inertial frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        epoch: Time of this state vector.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime


def _julian(time: datetime) -> tuple[float, float]:
    if time.tzinfo is not None:
        time = time.astimezone(timezone.utc)
    return jday(
        time.year, time.month, time.day,
        time.hour, time.minute, time.second + time.microsecond / 1e6,
    )


def propagate(tle: TLE, time: datetime) -> StateVector:
    """Propagate one element set to one instant.

    Args:
        tle: Element set to propagate.
        time: Target time. Naive datetimes are taken as UTC.

    Returns:
        Inertial StateVector at ``time``.

    Raises:
        PropagationError: If SGP4 reports an error or returns non-finite values.
    """
    jd, fr = _julian(time)
    error_code, pos, vel = tle.satrec.sgp4(jd, fr)

    if error_code != 0:
        raise PropagationError(
            f"SGP4 propagation failed for NORAD {tle.norad_id} at {time}: error code {error_code}"
        )

    position = np.array(pos, dtype=np.float64)
    velocity = np.array(vel, dtype=np.float64)
    if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
        raise PropagationError(f"SGP4 returned non-finite state for NORAD {tle.norad_id} at {time}")

    return StateVector(position_km=position, velocity_km_s=velocity, epoch=time)


def sidereal_angle(time: datetime) -> float:
    """Greenwich mean sidereal angle in radians, in [0, 2*pi).

    UT1 is approximated by UTC.
    """
    jd, fr = _julian(time)
    return gstime(jd + fr)
