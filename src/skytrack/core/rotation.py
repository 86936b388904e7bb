"""Inertial (TEME) to Earth-fixed rotation about the polar axis."""
from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def rotation_matrix(sidereal_angle_rad: float) -> NDArray[np.float64]:
    """Z-axis rotation taking inertial coordinates into the Earth-fixed frame."""
    c = math.cos(sidereal_angle_rad)
    s = math.sin(sidereal_angle_rad)
    return np.array(
        [
            [c, s, 0.0],
            [-s, c, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )


def inertial_to_fixed(vector: NDArray[np.float64], sidereal_angle_rad: float) -> NDArray[np.float64]:
    """Rotate an inertial vector into the Earth-fixed frame.

    Only the Earth's spin is applied; precession, nutation and polar
    motion are ignored.

    Args:
        vector: Inertial [x, y, z] (any unit).
        sidereal_angle_rad: Greenwich sidereal angle in radians.

    Returns:
        Earth-fixed [x, y, z] in the same unit.
    """
    return rotation_matrix(sidereal_angle_rad) @ np.asarray(vector, dtype=np.float64)
