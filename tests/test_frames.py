"""Tests for geodetic / ECEF / topocentric conversions and frame rotation."""
from __future__ import annotations

import math

import numpy as np
import pytest

from skytrack.core import frames
from skytrack.core.frames import (
    GeodeticPoint,
    TopocentricFix,
    ecef_to_geodetic,
    ecef_to_topocentric,
    geodetic_to_ecef,
    geodetic_to_topocentric,
)
from skytrack.core.rotation import inertial_to_fixed, rotation_matrix
from skytrack.utils.constants import EARTH_RADIUS_KM

POLAR_RADIUS_KM = 6356.752314245

LATITUDES = [-90.0, -67.3, -45.0, -12.5, 0.0, 0.001, 23.4, 51.5, 89.9, 90.0]
LONGITUDES = [-179.5, -120.0, -0.13, 0.0, 45.0, 139.7, 179.9]
ALTITUDES_M = [0.0, 35.0, 8848.0, 420_000.0, 20_200_000.0, 35_786_000.0]


class TestGeodeticToEcef:
    def test_equator_prime_meridian(self) -> None:
        x, y, z = geodetic_to_ecef(0.0, 0.0, 0.0)
        assert x == pytest.approx(EARTH_RADIUS_KM)
        assert y == pytest.approx(0.0, abs=1e-9)
        assert z == pytest.approx(0.0, abs=1e-9)

    def test_north_pole_uses_polar_radius(self) -> None:
        x, y, z = geodetic_to_ecef(90.0, 0.0, 0.0)
        assert math.hypot(x, y) == pytest.approx(0.0, abs=1e-9)
        assert z == pytest.approx(POLAR_RADIUS_KM, abs=1e-6)

    def test_altitude_is_metres(self) -> None:
        ground = geodetic_to_ecef(0.0, 90.0, 0.0)
        raised = geodetic_to_ecef(0.0, 90.0, 1000.0)
        assert np.linalg.norm(raised - ground) == pytest.approx(1.0)
        assert raised[1] == pytest.approx(EARTH_RADIUS_KM + 1.0)


class TestEcefToGeodetic:
    @pytest.mark.parametrize("alt_m", ALTITUDES_M)
    @pytest.mark.parametrize("lat", LATITUDES)
    def test_round_trip(self, lat: float, alt_m: float) -> None:
        for lon in LONGITUDES:
            point = ecef_to_geodetic(geodetic_to_ecef(lat, lon, alt_m))
            assert point.latitude_deg == pytest.approx(lat, abs=1e-4)
            assert point.altitude_m == pytest.approx(alt_m, abs=1.0)
            if abs(lat) < 90.0:
                assert point.longitude_deg == pytest.approx(lon, abs=1e-4)

    @pytest.mark.parametrize("alt_m", [0.0, 420_000.0, 35_786_000.0])
    def test_three_iterations_converge(self, alt_m: float, monkeypatch: pytest.MonkeyPatch) -> None:
        """Three iterations agree with a fully converged solution to < 1e-9 rad."""
        vectors = [geodetic_to_ecef(lat, 30.0, alt_m) for lat in np.linspace(-89.0, 89.0, 37)]
        three = [ecef_to_geodetic(v).latitude_deg for v in vectors]

        monkeypatch.setattr(frames, "GEODETIC_LATITUDE_ITERATIONS", 20)
        converged = [ecef_to_geodetic(v).latitude_deg for v in vectors]

        worst = max(abs(math.radians(a - b)) for a, b in zip(three, converged))
        assert worst < 1e-9

    def test_longitude_quadrants(self) -> None:
        assert ecef_to_geodetic(np.array([0.0, 7000.0, 0.0])).longitude_deg == pytest.approx(90.0)
        assert ecef_to_geodetic(np.array([-7000.0, 0.0, 0.0])).longitude_deg == pytest.approx(180.0)
        assert ecef_to_geodetic(np.array([0.0, -7000.0, 0.0])).longitude_deg == pytest.approx(-90.0)


class TestTopocentric:
    OBSERVER = geodetic_to_ecef(0.0, 0.0, 0.0)

    def test_overhead(self) -> None:
        target = geodetic_to_ecef(0.0, 0.0, 400_000.0)
        fix = ecef_to_topocentric(self.OBSERVER, target)
        assert fix.elevation_deg == pytest.approx(90.0, abs=1e-6)
        assert fix.range_km == pytest.approx(400.0)

    @pytest.mark.parametrize(
        "lat, lon, expected_az, expected_bearing",
        [
            (5.0, 0.0, 180.0, 0.0),
            (0.0, 5.0, 90.0, 90.0),
            (-5.0, 0.0, 0.0, 180.0),
            (0.0, -5.0, 270.0, 270.0),
        ],
    )
    def test_cardinal_azimuths(
        self, lat: float, lon: float, expected_az: float, expected_bearing: float
    ) -> None:
        # Azimuth is atan2(east, south); the bearing is the same direction from north.
        target = geodetic_to_ecef(lat, lon, 500_000.0)
        fix = ecef_to_topocentric(self.OBSERVER, target)
        assert fix.azimuth_deg == pytest.approx(expected_az, abs=1e-6)
        assert fix.bearing_deg == pytest.approx(expected_bearing, abs=1e-6)
        assert 0.0 < fix.elevation_deg < 90.0

    def test_azimuth_always_in_range(self) -> None:
        observer = geodetic_to_ecef(48.85, 2.35, 35.0)
        for lat in range(-80, 81, 20):
            for lon in range(-170, 171, 20):
                fix = ecef_to_topocentric(observer, geodetic_to_ecef(lat, lon, 800_000.0))
                assert 0.0 <= fix.azimuth_deg < 360.0
                assert 0.0 <= fix.bearing_deg < 360.0
                assert -90.0 <= fix.elevation_deg <= 90.0

    @pytest.mark.parametrize("azimuth, bearing", [(180.0, 0.0), (0.0, 180.0), (90.0, 90.0), (300.0, 240.0)])
    def test_bearing_from_azimuth(self, azimuth: float, bearing: float) -> None:
        assert TopocentricFix(azimuth, 10.0, 1000.0).bearing_deg == pytest.approx(bearing)

    def test_far_side_is_below_horizon(self) -> None:
        target = geodetic_to_ecef(0.0, 90.0, 400_000.0)
        fix = ecef_to_topocentric(self.OBSERVER, target)
        assert fix.elevation_deg < 0.0

    def test_range_matches_distance(self) -> None:
        target = np.array([7000.0, 1200.0, -300.0])
        fix = ecef_to_topocentric(self.OBSERVER, target)
        assert fix.range_km == pytest.approx(float(np.linalg.norm(target - self.OBSERVER)))

    def test_coincident_points_raise(self) -> None:
        with pytest.raises(ValueError, match="coincides"):
            ecef_to_topocentric(self.OBSERVER, self.OBSERVER.copy())

    def test_geodetic_observer_wrapper(self) -> None:
        target = geodetic_to_ecef(10.0, 20.0, 600_000.0)
        site = GeodeticPoint(9.0, 19.0, 120.0)
        direct = ecef_to_topocentric(geodetic_to_ecef(9.0, 19.0, 120.0), target)
        assert geodetic_to_topocentric(site, target) == direct


class TestRotation:
    def test_zero_angle_is_identity(self) -> None:
        v = np.array([1234.5, -678.9, 4321.0])
        np.testing.assert_allclose(inertial_to_fixed(v, 0.0), v)

    def test_quarter_turn(self) -> None:
        rotated = inertial_to_fixed(np.array([1.0, 0.0, 5.0]), math.pi / 2)
        np.testing.assert_allclose(rotated, [0.0, -1.0, 5.0], atol=1e-12)

    def test_preserves_length_and_z(self) -> None:
        v = np.array([6500.0, 1200.0, -2500.0])
        for theta in np.linspace(0.0, 2 * math.pi, 13):
            rotated = inertial_to_fixed(v, theta)
            assert np.linalg.norm(rotated) == pytest.approx(np.linalg.norm(v))
            assert rotated[2] == v[2]

    def test_matrix_is_orthonormal(self) -> None:
        m = rotation_matrix(1.234)
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-12)
