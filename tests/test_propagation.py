"""Tests for SGP4 propagation and sidereal angle."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import numpy as np
import pytest

from skytrack.core.propagation import PropagationError, propagate, sidereal_angle
from skytrack.core.tle import TLE

ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596"


@pytest.fixture
def iss_tle() -> TLE:
    return TLE.from_lines(ISS_LINE1, ISS_LINE2, name="ISS (ZARYA)")


def _tle_with_satrec(satrec) -> TLE:
    return TLE(
        name="BROKEN",
        line1=ISS_LINE1,
        line2=ISS_LINE2,
        norad_id=99999,
        epoch=datetime(2024, 1, 1, tzinfo=timezone.utc),
        inclination_deg=0.0,
        mean_motion_rev_per_day=15.0,
        satrec=satrec,
    )


class TestPropagate:
    def test_leo_radius(self, iss_tle: TLE) -> None:
        state = propagate(iss_tle, iss_tle.epoch + timedelta(hours=1))
        assert 6500 < np.linalg.norm(state.position_km) < 7000
        assert 7.0 < np.linalg.norm(state.velocity_km_s) < 8.0
        assert state.position_km.shape == (3,)

    def test_epoch_is_kept(self, iss_tle: TLE) -> None:
        t = iss_tle.epoch + timedelta(minutes=5)
        assert propagate(iss_tle, t).epoch == t

    def test_naive_time_is_utc(self, iss_tle: TLE) -> None:
        aware = datetime(2024, 2, 14, 14, 0, tzinfo=timezone.utc)
        naive = aware.replace(tzinfo=None)
        np.testing.assert_allclose(
            propagate(iss_tle, aware).position_km,
            propagate(iss_tle, naive).position_km,
        )

    def test_other_timezone_converted(self, iss_tle: TLE) -> None:
        aware = datetime(2024, 2, 14, 14, 0, tzinfo=timezone.utc)
        shifted = aware.astimezone(timezone(timedelta(hours=5, minutes=30)))
        np.testing.assert_allclose(
            propagate(iss_tle, aware).position_km,
            propagate(iss_tle, shifted).position_km,
        )

    def test_error_code_raises(self) -> None:
        satrec = MagicMock()
        satrec.sgp4.return_value = (6, (math.nan,) * 3, (math.nan,) * 3)
        with pytest.raises(PropagationError, match="error code 6"):
            propagate(_tle_with_satrec(satrec), datetime(2024, 2, 1, tzinfo=timezone.utc))

    def test_non_finite_raises(self) -> None:
        satrec = MagicMock()
        satrec.sgp4.return_value = (0, (1.0, math.inf, 0.0), (0.0, 0.0, 0.0))
        with pytest.raises(PropagationError, match="non-finite"):
            propagate(_tle_with_satrec(satrec), datetime(2024, 2, 1, tzinfo=timezone.utc))

    def test_propagation_error_is_value_error(self) -> None:
        assert issubclass(PropagationError, ValueError)

    def test_far_future_fails_cleanly(self, iss_tle: TLE) -> None:
        """Decades past epoch the orbit has decayed; we get PropagationError or a state, never a crash."""
        far = iss_tle.epoch + timedelta(days=365 * 50)
        try:
            state = propagate(iss_tle, far)
        except PropagationError:
            return
        assert np.all(np.isfinite(state.position_km))


class TestSiderealAngle:
    def test_j2000(self) -> None:
        # GMST at 2000-01-01 12:00 UT1 is 280.46061837 deg.
        angle = sidereal_angle(datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc))
        assert math.degrees(angle) == pytest.approx(280.46061837, abs=1e-6)

    def test_range(self) -> None:
        t = datetime(2024, 2, 14, tzinfo=timezone.utc)
        for hours in range(0, 48, 3):
            angle = sidereal_angle(t + timedelta(hours=hours))
            assert 0.0 <= angle < 2 * math.pi

    def test_one_sidereal_day(self) -> None:
        t = datetime(2024, 2, 14, 6, 0, tzinfo=timezone.utc)
        later = t + timedelta(seconds=86164.0905)
        assert sidereal_angle(later) == pytest.approx(sidereal_angle(t), abs=1e-5)
