"""Tests for Hermite and linear interpolation in interpolation.py"""

import numpy as np
import pytest

from flight_replay.interpolation import (
    interpolate_hermite,
    interpolate_hermite_180,
    interpolate_hermite_360,
    interpolate_linear,
    wrap_180,
    wrap_360,
)


class TestInterpolateHermite:
    """Tests for the plain interpolate_hermite function."""

    def test_endpoints_exact(self):
        assert interpolate_hermite(1.3, 2.7, 9.1, -4.0, 0.0) == 2.7
        assert interpolate_hermite(1.3, 2.7, 9.1, -4.0, 1.0) == 9.1

    def test_straight_line_reproduced(self):
        """Evenly spaced collinear points interpolate linearly."""
        for mu in np.linspace(0.0, 1.0, 11):
            assert interpolate_hermite(0.0, 10.0, 20.0, 30.0, mu) == pytest.approx(10.0 + 10.0 * mu)

    def test_midpoint(self):
        assert interpolate_hermite(10.0, 20.0, 30.0, 40.0, 0.5) == pytest.approx(25.0)

    def test_tension_one_flattens_tangents(self):
        """Full tension gives zero tangents: a smoothstep between p1 and p2."""
        mu = 0.25
        expected = 10.0 + 10.0 * (3 * mu ** 2 - 2 * mu ** 3)
        assert interpolate_hermite(0.0, 10.0, 20.0, 30.0, mu, tension=1.0) == pytest.approx(expected)


class TestInterpolateHermite180:
    """Tests for interpolate_hermite_180 (signed angles)."""

    @pytest.mark.parametrize("points,expected", [
        ((10.0, 20.0, 30.0, 40.0), 25.0),
        ((-10.0, -20.0, -30.0, -40.0), -25.0),
        ((-160.0, -170.0, 170.0, 160.0), -180.0),
        ((160.0, 170.0, -170.0, -160.0), -180.0),
        ((-20.0, -10.0, 10.0, 20.0), 0.0),
        ((20.0, 10.0, -10.0, -20.0), 0.0),
    ])
    def test_known_values(self, points, expected):
        assert interpolate_hermite_180(*points, 0.5) == pytest.approx(expected)

    def test_endpoints_exact(self):
        assert interpolate_hermite_180(-160.0, -170.0, 170.0, 160.0, 0.0) == -170.0
        assert interpolate_hermite_180(-160.0, -170.0, 170.0, 160.0, 1.0) == 170.0

    def test_output_in_domain(self):
        """Crossing the +/-180 boundary never leaves [-180, 180)."""
        for mu in np.linspace(0.0, 1.0, 21):
            value = interpolate_hermite_180(150.0, 170.0, -170.0, -150.0, mu)
            assert -180.0 <= value < 180.0

    def test_takes_short_way_round(self):
        value = interpolate_hermite_180(175.0, 179.0, -179.0, -175.0, 0.25)
        assert abs(value) > 179.0


class TestInterpolateHermite360:
    """Tests for interpolate_hermite_360 (headings)."""

    @pytest.mark.parametrize("points,expected", [
        ((10.0, 20.0, 30.0, 40.0), 25.0),
        ((350.0, 340.0, 330.0, 320.0), 335.0),
        ((20.0, 10.0, 350.0, 340.0), 0.0),
        ((340.0, 350.0, 10.0, 20.0), 0.0),
        ((160.0, 170.0, 190.0, 200.0), 180.0),
        ((200.0, 190.0, 170.0, 160.0), 180.0),
    ])
    def test_known_values(self, points, expected):
        assert interpolate_hermite_360(*points, 0.5) == pytest.approx(expected)

    def test_endpoints_exact(self):
        assert interpolate_hermite_360(340.0, 350.0, 10.0, 20.0, 0.0) == 350.0
        assert interpolate_hermite_360(340.0, 350.0, 10.0, 20.0, 1.0) == 10.0

    def test_output_in_domain(self):
        for mu in np.linspace(0.0, 1.0, 21):
            value = interpolate_hermite_360(330.0, 350.0, 10.0, 30.0, mu)
            assert 0.0 <= value < 360.0


class TestHelpers:
    """Tests for wrap and linear helpers."""

    @pytest.mark.parametrize("value,expected", [
        (0.0, 0.0), (180.0, -180.0), (-180.0, -180.0), (190.0, -170.0), (-190.0, 170.0), (540.0, -180.0),
    ])
    def test_wrap_180(self, value, expected):
        assert wrap_180(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value,expected", [
        (0.0, 0.0), (360.0, 0.0), (-10.0, 350.0), (725.0, 5.0),
    ])
    def test_wrap_360(self, value, expected):
        assert wrap_360(value) == pytest.approx(expected)

    def test_linear(self):
        assert interpolate_linear(0.0, 1.0, 0.25) == pytest.approx(0.25)
        assert interpolate_linear(0.2, 0.8, 0.0) == 0.2
        assert interpolate_linear(0.2, 0.8, 1.0) == 0.8
