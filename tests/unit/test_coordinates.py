"""
Unit tests for fixed-point coordinate validation.

Tests cover:
- Inclusive latitude/longitude bounds
- Rejection of non-integer values
- Degree conversion helpers
"""

import pytest

from diary.geodiary_server.store.coordinates import (
    LATITUDE_MAX,
    LATITUDE_MIN,
    LONGITUDE_MAX,
    LONGITUDE_MIN,
    from_fixed_point,
    to_fixed_point,
    valid_coordinates,
)


class TestValidCoordinates:
    """Tests for valid_coordinates."""

    @pytest.mark.parametrize(
        "lat,lng",
        [
            (0, 0),
            (40689247, -74044502),
            (LATITUDE_MIN, LONGITUDE_MIN),
            (LATITUDE_MAX, LONGITUDE_MAX),
            (LATITUDE_MAX, LONGITUDE_MIN),
        ],
    )
    def test_in_range(self, lat, lng):
        """Values inside or on the bounds are valid."""
        assert valid_coordinates(lat, lng) is True

    @pytest.mark.parametrize(
        "lat,lng",
        [
            (LATITUDE_MAX + 1, 0),
            (LATITUDE_MIN - 1, 0),
            (0, LONGITUDE_MAX + 1),
            (0, LONGITUDE_MIN - 1),
            (-90_000_001, 180_000_001),
        ],
    )
    def test_out_of_range(self, lat, lng):
        """Values one past a bound are rejected."""
        assert valid_coordinates(lat, lng) is False

    def test_bounds_are_degrees_scaled(self):
        """Bounds are +/-90 and +/-180 degrees at six decimals."""
        assert LATITUDE_MAX == 90_000_000
        assert LATITUDE_MIN == -90_000_000
        assert LONGITUDE_MAX == 180_000_000
        assert LONGITUDE_MIN == -180_000_000

    def test_rejects_non_integers(self):
        """Floats, strings and booleans are not fixed-point values."""
        assert valid_coordinates(40.5, 0) is False
        assert valid_coordinates(0, "1") is False
        assert valid_coordinates(True, 0) is False
        assert valid_coordinates(None, None) is False


class TestFixedPointConversion:
    """Tests for degree conversion helpers."""

    def test_to_fixed_point(self):
        """Degrees convert to integers scaled by one million."""
        assert to_fixed_point(40.689247) == 40689247
        assert to_fixed_point(-74.044502) == -74044502
        assert to_fixed_point(0) == 0

    def test_rounds_half_away_from_zero(self):
        """The seventh decimal rounds away from zero."""
        assert to_fixed_point("0.0000005") == 1
        assert to_fixed_point("-0.0000005") == -1
        assert to_fixed_point("0.0000004") == 0

    @pytest.mark.parametrize("degrees", [float("nan"), float("inf"), float("-inf"), "north"])
    def test_rejects_non_finite(self, degrees):
        """NaN, infinities and non-numeric strings raise ValueError."""
        with pytest.raises(ValueError):
            to_fixed_point(degrees)

    def test_from_fixed_point(self):
        """Fixed-point values convert back to degrees."""
        assert from_fixed_point(40689247) == pytest.approx(40.689247)
        assert from_fixed_point(-180_000_000) == -180.0
