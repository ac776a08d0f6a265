"""Tests for observer location and time context models."""

import math
from datetime import date

import pytest
from pydantic import ValidationError

from daylength.models.location import Coordinates, TimeContext


class TestCoordinates:
    """Tests for the Coordinates model."""

    def test_valid_coordinates(self):
        coords = Coordinates(latitude=69.6492, longitude=18.9553)
        assert coords.latitude == 69.6492
        assert coords.longitude == 18.9553

    def test_poles_and_date_line(self):
        """Boundary values are accepted."""
        assert Coordinates(latitude=90, longitude=0).latitude == 90
        assert Coordinates(latitude=-90, longitude=0).latitude == -90
        assert Coordinates(latitude=0, longitude=180).longitude == 180
        assert Coordinates(latitude=0, longitude=-180).longitude == -180

    @pytest.mark.parametrize(
        "latitude,longitude",
        [(90.5, 0), (-91, 0), (0, 180.1), (0, -200)],
    )
    def test_out_of_range(self, latitude, longitude):
        with pytest.raises(ValidationError):
            Coordinates(latitude=latitude, longitude=longitude)

    def test_latitude_rad(self):
        assert Coordinates(latitude=90, longitude=0).latitude_rad == pytest.approx(math.pi / 2)
        assert Coordinates(latitude=-45, longitude=0).latitude_rad == pytest.approx(-math.pi / 4)

    def test_frozen(self):
        coords = Coordinates(latitude=10, longitude=20)
        with pytest.raises(ValidationError):
            coords.latitude = 11

    def test_from_string(self):
        """Sydney, southern and eastern hemispheres."""
        coords = Coordinates.from_string("-33.8688,151.2093")
        assert coords.latitude == pytest.approx(-33.8688)
        assert coords.longitude == pytest.approx(151.2093)

    def test_from_string_signs_and_spaces(self):
        coords = Coordinates.from_string(" +69.65 , -18.95 ")
        assert coords.to_tuple() == (pytest.approx(69.65), pytest.approx(-18.95))

    @pytest.mark.parametrize("text", ["north,east", "51.5", "51.5;0.1", ""])
    def test_from_string_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid coordinate format"):
            Coordinates.from_string(text)

    def test_from_string_out_of_range(self):
        with pytest.raises(ValidationError):
            Coordinates.from_string("95,0")

    def test_str(self):
        assert str(Coordinates(latitude=51.5, longitude=-0.1278)) == "51.5,-0.1278"


class TestTimeContext:
    """Tests for the TimeContext model."""

    def test_defaults(self):
        context = TimeContext(day=date(2025, 6, 21))
        assert context.timezone_hours == 0.0
        assert context.horizon_deg == -0.83

    def test_julian_day(self):
        assert TimeContext(day=date(2000, 1, 1)).julian_day == 730120

    def test_accepts_iso_string(self):
        assert TimeContext(day="2025-06-21").day == date(2025, 6, 21)

    def test_fractional_timezone(self):
        context = TimeContext(day=date(2025, 6, 21), timezone_hours=5.5)
        assert context.describe_timezone() == "UTC+5.50"

    def test_negative_timezone(self):
        context = TimeContext(day=date(2025, 6, 21), timezone_hours=-3.5)
        assert context.describe_timezone() == "UTC-3.50"

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_timezone(self, value):
        with pytest.raises(ValidationError, match="must be finite"):
            TimeContext(day=date(2025, 6, 21), timezone_hours=value)

    def test_horizon_range(self):
        with pytest.raises(ValidationError):
            TimeContext(day=date(2025, 6, 21), horizon_deg=-91.0)
        assert TimeContext(day=date(2025, 6, 21), horizon_deg=-18.0).horizon_deg == -18.0
