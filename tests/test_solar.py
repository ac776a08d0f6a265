"""Tests for the solar ephemeris, sunrise/sunset solver and elevation sampler."""

import math
from datetime import date, timedelta

import pytest

from daylength.astronomy.errors import AstronomyError, ParameterOutOfDomain
from daylength.astronomy.julian import julian_day
from daylength.astronomy.solar import (
    INDETERMINATE_DAY_LENGTH,
    MINUTES_PER_DAY,
    DayLengthResult,
    DaylightKind,
    OrbitalCoefficients,
    check_latitude,
    check_observer_inputs,
    day_length,
    hour_angle_cosine,
    solar_elevations,
    solar_state,
)

LONDON_LAT = math.radians(51.5)


def _state(days: float, local_hours: float):
    c = OrbitalCoefficients.for_epoch_offset(days)
    return solar_state(
        days, local_hours, c.obliquity_sin, c.obliquity_cos, c.ecliptic_c1, c.ecliptic_c2
    )


class TestSolarState:
    """Tests for declination and equation of time."""

    def test_j2000_declination(self):
        """Declination at J2000.0 is about -23.03 degrees."""
        state = _state(-0.5, 12.0)
        declination = math.degrees(math.asin(state.declination_sin))
        assert declination == pytest.approx(-23.03, abs=0.1)

    def test_j2000_equation_of_time(self):
        """Sundials run about three minutes slow on January 1st."""
        state = _state(-0.5, 12.0)
        assert -4.0 < state.equation_of_time_minutes < -2.5

    def test_declination_components_consistent(self):
        for offset in range(0, 365, 30):
            state = _state(9000.5 + offset, 6.0)
            assert state.declination_sin**2 + state.declination_cos**2 == pytest.approx(1.0)
            assert state.declination_cos >= 0

    def test_equation_of_time_bounded(self):
        """Equation of time stays within about 17 minutes over a year."""
        start = julian_day(2025, 1, 1) - 730120.5
        for offset in range(366):
            state = _state(start + offset, 12.0)
            assert abs(state.equation_of_time_minutes) < 17.0

    def test_declination_bounded_by_obliquity(self):
        start = julian_day(2025, 1, 1) - 730120.5
        for offset in range(0, 366, 5):
            state = _state(start + offset, 12.0)
            assert abs(math.degrees(math.asin(state.declination_sin))) < 23.5


class TestHourAngleCosine:
    """Tests for the horizon crossing ratio."""

    def test_regular_value(self):
        value = hour_angle_cosine(0.0, math.sin(0.5), math.cos(0.5), 0.0, 1.0)
        assert value == pytest.approx(0.0)

    def test_zero_over_zero_is_nan(self):
        assert math.isnan(hour_angle_cosine(0.0, 1.0, 0.0, 0.0, 1.0))

    def test_zero_denominator_is_infinite(self):
        assert hour_angle_cosine(0.1, 1.0, 0.0, 0.0, 1.0) == math.inf
        assert hour_angle_cosine(-0.1, 1.0, 0.0, 0.0, 1.0) == -math.inf


class TestDayLengthResult:
    """Tests for the tagged result type."""

    def test_polar_day(self):
        result = DayLengthResult.polar_day()
        assert result.kind == DaylightKind.POLAR_DAY
        assert result.day_length_hours == 24.0
        assert result.sunrise_hours is None
        assert result.is_polar

    def test_polar_night(self):
        result = DayLengthResult.polar_night()
        assert result.day_length_hours == 0.0
        assert result.sunset_hours is None
        assert result.is_polar

    def test_indeterminate(self):
        result = DayLengthResult.indeterminate()
        assert result.kind == DaylightKind.INDETERMINATE
        assert result.day_length_hours == INDETERMINATE_DAY_LENGTH == 12.0
        assert not result.has_clock_times
        assert not result.is_polar

    def test_daylight_without_clock_times(self):
        result = DayLengthResult.daylight(12.5)
        assert result.kind == DaylightKind.DAYLIGHT
        assert not result.has_clock_times


class TestDayLength:
    """Tests for the iterative sunrise/sunset solver."""

    def test_london_summer_solstice(self):
        """About 16.6 hours of daylight, sunrise at 03:43 UTC."""
        # Clock times are UTC; the after-21:00 sunset only holds on BST (UTC+1).
        result = day_length(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert result.kind == DaylightKind.DAYLIGHT
        assert result.day_length_hours == pytest.approx(16.6, abs=0.15)
        assert result.sunrise_hours == pytest.approx(3.72, abs=0.1)
        assert result.sunset_hours == pytest.approx(20.36, abs=0.1)

    def test_london_winter_solstice(self):
        result = day_length(LONDON_LAT, 0.0, 0.0, julian_day(2025, 12, 21))
        assert result.kind == DaylightKind.DAYLIGHT
        assert 7.5 < result.day_length_hours < 9.0
        assert 7.5 < result.sunrise_hours < 8.5

    def test_sunrise_before_sunset_at_home_meridian(self):
        result = day_length(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert result.sunrise_hours < 12.0 < result.sunset_hours

    @pytest.mark.parametrize("month", range(1, 13))
    def test_equator_near_twelve_hours(self, month):
        result = day_length(0.0, 0.0, 0.0, julian_day(2025, month, 15))
        assert abs(result.day_length_hours - 12.0) < 0.2
        # Refraction and the solar disk lengthen every equatorial day
        assert result.day_length_hours > 12.0

    def test_arctic_summer_is_polar_day(self):
        result = day_length(math.radians(85.0), 0.0, 0.0, julian_day(2025, 6, 21))
        assert result.kind == DaylightKind.POLAR_DAY
        assert result.day_length_hours == 24.0
        assert result.sunrise_hours is None
        assert result.sunset_hours is None

    def test_arctic_winter_is_polar_night(self):
        result = day_length(math.radians(85.0), 0.0, 0.0, julian_day(2025, 12, 21))
        assert result.kind == DaylightKind.POLAR_NIGHT
        assert result.day_length_hours == 0.0
        assert result.sunrise_hours is None

    def test_antarctic_is_opposite(self):
        result = day_length(math.radians(-85.0), 0.0, 0.0, julian_day(2025, 6, 21))
        assert result.kind == DaylightKind.POLAR_NIGHT

    def test_pole_is_polar(self):
        result = day_length(math.pi / 2, 0.0, 0.0, julian_day(2025, 6, 21))
        assert result.kind == DaylightKind.POLAR_DAY

    def test_hemispheres_sum_to_a_day(self):
        """With a zero horizon, mirrored latitudes share 24 hours."""
        jd = julian_day(2025, 6, 21)
        north = day_length(LONDON_LAT, 0.0, 0.0, jd, horizon_deg=0.0)
        south = day_length(-LONDON_LAT, 0.0, 0.0, jd, horizon_deg=0.0)
        assert north.day_length_hours + south.day_length_hours == pytest.approx(24.0, abs=0.05)

    def test_lower_horizon_lengthens_day(self):
        jd = julian_day(2025, 3, 1)
        geometric = day_length(LONDON_LAT, 0.0, 0.0, jd, horizon_deg=0.0)
        civil = day_length(LONDON_LAT, 0.0, 0.0, jd, horizon_deg=-6.0)
        assert civil.day_length_hours > geometric.day_length_hours + 1.0

    def test_timezone_shifts_clock_times(self):
        """Moving to UTC+1 shifts the clock times but not the length."""
        jd = julian_day(2025, 6, 21)
        utc = day_length(LONDON_LAT, 0.0, 0.0, jd)
        bst = day_length(LONDON_LAT, 0.0, 1.0, jd)
        assert bst.sunrise_hours == pytest.approx(utc.sunrise_hours + 1.0, abs=0.01)
        assert bst.day_length_hours == pytest.approx(utc.day_length_hours, abs=0.01)

    def test_longitude_shifts_clock_times(self):
        """Fifteen degrees west puts sunrise an hour later on the same clock."""
        jd = julian_day(2025, 6, 21)
        home = day_length(LONDON_LAT, 0.0, 0.0, jd)
        west = day_length(LONDON_LAT, -15.0, 0.0, jd)
        assert west.sunrise_hours == pytest.approx(home.sunrise_hours + 1.0, abs=0.02)

    def test_repeatable(self):
        jd = julian_day(2025, 9, 1)
        assert day_length(LONDON_LAT, 0.0, 0.0, jd) == day_length(LONDON_LAT, 0.0, 0.0, jd)

    def test_clock_times_consistent_with_length(self):
        """Sunset minus sunrise (mod 24) equals the day length everywhere."""
        start = date(2025, 1, 10)
        for latitude in (-60, -45, -30, -15, 0, 15, 30, 45, 60):
            for longitude, tz in ((0.0, 0.0), (120.0, 8.0), (-75.0, -5.0), (0.0, 8.0)):
                for month_offset in range(0, 365, 30):
                    day = start + timedelta(days=month_offset)
                    result = day_length(
                        math.radians(latitude),
                        longitude,
                        tz,
                        julian_day(day.year, day.month, day.day),
                    )
                    assert result.kind == DaylightKind.DAYLIGHT
                    assert 0.0 < result.day_length_hours < 24.0
                    assert 0.0 <= result.sunrise_hours < 24.0
                    assert 0.0 <= result.sunset_hours < 24.0
                    assert (result.sunset_hours - result.sunrise_hours) % 24.0 == pytest.approx(
                        result.day_length_hours, abs=1e-9
                    )

    @pytest.mark.parametrize(
        "latitude_rad,longitude,tz",
        [
            (math.nan, 0.0, 0.0),
            (math.radians(91.0), 0.0, 0.0),
            (math.radians(-95.0), 0.0, 0.0),
            (0.5, math.inf, 0.0),
            (0.5, 0.0, math.nan),
        ],
    )
    def test_out_of_domain(self, latitude_rad, longitude, tz):
        with pytest.raises(ParameterOutOfDomain):
            day_length(latitude_rad, longitude, tz, julian_day(2025, 6, 21))

    def test_out_of_domain_names_parameter(self):
        with pytest.raises(AstronomyError, match="timezone"):
            day_length(0.5, 0.0, math.inf, julian_day(2025, 6, 21))


class TestSolarElevations:
    """Tests for the per-minute elevation sampler."""

    def test_sample_count(self):
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert len(series) == MINUTES_PER_DAY == 1440

    def test_london_solstice_extremes(self):
        """Noon altitude is 90 - 51.5 + 23.44; midnight is the mirror image."""
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert 61.0 < series.max_elevation < 62.5
        assert -16.0 < series.min_elevation < -14.0

    def test_peak_near_local_noon(self):
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        peak = series.values.index(series.max_elevation)
        assert 715 <= peak <= 730

    def test_equator_equinox_overhead(self):
        series = solar_elevations(0.0, 0.0, 0.0, julian_day(2025, 3, 20))
        assert series.max_elevation > 89.0

    def test_elevations_bounded(self):
        series = solar_elevations(math.radians(-33.9), 151.2, 10.0, julian_day(2025, 1, 15))
        assert all(-90.0 <= e <= 90.0 for e in series)

    def test_day_wraps_smoothly(self):
        """Last minute of the day joins up with the first."""
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert abs(series[0] - series[1439]) < 1.0

    def test_adjacent_minutes_close(self):
        series = solar_elevations(0.0, 0.0, 0.0, julian_day(2025, 3, 20))
        assert all(abs(a - b) < 0.26 for a, b in zip(series.values, series.values[1:]))

    def test_horizon_crossing_matches_sunrise(self):
        """At the solved sunrise minute the sun sits at the horizon angle."""
        jd = julian_day(2025, 6, 21)
        result = day_length(LONDON_LAT, 0.0, 0.0, jd)
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, jd)
        assert series.minute(round(result.sunrise_hours * 60)) == pytest.approx(-0.83, abs=0.3)
        assert series.minute(round(result.sunset_hours * 60)) == pytest.approx(-0.83, abs=0.3)

    def test_at_fraction(self):
        series = solar_elevations(LONDON_LAT, 0.0, 0.0, julian_day(2025, 6, 21))
        assert series.index_at_fraction(0.0) == 0
        assert series.index_at_fraction(1.0) == 1439
        assert series.index_at_fraction(0.5) in (719, 720)
        assert series.index_at_fraction(-3.0) == 0
        assert series.index_at_fraction(7.0) == 1439
        assert series.at_fraction(1.0) == series[1439]

    def test_out_of_domain(self):
        with pytest.raises(ParameterOutOfDomain):
            solar_elevations(math.nan, 0.0, 0.0, julian_day(2025, 6, 21))


class TestInputChecks:
    """Tests for the observer input checks shared by every sampler."""

    @pytest.mark.parametrize("latitude", [0.0, math.pi / 2, -math.pi / 2])
    def test_latitude_accepted(self, latitude):
        check_latitude(latitude)

    @pytest.mark.parametrize("latitude", [math.radians(90.5), -math.radians(91.0), math.inf, math.nan])
    def test_latitude_rejected(self, latitude):
        with pytest.raises(ParameterOutOfDomain) as exc_info:
            check_latitude(latitude)
        assert exc_info.value.parameter == "latitude"

    @pytest.mark.parametrize(
        "longitude,timezone,parameter",
        [(math.inf, 0.0, "longitude"), (0.0, math.nan, "timezone")],
    )
    def test_observer_inputs_rejected(self, longitude, timezone, parameter):
        with pytest.raises(ParameterOutOfDomain) as exc_info:
            check_observer_inputs(LONDON_LAT, longitude, timezone)
        assert exc_info.value.parameter == parameter

    def test_observer_inputs_accepted(self):
        check_observer_inputs(LONDON_LAT, -179.9, 14.0)
