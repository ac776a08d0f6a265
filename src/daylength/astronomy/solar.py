"""Solar ephemeris, sunrise/sunset solver and elevation sampler.

All quantities are computed from truncated series in the day offset from
J2000.0 (see `daylength.astronomy.julian`). The same ephemeris core
(`solar_state`) is used by both the sunrise/sunset solver and the per-minute
elevation sampler.

Conventions:
- Angles are in degrees unless the name ends in `_rad`
- Local clock times are hours in [0, 24)
- The horizon angle defaults to -0.83 degrees (refraction plus solar radius)

Based on http://www.jgiesen.de/elevaz/basics/meeus.htm
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from daylength.astronomy.errors import ParameterOutOfDomain
from daylength.astronomy.julian import days_since_j2000

logger = logging.getLogger(__name__)

DEG2RAD = math.pi / 180.0
RAD2DEG = 180.0 / math.pi

DEFAULT_HORIZON_DEG = -0.83
MINUTES_PER_DAY = 1440

# Fixed-point refinement of sunrise/sunset
MAX_ITERATIONS = 5
TOLERANCE_HOURS = 0.1 / 3600.0

# Day length reported when the hour-angle ratio is 0/0
INDETERMINATE_DAY_LENGTH = 12.0


class DaylightKind(str, Enum):
    """Outcome of solving for the sunrise/sunset hour angle."""

    DAYLIGHT = "daylight"  # Sun rises and sets
    POLAR_DAY = "polar_day"  # Sun stays above the horizon angle
    POLAR_NIGHT = "polar_night"  # Sun stays below the horizon angle
    INDETERMINATE = "indeterminate"  # Hour-angle ratio evaluated to NaN


@dataclass(frozen=True)
class SolarState:
    """Solar declination and equation of time at one instant."""

    declination_sin: float
    declination_cos: float
    equation_of_time_minutes: float


@dataclass(frozen=True)
class OrbitalCoefficients:
    """Slowly varying terms, computed once per call rather than per sample."""

    obliquity_sin: float
    obliquity_cos: float
    ecliptic_c1: float
    ecliptic_c2: float

    @classmethod
    def for_epoch_offset(cls, days: float) -> OrbitalCoefficients:
        """Evaluate obliquity and equation-of-centre coefficients.

        Args:
            days: Whole-day offset from J2000.0 at midnight
        """
        days_sq = days * days
        days_cb = days_sq * days
        obliquity_deg = (
            23.439291111 - 3.560347e-7 * days - 1.2285e-16 * days_sq + 1.0335e-20 * days_cb
        )
        obliquity_rad = obliquity_deg * DEG2RAD
        return cls(
            obliquity_sin=math.sin(obliquity_rad),
            obliquity_cos=math.cos(obliquity_rad),
            ecliptic_c1=1.914600 - 1.3188e-7 * days - 1.049e-14 * days_sq,
            ecliptic_c2=0.019993 - 2.7652e-9 * days,
        )


@dataclass(frozen=True)
class DayLengthResult:
    """Day length with sunrise and sunset in local clock hours.

    `sunrise_hours` and `sunset_hours` are None whenever they are undefined
    (polar day, polar night, indeterminate) and for models that do not
    resolve clock times.
    """

    kind: DaylightKind
    day_length_hours: float
    sunrise_hours: float | None = None
    sunset_hours: float | None = None

    @classmethod
    def daylight(
        cls,
        day_length_hours: float,
        sunrise_hours: float | None = None,
        sunset_hours: float | None = None,
    ) -> DayLengthResult:
        return cls(DaylightKind.DAYLIGHT, day_length_hours, sunrise_hours, sunset_hours)

    @classmethod
    def polar_day(cls) -> DayLengthResult:
        return cls(DaylightKind.POLAR_DAY, 24.0)

    @classmethod
    def polar_night(cls) -> DayLengthResult:
        return cls(DaylightKind.POLAR_NIGHT, 0.0)

    @classmethod
    def indeterminate(cls) -> DayLengthResult:
        return cls(DaylightKind.INDETERMINATE, INDETERMINATE_DAY_LENGTH)

    @property
    def is_polar(self) -> bool:
        return self.kind in (DaylightKind.POLAR_DAY, DaylightKind.POLAR_NIGHT)

    @property
    def has_clock_times(self) -> bool:
        return self.sunrise_hours is not None and self.sunset_hours is not None


@dataclass(frozen=True)
class ElevationSeries:
    """Solar elevation angles in degrees, one per minute of the local day."""

    values: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def minute(self, index: int) -> float:
        """Elevation at minute `index` after local midnight."""
        return self.values[index]

    @property
    def max_elevation(self) -> float:
        return max(self.values)

    @property
    def min_elevation(self) -> float:
        return min(self.values)

    def index_at_fraction(self, fraction: float) -> int:
        """Map a position across the day (0.0 to 1.0) to the nearest sample.

        Chart front-ends use this to turn a click x-coordinate into a minute.
        """
        fraction = min(max(fraction, 0.0), 1.0)
        return min(round(fraction * (len(self.values) - 1)), len(self.values) - 1)

    def at_fraction(self, fraction: float) -> float:
        return self.values[self.index_at_fraction(fraction)]


def check_latitude(latitude_rad: float) -> None:
    """Raise ParameterOutOfDomain unless latitude is finite and within +/-90 degrees."""
    if not math.isfinite(latitude_rad) or abs(latitude_rad) > math.pi / 2 + 1e-12:
        raise ParameterOutOfDomain("latitude", latitude_rad * RAD2DEG)


def check_observer_inputs(
    latitude_rad: float, longitude_deg: float, timezone_hours: float
) -> None:
    """Validate the observer inputs shared by the solar and lunar samplers.

    Raises:
        ParameterOutOfDomain: If an input is non-finite or latitude is out of range
    """
    check_latitude(latitude_rad)
    if not math.isfinite(longitude_deg):
        raise ParameterOutOfDomain("longitude", longitude_deg)
    if not math.isfinite(timezone_hours):
        raise ParameterOutOfDomain("timezone", timezone_hours)


def hour_angle_cosine(
    sin_horizon: float,
    sin_lat: float,
    cos_lat: float,
    declination_sin: float,
    declination_cos: float,
) -> float:
    """Cosine of the hour angle at which the sun crosses the horizon angle.

    A vanishing denominator gives +/-inf (polar) or NaN when the numerator
    vanishes too.
    """
    numerator = sin_horizon - sin_lat * declination_sin
    denominator = cos_lat * declination_cos
    if denominator == 0.0:
        if numerator == 0.0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def solar_state(
    days_from_epoch_utc_midnight: float,
    local_time_hours: float,
    obliquity_sin: float,
    obliquity_cos: float,
    ecliptic_c1: float,
    ecliptic_c2: float,
) -> SolarState:
    """Compute solar declination and equation of time at a local time.

    Args:
        days_from_epoch_utc_midnight: Days from J2000.0 at the day's start
        local_time_hours: Hours after that start
        obliquity_sin: Sine of the obliquity of the ecliptic
        obliquity_cos: Cosine of the obliquity of the ecliptic
        ecliptic_c1: First equation-of-centre coefficient
        ecliptic_c2: Second equation-of-centre coefficient

    Returns:
        SolarState with declination sine/cosine and equation of time
    """
    days = days_from_epoch_utc_midnight + local_time_hours / 24.0
    days_sq = days * days
    days_cb = days_sq * days

    mean_anomaly_rad = (
        357.52910 + 0.985600282 * days - 1.1686e-13 * days_sq - 9.85e-21 * days_cb
    ) * DEG2RAD
    mean_longitude_deg = (280.46645 + 0.98564736 * days + 2.2727e-13 * days_sq) % 360.0

    ecliptic_longitude_rad = (
        mean_longitude_deg
        + ecliptic_c1 * math.sin(mean_anomaly_rad)
        + ecliptic_c2 * math.sin(2.0 * mean_anomaly_rad)
        + 0.000290 * math.sin(3.0 * mean_anomaly_rad)
    ) * DEG2RAD
    ecliptic_longitude_sin = math.sin(ecliptic_longitude_rad)
    ecliptic_longitude_cos = math.cos(ecliptic_longitude_rad)

    declination_sin = min(max(obliquity_sin * ecliptic_longitude_sin, -1.0), 1.0)
    declination_cos = math.sqrt(1.0 - declination_sin * declination_sin)

    right_ascension_hours = (
        math.atan2(obliquity_cos * ecliptic_longitude_sin, ecliptic_longitude_cos)
        * RAD2DEG
        / 15.0
    )
    time_diff = mean_longitude_deg / 15.0 - right_ascension_hours
    # Keep within +/-12h so there is no jump at local midnight
    if time_diff > 12.0:
        time_diff -= 24.0
    elif time_diff < -12.0:
        time_diff += 24.0

    return SolarState(
        declination_sin=declination_sin,
        declination_cos=declination_cos,
        equation_of_time_minutes=time_diff * 60.0,
    )


def _state_at(days: float, local_hours: float, coefficients: OrbitalCoefficients) -> SolarState:
    return solar_state(
        days,
        local_hours,
        coefficients.obliquity_sin,
        coefficients.obliquity_cos,
        coefficients.ecliptic_c1,
        coefficients.ecliptic_c2,
    )


def day_length(
    latitude_rad: float,
    longitude_deg: float,
    timezone_hours: float,
    julian_day: float,
    horizon_deg: float = DEFAULT_HORIZON_DEG,
) -> DayLengthResult:
    """Calculate day length, sunrise and sunset for one local date.

    Starts from a noon estimate of the sunrise/sunset hour angle and refines
    sunrise and sunset independently, re-evaluating declination and the
    equation of time at each current estimate.

    Args:
        latitude_rad: Observer latitude in radians
        longitude_deg: Observer longitude in degrees (east positive)
        timezone_hours: Timezone offset from UTC in hours
        julian_day: Day count of the local date (see `julian_day`)
        horizon_deg: Horizon angle correction in degrees

    Returns:
        DayLengthResult; polar day/night and indeterminate outcomes carry no
        sunrise/sunset times

    Raises:
        ParameterOutOfDomain: If an input is non-finite or latitude is out of range
    """
    check_observer_inputs(latitude_rad, longitude_deg, timezone_hours)

    sin_lat = math.sin(latitude_rad)
    cos_lat = math.cos(latitude_rad)
    sin_horizon = math.sin(horizon_deg * DEG2RAD)

    base_days = days_since_j2000(julian_day) - timezone_hours / 24.0
    coefficients = OrbitalCoefficients.for_epoch_offset(base_days)
    tst_offset = 4.0 * longitude_deg - 60.0 * timezone_hours

    state = _state_at(base_days, 12.0, coefficients)
    cos_ha = hour_angle_cosine(
        sin_horizon, sin_lat, cos_lat, state.declination_sin, state.declination_cos
    )

    if math.isnan(cos_ha):
        logger.debug(f"Hour angle ratio is indeterminate at latitude {latitude_rad:.4f} rad")
        return DayLengthResult.indeterminate()
    if cos_ha >= 1.0:
        return DayLengthResult.polar_night()
    if cos_ha <= -1.0:
        return DayLengthResult.polar_day()

    ha_hours = math.acos(cos_ha) * RAD2DEG / 15.0
    sunrise = 12.0 - ha_hours - (state.equation_of_time_minutes + tst_offset) / 60.0
    sunset = 12.0 + ha_hours - (state.equation_of_time_minutes + tst_offset) / 60.0

    for iteration in range(MAX_ITERATIONS):
        previous_sunrise = sunrise
        previous_sunset = sunset

        state = _state_at(base_days, sunrise, coefficients)
        cos_ha = hour_angle_cosine(
            sin_horizon, sin_lat, cos_lat, state.declination_sin, state.declination_cos
        )
        if not -1.0 < cos_ha < 1.0:
            logger.debug(f"Sunrise hour angle left [-1, 1] at iteration {iteration}")
            break
        sunrise = (
            12.0
            - math.acos(cos_ha) * RAD2DEG / 15.0
            - (state.equation_of_time_minutes + tst_offset) / 60.0
        )

        state = _state_at(base_days, sunset, coefficients)
        cos_ha = hour_angle_cosine(
            sin_horizon, sin_lat, cos_lat, state.declination_sin, state.declination_cos
        )
        if not -1.0 < cos_ha < 1.0:
            logger.debug(f"Sunset hour angle left [-1, 1] at iteration {iteration}")
            break
        sunset = (
            12.0
            + math.acos(cos_ha) * RAD2DEG / 15.0
            - (state.equation_of_time_minutes + tst_offset) / 60.0
        )

        if (
            abs(sunrise - previous_sunrise) < TOLERANCE_HOURS
            and abs(sunset - previous_sunset) < TOLERANCE_HOURS
        ):
            break

    sunrise %= 24.0
    sunset %= 24.0
    return DayLengthResult.daylight((sunset - sunrise) % 24.0, sunrise, sunset)


def solar_elevations(
    latitude_rad: float,
    longitude_deg: float,
    timezone_hours: float,
    julian_day: float,
) -> ElevationSeries:
    """Sample solar elevation once per minute of the local day.

    Args:
        latitude_rad: Observer latitude in radians
        longitude_deg: Observer longitude in degrees
        timezone_hours: Timezone offset from UTC in hours
        julian_day: Day count of the local date

    Returns:
        ElevationSeries of 1440 elevation angles in degrees
    """
    check_observer_inputs(latitude_rad, longitude_deg, timezone_hours)

    sin_lat = math.sin(latitude_rad)
    cos_lat = math.cos(latitude_rad)
    base_days = days_since_j2000(julian_day)
    coefficients = OrbitalCoefficients.for_epoch_offset(base_days)
    tst_offset = 4.0 * longitude_deg - 60.0 * timezone_hours

    values = []
    for i in range(MINUTES_PER_DAY):
        state = _state_at(base_days, i / 60.0 - timezone_hours, coefficients)
        hour_angle_rad = ((i + state.equation_of_time_minutes + tst_offset) / 4.0 - 180.0) * DEG2RAD
        elevation_sin = (
            sin_lat * state.declination_sin
            + cos_lat * state.declination_cos * math.cos(hour_angle_rad)
        )
        values.append(math.asin(min(max(elevation_sin, -1.0), 1.0)) * RAD2DEG)

    return ElevationSeries(tuple(values))
