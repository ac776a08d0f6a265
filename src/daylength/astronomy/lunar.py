"""Lunar position, distance and phase over a local day.

Uses the low-precision lunar theory (truncated periodic series in the
fundamental arguments D, M, M', F) and converts the geocentric ecliptic
position to a topocentric elevation with a WGS84 parallax correction.
There is no atmospheric refraction.

Accuracy is a few tenths of a degree in position, which is plenty for
daily elevation charts and phase naming.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from daylength.astronomy.julian import days_since_j2000
from daylength.astronomy.solar import (
    DEG2RAD,
    MINUTES_PER_DAY,
    RAD2DEG,
    check_observer_inputs,
)

EARTH_FLATTENING = 1.0 / 298.257223563
EARTH_EQUATORIAL_RADIUS_KM = 6378.137
DAYS_PER_CENTURY = 36525.0


class MoonPhase(str, Enum):
    """Named lunar phases by solar-lunar elongation."""

    NEW = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"


@dataclass(frozen=True)
class LunarSample:
    """Moon state at one minute of the local day."""

    minute: int
    elevation_deg: float  # Topocentric, no refraction
    distance_km: float  # Observer to Moon
    illuminated_fraction: float  # 0.0 - 1.0
    elongation_deg: float  # Moon minus Sun ecliptic longitude, [0, 360)

    @property
    def phase(self) -> MoonPhase:
        return classify_phase(self.elongation_deg)

    def describe(self) -> str:
        return describe_phase(self.illuminated_fraction, self.elongation_deg)


@dataclass(frozen=True)
class LunarSeries:
    """Per-minute lunar samples for a local day."""

    samples: tuple[LunarSample, ...]

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[LunarSample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> LunarSample:
        return self.samples[index]

    @property
    def elevations(self) -> list[float]:
        return [s.elevation_deg for s in self.samples]

    @property
    def max_elevation(self) -> float:
        return max(s.elevation_deg for s in self.samples)

    @property
    def max_illumination(self) -> float:
        return max(s.illuminated_fraction for s in self.samples)

    @property
    def min_illumination(self) -> float:
        return min(s.illuminated_fraction for s in self.samples)

    def phase_at(self, minute: int) -> MoonPhase:
        return self.samples[minute].phase


def wrap_degrees(angle_deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle_deg % 360.0
    # -1e-15 % 360.0 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def classify_phase(elongation_deg: float) -> MoonPhase:
    """Name the phase for an elongation angle.

    Quarters and full moon use +/-5 degree windows around 90/180/270, new moon
    the 10 degrees centred on 0.
    """
    elongation = wrap_degrees(elongation_deg)
    if elongation < 5 or elongation > 355:
        return MoonPhase.NEW
    if elongation < 85:
        return MoonPhase.WAXING_CRESCENT
    if elongation < 95:
        return MoonPhase.FIRST_QUARTER
    if elongation < 175:
        return MoonPhase.WAXING_GIBBOUS
    if elongation < 185:
        return MoonPhase.FULL
    if elongation < 265:
        return MoonPhase.WANING_GIBBOUS
    if elongation < 275:
        return MoonPhase.LAST_QUARTER
    return MoonPhase.WANING_CRESCENT


def describe_phase(illuminated_fraction: float, elongation_deg: float) -> str:
    """Phase name with illuminated percentage, e.g. 'Full Moon (99.8%)'."""
    return f"{classify_phase(elongation_deg).value} ({illuminated_fraction * 100.0:.1f}%)"


@dataclass(frozen=True)
class _ObserverTerms:
    sin_lat: float
    cos_lat: float
    rho_sin_phi_prime: float
    rho_cos_phi_prime: float

    @classmethod
    def for_latitude(cls, latitude_rad: float) -> _ObserverTerms:
        # Geocentric latitude on the WGS84 ellipsoid at sea level
        phi_prime = math.atan((1 - EARTH_FLATTENING) * math.tan(latitude_rad))
        return cls(
            sin_lat=math.sin(latitude_rad),
            cos_lat=math.cos(latitude_rad),
            rho_sin_phi_prime=(1 - EARTH_FLATTENING) * math.sin(phi_prime),
            rho_cos_phi_prime=math.cos(phi_prime),
        )


def _lunar_sample(
    minute: int,
    days: float,
    longitude_deg: float,
    observer: _ObserverTerms,
    obliquity_sin: float,
    obliquity_cos: float,
    sun_eq_c1: float,
    sun_eq_c2: float,
) -> LunarSample:
    t = days / DAYS_PER_CENTURY
    t2 = t * t
    t3 = t2 * t
    t4 = t3 * t

    # Fundamental arguments (degrees)
    moon_mean_longitude = (
        218.3164477 + 481267.88123421 * t - 0.0015786 * t2 + t3 / 538841.0 - t4 / 65194000.0
    )
    mean_elongation = (
        297.8501921 + 445267.1114034 * t - 0.0018819 * t2 + t3 / 545868.0 - t4 / 113065000.0
    )
    sun_mean_anomaly = 357.5291092 + 35999.0502909 * t - 0.0001536 * t2 + t3 / 24490000.0
    moon_mean_anomaly = (
        134.9633964 + 477198.8675055 * t + 0.0087414 * t2 + t3 / 69699.0 - t4 / 14712000.0
    )
    argument_of_latitude = (
        93.2720950 + 483202.0175233 * t - 0.0036539 * t2 - t3 / 3526000.0 + t4 / 863310000.0
    )

    d = mean_elongation * DEG2RAD
    m = sun_mean_anomaly * DEG2RAD
    mp = moon_mean_anomaly * DEG2RAD
    f = argument_of_latitude * DEG2RAD

    ecliptic_longitude = (
        moon_mean_longitude
        + 6.2888 * math.sin(mp)
        + 1.2740 * math.sin(2 * d - mp)
        + 0.6583 * math.sin(2 * d)
        + 0.2136 * math.sin(2 * d - m)
        - 0.1856 * math.sin(m)
        - 0.1143 * math.sin(2 * f)
        - 0.0588 * math.sin(2 * d - 2 * mp)
        - 0.0572 * math.sin(2 * d - m - mp)
        + 0.0533 * math.sin(2 * d + mp)
    )
    ecliptic_latitude = (
        5.1282 * math.sin(f)
        + 0.2806 * math.sin(mp + f)
        + 0.2777 * math.sin(mp - f)
        + 0.1732 * math.sin(2 * d - f)
    )
    geocentric_distance_km = (
        385000.6
        - 20905.0 * math.cos(mp)
        - 3699.0 * math.cos(2 * d - mp)
        - 2956.0 * math.cos(2 * d)
        - 570.0 * math.cos(2 * mp)
        + 246.0 * math.cos(2 * d - 2 * mp)
        - 205.0 * math.cos(2 * d - m)
        - 171.0 * math.cos(2 * d + mp)
        - 152.0 * math.cos(2 * d - m - mp)
    )
    parallax_sin = EARTH_EQUATORIAL_RADIUS_KM / geocentric_distance_km

    # Apparent solar longitude for the elongation
    sun_mean_longitude = wrap_degrees(280.46646 + 36000.76983 * t + 0.0003032 * t2)
    sun_true_longitude = (
        sun_mean_longitude
        + sun_eq_c1 * math.sin(m)
        + sun_eq_c2 * math.sin(2 * m)
        + 0.000289 * math.sin(3 * m)
    )
    omega = moon_mean_longitude - argument_of_latitude
    sun_apparent_longitude = sun_true_longitude - 0.00569 - 0.00478 * math.sin(omega * DEG2RAD)

    lambda_rad = ecliptic_longitude * DEG2RAD
    beta_rad = ecliptic_latitude * DEG2RAD
    cos_elongation = math.cos(beta_rad) * math.cos(lambda_rad - sun_apparent_longitude * DEG2RAD)
    illuminated_fraction = (1.0 - cos_elongation) / 2.0
    elongation = wrap_degrees(ecliptic_longitude - sun_apparent_longitude)

    # Ecliptic to equatorial
    sin_lon = math.sin(lambda_rad)
    sin_lat = math.sin(beta_rad)
    cos_lat = math.cos(beta_rad)
    right_ascension_rad = math.atan2(
        sin_lon * obliquity_cos - math.tan(beta_rad) * obliquity_sin, math.cos(lambda_rad)
    )
    declination_sin = sin_lat * obliquity_cos + cos_lat * obliquity_sin * sin_lon
    declination_cos = math.cos(math.asin(declination_sin))

    gmst_deg = wrap_degrees(280.46061837 + 360.98564736629 * days)
    hour_angle_rad = (gmst_deg + longitude_deg) * DEG2RAD - right_ascension_rad

    # Geocentric to topocentric
    a = declination_cos * math.sin(hour_angle_rad)
    b = declination_cos * math.cos(hour_angle_rad) - observer.rho_cos_phi_prime * parallax_sin
    c = declination_sin - observer.rho_sin_phi_prime * parallax_sin
    topocentric_hour_angle = math.atan2(a, b)
    topocentric_declination = math.atan2(c, math.sqrt(a * a + b * b))

    elevation_sin = observer.sin_lat * math.sin(topocentric_declination) + (
        observer.cos_lat * math.cos(topocentric_declination) * math.cos(topocentric_hour_angle)
    )

    return LunarSample(
        minute=minute,
        elevation_deg=math.asin(min(max(elevation_sin, -1.0), 1.0)) * RAD2DEG,
        distance_km=math.sqrt(a * a + b * b + c * c) * geocentric_distance_km,
        illuminated_fraction=illuminated_fraction,
        elongation_deg=elongation,
    )


def lunar_samples(
    latitude_rad: float,
    longitude_deg: float,
    timezone_hours: float,
    julian_day: float,
) -> LunarSeries:
    """Calculate Moon elevation, distance and phase for each minute of a day.

    Args:
        latitude_rad: Observer latitude in radians
        longitude_deg: Observer longitude in degrees (east positive)
        timezone_hours: Timezone offset from UTC in hours
        julian_day: Day count of the local date

    Returns:
        LunarSeries with 1440 samples starting at local midnight

    Raises:
        ParameterOutOfDomain: If an input is non-finite or latitude is out of range
    """
    check_observer_inputs(latitude_rad, longitude_deg, timezone_hours)

    observer = _ObserverTerms.for_latitude(latitude_rad)
    base_days = days_since_j2000(julian_day)

    # Obliquity and solar equation-of-centre terms change very slowly
    t = base_days / DAYS_PER_CENTURY
    t2 = t * t
    obliquity_rad = (23.439291111 - 0.013004167 * t - 1.63889e-7 * t2 + 5.0361e-7 * t2 * t) * DEG2RAD
    obliquity_sin = math.sin(obliquity_rad)
    obliquity_cos = math.cos(obliquity_rad)
    sun_eq_c1 = 1.914602 - 0.004817 * t - 0.000014 * t2
    sun_eq_c2 = 0.019993 - 0.000101 * t

    samples = tuple(
        _lunar_sample(
            i,
            base_days + (i / 60.0 - timezone_hours) / 24.0,
            longitude_deg,
            observer,
            obliquity_sin,
            obliquity_cos,
            sun_eq_c1,
            sun_eq_c2,
        )
        for i in range(MINUTES_PER_DAY)
    )
    return LunarSeries(samples)
