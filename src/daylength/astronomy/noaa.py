"""Simplified day length from the NOAA declination series.

A single closed-form evaluation per date: declination comes from a 7-term
Fourier series in the fractional year, and the day length from the
sunrise hour angle. There is no iteration, and neither longitude nor
timezone enter the result, so the equation of time and the true solar
transit offset are ignored. Expect differences of a few minutes against
`daylength.astronomy.solar.day_length`, largest near the solstices and at
high latitudes.
"""

from __future__ import annotations

import math

from daylength.astronomy.julian import days_in_year
from daylength.astronomy.solar import (
    DEFAULT_HORIZON_DEG,
    DEG2RAD,
    DayLengthResult,
    check_latitude,
    hour_angle_cosine,
)


def fractional_year(day_of_year: int, year: int) -> float:
    """Fractional year angle in radians for a 1-based day of year."""
    return (2.0 * math.pi / days_in_year(year)) * (day_of_year - 1)


def noaa_declination(gamma_rad: float) -> float:
    """Solar declination in radians for a fractional year angle."""
    return (
        0.006918
        - 0.399912 * math.cos(gamma_rad)
        + 0.070257 * math.sin(gamma_rad)
        - 0.006758 * math.cos(2.0 * gamma_rad)
        + 0.000907 * math.sin(2.0 * gamma_rad)
        - 0.002697 * math.cos(3.0 * gamma_rad)
        + 0.001480 * math.sin(3.0 * gamma_rad)
    )


def simplified_day_length(
    latitude_rad: float,
    day_of_year: int,
    year: int,
    horizon_deg: float = DEFAULT_HORIZON_DEG,
) -> DayLengthResult:
    """Calculate day length without iteration or longitude/timezone input.

    Args:
        latitude_rad: Observer latitude in radians
        day_of_year: Day of the year (1-365/366)
        year: The year, for the leap-year length
        horizon_deg: Horizon angle correction in degrees

    Returns:
        DayLengthResult without sunrise/sunset clock times

    Raises:
        ParameterOutOfDomain: If latitude is non-finite or out of range
    """
    check_latitude(latitude_rad)

    declination_rad = noaa_declination(fractional_year(day_of_year, year))
    cos_ha = hour_angle_cosine(
        math.sin(horizon_deg * DEG2RAD),
        math.sin(latitude_rad),
        math.cos(latitude_rad),
        math.sin(declination_rad),
        math.cos(declination_rad),
    )

    if math.isnan(cos_ha):
        return DayLengthResult.indeterminate()
    if cos_ha >= 1.0:
        return DayLengthResult.polar_night()
    if cos_ha <= -1.0:
        return DayLengthResult.polar_day()

    # Sunrise to sunset spans twice the hour angle; 2*pi radians is 24 hours
    return DayLengthResult.daylight(2.0 * math.acos(cos_ha) * 24.0 / (2.0 * math.pi))
