"""Solar and lunar ephemeris calculations.

The per-location `AstronomyCalculator` and the day length models live in
`daylength.astronomy.calculator`.
"""

from daylength.astronomy.errors import AstronomyError, InvalidDate, ParameterOutOfDomain
from daylength.astronomy.julian import (
    J2000_OFFSET,
    day_of_year,
    days_in_year,
    days_since_j2000,
    julian_day,
    julian_day_from_date,
    parse_date,
)
from daylength.astronomy.lunar import (
    LunarSample,
    LunarSeries,
    MoonPhase,
    classify_phase,
    describe_phase,
    lunar_samples,
)
from daylength.astronomy.noaa import noaa_declination, simplified_day_length
from daylength.astronomy.solar import (
    DEFAULT_HORIZON_DEG,
    DayLengthResult,
    DaylightKind,
    ElevationSeries,
    SolarState,
    day_length,
    solar_elevations,
    solar_state,
)

__all__ = [
    # Errors
    "AstronomyError",
    "InvalidDate",
    "ParameterOutOfDomain",
    # Calendar
    "J2000_OFFSET",
    "day_of_year",
    "days_in_year",
    "days_since_j2000",
    "julian_day",
    "julian_day_from_date",
    "parse_date",
    # Sun
    "DEFAULT_HORIZON_DEG",
    "DayLengthResult",
    "DaylightKind",
    "ElevationSeries",
    "SolarState",
    "day_length",
    "solar_elevations",
    "solar_state",
    "noaa_declination",
    "simplified_day_length",
    # Moon
    "LunarSample",
    "LunarSeries",
    "MoonPhase",
    "classify_phase",
    "describe_phase",
    "lunar_samples",
]
