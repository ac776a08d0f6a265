"""Observer location and time context models."""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from daylength.astronomy.julian import julian_day_from_date
from daylength.astronomy.solar import DEFAULT_HORIZON_DEG

# Regex for parsing lat/long coordinates: "latitude,longitude"
# Supports optional +/- prefix for both values
COORDINATE_PATTERN = re.compile(
    r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$"
)


class Coordinates(BaseModel):
    """Geographic coordinates (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse coordinates from string format 'latitude,longitude'.

        Examples:
            '51.5,-0.1278' -> London
            '-33.8688,151.2093' -> Sydney
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(
                f"Invalid coordinate format: '{value}'. "
                "Expected format: 'latitude,longitude' (e.g., '51.5,-0.1278')"
            )
        return cls(
            latitude=float(match.group("lat")),
            longitude=float(match.group("lon")),
        )

    @property
    def latitude_rad(self) -> float:
        return math.radians(self.latitude)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        """Return coordinates as (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


class TimeContext(BaseModel):
    """Local date, UTC offset and horizon angle for one calculation.

    The UI offers offsets from -12 to +14 in half-hour steps, but any finite
    value is accepted.
    """

    model_config = ConfigDict(frozen=True)

    day: date
    timezone_hours: float = Field(default=0.0, description="Offset from UTC in hours")
    horizon_deg: float = Field(
        default=DEFAULT_HORIZON_DEG,
        ge=-90,
        le=90,
        description="Horizon angle correction (refraction and disk radius)",
    )

    @field_validator("timezone_hours")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("timezone_hours must be finite")
        return v

    @property
    def julian_day(self) -> int:
        return julian_day_from_date(self.day)

    def describe_timezone(self) -> str:
        """Format the offset as e.g. 'UTC+5.50'."""
        return f"UTC{self.timezone_hours:+.2f}"
