"""Shared request dependencies for the API routes.

Usage:
    ```python
    @router.get("/daylength")
    async def get_day_length(observation: Observation = Depends(get_observation)):
        ...
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type

from fastapi import Query

from daylength.astronomy.calculator import AstronomyCalculator
from daylength.astronomy.julian import parse_date
from daylength.config import get_settings
from daylength.models.location import Coordinates, TimeContext


@dataclass(frozen=True)
class Observation:
    """Validated observer and time context for one request."""

    coordinates: Coordinates
    context: TimeContext

    def calculator(self, model: str = "iterative") -> AstronomyCalculator:
        return AstronomyCalculator.for_context(self.coordinates, self.context, model=model)


def get_observation(
    latitude: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees"),
    longitude: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees"),
    timezone: float = Query(0.0, ge=-24, le=24, description="Offset from UTC in hours"),
    date: str | None = Query(None, description="Date (YYYY-MM-DD), defaults to today"),
    horizon: float | None = Query(None, ge=-90, le=90, description="Horizon angle in degrees"),
) -> Observation:
    """Build the observation from query parameters.

    Raises:
        InvalidDate: If `date` is not a valid date (mapped to 422 by the app)
    """
    day = parse_date(date) if date else date_type.today()
    return Observation(
        coordinates=Coordinates(latitude=latitude, longitude=longitude),
        context=TimeContext(
            day=day,
            timezone_hours=timezone,
            horizon_deg=horizon if horizon is not None else get_settings().default_horizon_deg,
        ),
    )
