"""Lunar routes."""

from __future__ import annotations

from datetime import date as date_type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from daylength.api.dependencies import Observation, get_observation
from daylength.astronomy.lunar import MoonPhase

router = APIRouter()


class MoonSampleResponse(BaseModel):
    """Moon state at one minute."""

    minute: int
    elevation_deg: float
    distance_km: float
    illuminated_fraction: float
    elongation_deg: float


class MoonResponse(BaseModel):
    """Lunar data for each minute of the local day.

    The phase fields describe the Moon at local noon.
    """

    date: date_type
    latitude: float
    longitude: float
    timezone_hours: float
    phase: MoonPhase
    phase_description: str
    max_elevation_deg: float
    samples: list[MoonSampleResponse]


@router.get("", response_model=MoonResponse)
def get_moon(
    observation: Observation = Depends(get_observation),
) -> MoonResponse:
    """Lunar elevation, distance, illumination and phase for a date."""
    series = observation.calculator().lunar_samples(observation.context.day)
    noon = series[len(series) // 2]
    return MoonResponse(
        date=observation.context.day,
        latitude=observation.coordinates.latitude,
        longitude=observation.coordinates.longitude,
        timezone_hours=observation.context.timezone_hours,
        phase=noon.phase,
        phase_description=noon.describe(),
        max_elevation_deg=series.max_elevation,
        samples=[
            MoonSampleResponse(
                minute=s.minute,
                elevation_deg=s.elevation_deg,
                distance_km=s.distance_km,
                illuminated_fraction=s.illuminated_fraction,
                elongation_deg=s.elongation_deg,
            )
            for s in series
        ],
    )
