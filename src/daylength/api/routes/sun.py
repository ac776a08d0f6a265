"""Solar routes: day length, annual table and elevation curve."""

from __future__ import annotations

from datetime import date as date_type

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from daylength.api.dependencies import Observation, get_observation
from daylength.astronomy.calculator import DAY_LENGTH_MODELS
from daylength.astronomy.solar import DayLengthResult, DaylightKind
from daylength.config import get_settings
from daylength.export import format_clock

router = APIRouter()

MODEL_PATTERN = "^(" + "|".join(sorted(DAY_LENGTH_MODELS)) + ")$"


class DaylightFields(BaseModel):
    """Day length outcome; clock times are null when undefined."""

    kind: DaylightKind
    day_length_hours: float
    sunrise_hours: float | None = None
    sunset_hours: float | None = None
    sunrise: str | None = Field(default=None, description="HH:MM:SS local time")
    sunset: str | None = Field(default=None, description="HH:MM:SS local time")


def _daylight_fields(result: DayLengthResult) -> dict:
    """Flatten a DayLengthResult into response fields."""
    return {
        "kind": result.kind,
        "day_length_hours": result.day_length_hours,
        "sunrise_hours": result.sunrise_hours,
        "sunset_hours": result.sunset_hours,
        "sunrise": format_clock(result.sunrise_hours) if result.sunrise_hours is not None else None,
        "sunset": format_clock(result.sunset_hours) if result.sunset_hours is not None else None,
    }


class DayLengthResponse(DaylightFields):
    """Day length for one date."""

    date: date_type
    latitude: float
    longitude: float
    timezone_hours: float
    horizon_deg: float
    model: str


class AnnualDay(DaylightFields):
    """One row of the annual table."""

    date: date_type
    day_of_year: int


class AnnualResponse(BaseModel):
    """Day length for every day of a year."""

    year: int
    latitude: float
    longitude: float
    timezone_hours: float
    horizon_deg: float
    model: str
    days: list[AnnualDay]


class ElevationResponse(BaseModel):
    """Solar elevation for each minute of the local day."""

    date: date_type
    latitude: float
    longitude: float
    timezone_hours: float
    max_elevation_deg: float
    min_elevation_deg: float
    elevations_deg: list[float] = Field(..., description="1440 values from 00:00 local time")


def _default_model() -> str:
    return get_settings().default_model


@router.get("/daylength", response_model=DayLengthResponse)
def get_day_length(
    observation: Observation = Depends(get_observation),
    model: str | None = Query(None, pattern=MODEL_PATTERN),
) -> DayLengthResponse:
    """Day length, sunrise and sunset for a date."""
    model_name = model or _default_model()
    result = observation.calculator(model_name).day_length(observation.context.day)
    return DayLengthResponse(
        date=observation.context.day,
        latitude=observation.coordinates.latitude,
        longitude=observation.coordinates.longitude,
        timezone_hours=observation.context.timezone_hours,
        horizon_deg=observation.context.horizon_deg,
        model=model_name,
        **_daylight_fields(result),
    )


@router.get("/daylength/year", response_model=AnnualResponse)
def get_annual_day_length(
    observation: Observation = Depends(get_observation),
    year: int | None = Query(None, ge=1, le=9999),
    model: str | None = Query(None, pattern=MODEL_PATTERN),
) -> AnnualResponse:
    """Day length for every day of a year (defaults to the year of `date`)."""
    model_name = model or _default_model()
    target_year = year if year is not None else observation.context.day.year
    records = observation.calculator(model_name).annual_day_lengths(target_year)
    return AnnualResponse(
        year=target_year,
        latitude=observation.coordinates.latitude,
        longitude=observation.coordinates.longitude,
        timezone_hours=observation.context.timezone_hours,
        horizon_deg=observation.context.horizon_deg,
        model=model_name,
        days=[
            AnnualDay(
                date=record.day,
                day_of_year=record.day_of_year,
                **_daylight_fields(record.result),
            )
            for record in records
        ],
    )


@router.get("/elevation", response_model=ElevationResponse)
def get_solar_elevation(
    observation: Observation = Depends(get_observation),
) -> ElevationResponse:
    """Solar elevation curve for a date."""
    series = observation.calculator().solar_elevations(observation.context.day)
    return ElevationResponse(
        date=observation.context.day,
        latitude=observation.coordinates.latitude,
        longitude=observation.coordinates.longitude,
        timezone_hours=observation.context.timezone_hours,
        max_elevation_deg=series.max_elevation,
        min_elevation_deg=series.min_elevation,
        elevations_deg=list(series.values),
    )
