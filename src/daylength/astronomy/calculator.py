"""Day length models and a per-location calculator.

Two strategies compute day length behind one interface:

- `iterative`: the full solar ephemeris with the fixed-point sunrise/sunset
  solver; depends on longitude and timezone and yields clock times
- `simplified`: the NOAA declination series; one closed-form evaluation,
  no clock times, independent of longitude and timezone

Callers select a model explicitly, by instance or by name.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta

from daylength.astronomy.julian import (
    day_of_year,
    days_in_year,
    julian_day,
    julian_day_from_date,
)
from daylength.astronomy.lunar import LunarSeries, lunar_samples
from daylength.astronomy.noaa import simplified_day_length
from daylength.astronomy.solar import (
    DEFAULT_HORIZON_DEG,
    DayLengthResult,
    ElevationSeries,
    day_length,
    solar_elevations,
)
from daylength.models.location import Coordinates, TimeContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaylightRecord:
    """Day length result for one calendar day of an annual table."""

    day: date
    result: DayLengthResult

    @property
    def day_of_year(self) -> int:
        return day_of_year(self.day)


class DayLengthModel(ABC):
    """Interface for day length calculation strategies.

    Attributes:
        name: Identifier used for selection by name
        resolves_clock_times: Whether results carry sunrise/sunset times
    """

    name: str
    resolves_clock_times: bool = False

    @abstractmethod
    def compute(
        self,
        coordinates: Coordinates,
        day: date,
        timezone_hours: float = 0.0,
        horizon_deg: float = DEFAULT_HORIZON_DEG,
    ) -> DayLengthResult:
        """Calculate day length for a single local date."""
        pass

    def compute_year(
        self,
        coordinates: Coordinates,
        year: int,
        timezone_hours: float = 0.0,
        horizon_deg: float = DEFAULT_HORIZON_DEG,
    ) -> list[DaylightRecord]:
        """Calculate day length for every day of a calendar year.

        Raises:
            InvalidDate: If the year is outside 1-9999
        """
        first = date.fromordinal(julian_day(year, 1, 1))
        records = []
        for offset in range(days_in_year(year)):
            day = first + timedelta(days=offset)
            records.append(
                DaylightRecord(
                    day=day,
                    result=self.compute(coordinates, day, timezone_hours, horizon_deg),
                )
            )
        return records


class IterativeDayLengthModel(DayLengthModel):
    """Full solar ephemeris with iterative sunrise/sunset refinement."""

    name = "iterative"
    resolves_clock_times = True

    def compute(
        self,
        coordinates: Coordinates,
        day: date,
        timezone_hours: float = 0.0,
        horizon_deg: float = DEFAULT_HORIZON_DEG,
    ) -> DayLengthResult:
        return day_length(
            coordinates.latitude_rad,
            coordinates.longitude,
            timezone_hours,
            julian_day_from_date(day),
            horizon_deg,
        )


class SimplifiedDayLengthModel(DayLengthModel):
    """NOAA declination series; ignores longitude and timezone."""

    name = "simplified"

    def compute(
        self,
        coordinates: Coordinates,
        day: date,
        timezone_hours: float = 0.0,
        horizon_deg: float = DEFAULT_HORIZON_DEG,
    ) -> DayLengthResult:
        return simplified_day_length(
            coordinates.latitude_rad, day_of_year(day), day.year, horizon_deg
        )


DAY_LENGTH_MODELS: dict[str, type[DayLengthModel]] = {
    IterativeDayLengthModel.name: IterativeDayLengthModel,
    SimplifiedDayLengthModel.name: SimplifiedDayLengthModel,
}


def get_day_length_model(name: str) -> DayLengthModel:
    """Instantiate a day length model by name.

    Raises:
        ValueError: If no model has that name
    """
    try:
        return DAY_LENGTH_MODELS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown day length model: '{name}'. "
            f"Available: {', '.join(sorted(DAY_LENGTH_MODELS))}"
        ) from None


class AstronomyCalculator:
    """Calculator for solar and lunar data at a fixed location.

    Holds the observer and calculation settings; every call recomputes from
    scratch, so results for one parameter set never depend on earlier calls.

    Example:
        ```python
        calc = AstronomyCalculator(Coordinates(latitude=51.5, longitude=0.0))

        # Day length and sunrise/sunset for the June solstice
        result = calc.day_length(date(2025, 6, 21))

        # Per-minute solar and lunar elevations
        sun = calc.solar_elevations(date(2025, 6, 21))
        moon = calc.lunar_samples(date(2025, 6, 21))
        ```
    """

    def __init__(
        self,
        coordinates: Coordinates,
        timezone_hours: float = 0.0,
        horizon_deg: float = DEFAULT_HORIZON_DEG,
        model: DayLengthModel | str = "iterative",
    ):
        """Initialize calculator for a specific location.

        Args:
            coordinates: Observer coordinates
            timezone_hours: Timezone offset from UTC in hours
            horizon_deg: Horizon angle correction in degrees
            model: Day length model instance or name
        """
        self.coordinates = coordinates
        self.timezone_hours = timezone_hours
        self.horizon_deg = horizon_deg
        self.model = get_day_length_model(model) if isinstance(model, str) else model

    @classmethod
    def for_context(
        cls,
        coordinates: Coordinates,
        context: TimeContext,
        model: DayLengthModel | str = "iterative",
    ) -> AstronomyCalculator:
        return cls(coordinates, context.timezone_hours, context.horizon_deg, model)

    def day_length(self, day: date) -> DayLengthResult:
        """Day length, sunrise and sunset for a local date."""
        result = self.model.compute(self.coordinates, day, self.timezone_hours, self.horizon_deg)
        logger.debug(
            f"{self.model.name} day length at {self.coordinates} on {day}: "
            f"{result.kind.value} {result.day_length_hours:.3f}h"
        )
        return result

    def annual_day_lengths(self, year: int) -> list[DaylightRecord]:
        """Day length for every day of a year."""
        return self.model.compute_year(
            self.coordinates, year, self.timezone_hours, self.horizon_deg
        )

    def solar_elevations(self, day: date) -> ElevationSeries:
        """Solar elevation for each minute of a local date."""
        return solar_elevations(
            self.coordinates.latitude_rad,
            self.coordinates.longitude,
            self.timezone_hours,
            julian_day_from_date(day),
        )

    def lunar_samples(self, day: date) -> LunarSeries:
        """Lunar elevation, distance and phase for each minute of a local date."""
        return lunar_samples(
            self.coordinates.latitude_rad,
            self.coordinates.longitude,
            self.timezone_hours,
            julian_day_from_date(day),
        )
