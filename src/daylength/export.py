"""CSV export and clock formatting for calculation results.

Each file starts with `#` comment lines describing the inputs, followed by
a header row and one row per sample.
"""

from __future__ import annotations

import csv
import math
from typing import Iterable, TextIO

from daylength.astronomy.calculator import DaylightRecord
from daylength.astronomy.lunar import LunarSeries
from daylength.astronomy.solar import ElevationSeries
from daylength.models.location import Coordinates, TimeContext


def format_clock(hours: float | None) -> str:
    """Format hours as HH:MM:SS, or 'N/A' when undefined."""
    if hours is None or math.isnan(hours):
        return "N/A"
    total_seconds = int(hours * 3600.0)
    return f"{total_seconds // 3600:02d}:{(total_seconds % 3600) // 60:02d}:{total_seconds % 60:02d}"


def format_minute(index: int) -> str:
    """Format a minute-of-day index as HH:MM."""
    return f"{index // 60:02d}:{index % 60:02d}"


def _write_comments(stream: TextIO, lines: Iterable[str]) -> None:
    for line in lines:
        stream.write(f"# {line}\n" if line else "#\n")


def write_annual_csv(
    stream: TextIO,
    records: list[DaylightRecord],
    coordinates: Coordinates,
    timezone_hours: float,
    horizon_deg: float,
) -> None:
    """Write an annual day length table."""
    _write_comments(
        stream,
        [
            "Day Length Data",
            f"Latitude: {coordinates.latitude:.2f} degrees",
            f"Longitude: {coordinates.longitude:.2f} degrees",
            f"Timezone: UTC{timezone_hours:+.2f}",
            f"Horizon Angle: {horizon_deg:.2f} degrees",
            "",
        ],
    )
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["DayOfYear", "Date", "DayLength(hours)", "Sunrise", "Sunset"])
    for record in records:
        writer.writerow(
            [
                record.day_of_year,
                record.day.isoformat(),
                f"{record.result.day_length_hours:.3f}",
                format_clock(record.result.sunrise_hours),
                format_clock(record.result.sunset_hours),
            ]
        )


def write_elevation_csv(
    stream: TextIO,
    series: ElevationSeries,
    coordinates: Coordinates,
    context: TimeContext,
) -> None:
    """Write per-minute solar elevation angles."""
    _write_comments(
        stream,
        [
            "Solar Elevation Data",
            f"Date: {context.day.isoformat()}",
            f"Latitude: {coordinates.latitude:.2f} degrees",
            f"Longitude: {coordinates.longitude:.2f} degrees",
            f"Timezone: {context.describe_timezone()}",
            "",
        ],
    )
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["Time", "Solar Elevation (degrees)"])
    for i, elevation in enumerate(series):
        writer.writerow([format_minute(i), f"{elevation:.3f}"])


def write_lunar_csv(
    stream: TextIO,
    series: LunarSeries,
    coordinates: Coordinates,
    context: TimeContext,
) -> None:
    """Write per-minute lunar elevation, illumination and distance."""
    _write_comments(
        stream,
        [
            "Lunar Data",
            f"Date: {context.day.isoformat()}",
            f"Latitude: {coordinates.latitude:.2f}, Longitude: {coordinates.longitude:.2f}",
            f"Timezone: {context.describe_timezone()}",
            "",
        ],
    )
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["Time", "Elevation(deg)", "Illumination", "Distance(km)"])
    for sample in series:
        writer.writerow(
            [
                format_minute(sample.minute),
                f"{sample.elevation_deg:.3f}",
                f"{sample.illuminated_fraction * 100.0:.2f}%",
                f"{sample.distance_km:.0f}",
            ]
        )
