"""Command-line interface for day length, solar and lunar calculations."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import contextmanager
from datetime import date
from typing import Iterator, TextIO

from pydantic import ValidationError

from daylength.astronomy.calculator import DAY_LENGTH_MODELS, AstronomyCalculator
from daylength.astronomy.errors import AstronomyError
from daylength.astronomy.julian import parse_date
from daylength.config import get_settings
from daylength.export import (
    format_clock,
    format_minute,
    write_annual_csv,
    write_elevation_csv,
    write_lunar_csv,
)
from daylength.models.location import Coordinates, TimeContext
from daylength.providers.geolocation import (
    GeolocationError,
    TimezoneChoice,
    detect_location,
    local_utc_offset_hours,
    reconcile_timezone,
)

logger = logging.getLogger(__name__)

RULE = "--------------------------------------"


class CliError(Exception):
    """Raised for input problems reported to the user with exit code 1."""


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-l",
        "--latitude",
        type=float,
        metavar="DEG",
        help="Latitude (-90 to 90). If not set, auto-detects via IP.",
    )
    parser.add_argument(
        "-o",
        "--longitude",
        type=float,
        metavar="DEG",
        help="Longitude (-180 to 180). If not set, auto-detects via IP.",
    )
    parser.add_argument(
        "--location",
        metavar="LAT,LON",
        help="Coordinates as 'latitude,longitude' (e.g., '51.5,-0.1278'). "
        "--latitude/--longitude take precedence.",
    )
    parser.add_argument(
        "-t",
        "--timezone",
        type=float,
        metavar="HOURS",
        help="Timezone offset from UTC (-12 to 14). If not set, uses local or detected.",
    )
    parser.add_argument(
        "-d",
        "--date",
        metavar="DATE",
        help="Date (YYYY-MM-DD), defaults to today.",
    )
    parser.add_argument(
        "--horizon",
        type=float,
        metavar="DEG",
        help="Horizon angle in degrees (default: -0.83 for refraction).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="daylength",
        description="Calculate daylight duration, sunrise/sunset, solar and lunar elevation",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Report command
    report_parser = subparsers.add_parser(
        "report", help="Day length, sunrise and sunset for one date"
    )
    _add_common_arguments(report_parser)
    report_parser.add_argument(
        "--model",
        choices=sorted(DAY_LENGTH_MODELS),
        default=settings.default_model,
        help="Day length model",
    )

    # Year command
    year_parser = subparsers.add_parser(
        "year", help="Day length for every day of a year"
    )
    _add_common_arguments(year_parser)
    year_parser.add_argument(
        "--year", type=int, help="Year to tabulate (default: year of --date)"
    )
    year_parser.add_argument(
        "--model",
        choices=sorted(DAY_LENGTH_MODELS),
        default=settings.default_model,
        help="Day length model",
    )
    year_parser.add_argument(
        "--output", metavar="FILE", help="CSV file to write (default: stdout)"
    )

    # Elevation command
    elevation_parser = subparsers.add_parser(
        "elevation", help="Solar elevation for each minute of a day"
    )
    _add_common_arguments(elevation_parser)
    elevation_parser.add_argument(
        "--output", metavar="FILE", help="CSV file to write"
    )

    # Moon command
    moon_parser = subparsers.add_parser(
        "moon", help="Lunar elevation, distance and phase for each minute of a day"
    )
    _add_common_arguments(moon_parser)
    moon_parser.add_argument(
        "--output", metavar="FILE", help="CSV file to write"
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _prompt_timezone(network_offset: float, local_offset: float) -> TimezoneChoice:
    """Ask which offset to use; non-interactive sessions keep the system one."""
    print("Timezone Mismatch Detected:", file=sys.stderr)
    print(f" - Network-detected timezone: UTC{network_offset:+.2f}", file=sys.stderr)
    print(f" - Your system's timezone:  UTC{local_offset:+.2f}", file=sys.stderr)
    if not sys.stdin.isatty():
        print("Using System timezone.\n", file=sys.stderr)
        return "system"

    print(
        "Which one would you like to use? [S]ystem (default) / [N]etwork: ",
        end="",
        file=sys.stderr,
    )
    choice = sys.stdin.readline()
    if choice.strip().lower() == "n":
        print("Using Network timezone.\n", file=sys.stderr)
        return "network"
    print("Using System timezone.\n", file=sys.stderr)
    return "system"


def resolve_location(
    latitude: float | None,
    longitude: float | None,
    timezone_hours: float | None,
) -> tuple[float, float, float]:
    """Fill in missing location or timezone from IP geolocation.

    Values given on the command line always win over detected ones.

    Raises:
        CliError: If coordinates are missing and detection failed
    """
    if latitude is not None and longitude is not None and timezone_hours is not None:
        return latitude, longitude, timezone_hours

    print("Auto-detecting location and timezone...", file=sys.stderr)
    try:
        detected = asyncio.run(detect_location())
    except GeolocationError as e:
        print(f"Location detection failed: {e}", file=sys.stderr)
        if timezone_hours is None:
            timezone_hours = local_utc_offset_hours()
            print(f"Using system timezone: UTC{timezone_hours:+.2f}", file=sys.stderr)
        if latitude is None or longitude is None:
            raise CliError(
                "Please specify location manually using --latitude and --longitude."
            ) from e
        return latitude, longitude, timezone_hours

    if latitude is None:
        latitude = detected.latitude
    if longitude is None:
        longitude = detected.longitude
    if timezone_hours is None:
        timezone_hours = reconcile_timezone(
            detected.utc_offset_hours,
            local_utc_offset_hours(),
            choose=_prompt_timezone,
        )

    print(
        f"Using -> Lat: {latitude:.2f}°, Lon: {longitude:.2f}°, TZ: UTC{timezone_hours:+.2f}",
        file=sys.stderr,
    )
    return latitude, longitude, timezone_hours


def _command_line_coordinates(args: argparse.Namespace) -> tuple[float | None, float | None]:
    """Merge --location with --latitude/--longitude; the explicit options win."""
    latitude, longitude = args.latitude, args.longitude
    if args.location:
        try:
            parsed = Coordinates.from_string(args.location)
        except ValueError as e:
            raise CliError(f"Invalid --location: {e}") from e
        parsed_latitude, parsed_longitude = parsed.to_tuple()
        if latitude is None:
            latitude = parsed_latitude
        if longitude is None:
            longitude = parsed_longitude
    return latitude, longitude


def _build_inputs(args: argparse.Namespace) -> tuple[Coordinates, TimeContext]:
    day = parse_date(args.date) if args.date else date.today()
    latitude, longitude = _command_line_coordinates(args)
    latitude, longitude, timezone_hours = resolve_location(latitude, longitude, args.timezone)
    horizon = args.horizon if args.horizon is not None else get_settings().default_horizon_deg
    try:
        coordinates = Coordinates(latitude=latitude, longitude=longitude)
        context = TimeContext(day=day, timezone_hours=timezone_hours, horizon_deg=horizon)
    except ValidationError as e:
        raise CliError(f"Invalid parameters: {e}") from e
    return coordinates, context


@contextmanager
def _open_output(path: str | None) -> Iterator[TextIO]:
    if path is None or path == "-":
        yield sys.stdout
        return
    with open(path, "w", newline="", encoding="utf-8") as stream:
        yield stream


def cmd_report(args: argparse.Namespace, coordinates: Coordinates, context: TimeContext) -> int:
    calc = AstronomyCalculator.for_context(coordinates, context, model=args.model)
    result = calc.day_length(context.day)

    print("--- Day Length Calculation Results ---")
    print(f"Date:\t\t{context.day.isoformat()}")
    print(f"Latitude:\t{coordinates.latitude:.2f}°")
    print(f"Longitude:\t{coordinates.longitude:.2f}°")
    print(f"Timezone:\t{context.describe_timezone()}")
    print(f"Horizon Angle:\t{context.horizon_deg:.2f}°")
    print(f"Model:\t\t{calc.model.name}")
    print(RULE)
    print(
        f"Day Length:\t{result.day_length_hours:.2f} hours "
        f"({format_clock(result.day_length_hours)})"
    )
    print(f"Sunrise:\t{format_clock(result.sunrise_hours)}")
    print(f"Sunset:\t\t{format_clock(result.sunset_hours)}")
    print(RULE)
    return 0


def cmd_year(args: argparse.Namespace, coordinates: Coordinates, context: TimeContext) -> int:
    year = args.year if args.year is not None else context.day.year
    if not 1 <= year <= 9999:
        raise CliError(f"Year must be between 1 and 9999, got {year}")
    calc = AstronomyCalculator.for_context(coordinates, context, model=args.model)
    records = calc.annual_day_lengths(year)

    with _open_output(args.output) as stream:
        write_annual_csv(stream, records, coordinates, context.timezone_hours, context.horizon_deg)

    if args.output:
        longest = max(records, key=lambda r: r.result.day_length_hours)
        shortest = min(records, key=lambda r: r.result.day_length_hours)
        print(f"Wrote {len(records)} days to {args.output}")
        print(f"Longest day:\t{longest.day.isoformat()} ({longest.result.day_length_hours:.2f} hours)")
        print(f"Shortest day:\t{shortest.day.isoformat()} ({shortest.result.day_length_hours:.2f} hours)")
    return 0


def cmd_elevation(args: argparse.Namespace, coordinates: Coordinates, context: TimeContext) -> int:
    calc = AstronomyCalculator.for_context(coordinates, context)
    series = calc.solar_elevations(context.day)

    if args.output:
        with _open_output(args.output) as stream:
            write_elevation_csv(stream, series, coordinates, context)
        print(f"Wrote {len(series)} samples to {args.output}")

    peak = series.values.index(series.max_elevation)
    low = series.values.index(series.min_elevation)
    print("--- Solar Elevation ---")
    print(f"Date:\t\t{context.day.isoformat()}")
    print(f"Maximum:\t{series.max_elevation:.2f}° at {format_minute(peak)}")
    print(f"Minimum:\t{series.min_elevation:.2f}° at {format_minute(low)}")
    return 0


def cmd_moon(args: argparse.Namespace, coordinates: Coordinates, context: TimeContext) -> int:
    calc = AstronomyCalculator.for_context(coordinates, context)
    series = calc.lunar_samples(context.day)

    if args.output:
        with _open_output(args.output) as stream:
            write_lunar_csv(stream, series, coordinates, context)
        print(f"Wrote {len(series)} samples to {args.output}")

    peak = max(series, key=lambda s: s.elevation_deg)
    noon = series[len(series) // 2]
    print("--- Lunar Data ---")
    print(f"Date:\t\t{context.day.isoformat()}")
    print(f"Max Elevation:\t{peak.elevation_deg:.1f}° at {format_minute(peak.minute)}")
    print(f"Distance:\t{noon.distance_km:.0f} km (at 12:00)")
    print(f"Phase:\t\t{noon.describe()} (at 12:00)")
    return 0


COMMANDS = {
    "report": cmd_report,
    "year": cmd_year,
    "elevation": cmd_elevation,
    "moon": cmd_moon,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    try:
        coordinates, context = _build_inputs(args)
        return COMMANDS[args.command](args, coordinates, context)
    except (AstronomyError, CliError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Failed to write output: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
