"""Calendar date to continuous day count conversion.

The day count is the proleptic Gregorian ordinal (0001-01-01 is day 1), the
same numbering as `date.toordinal()`. Day N starts at 00:00 UTC, so
subtracting `J2000_OFFSET` gives days elapsed since J2000.0
(2000-01-01 12:00 UTC) at that midnight.
"""

from __future__ import annotations

from datetime import date, datetime

from daylength.astronomy.errors import InvalidDate

# julian_day(2000, 1, 1) == 730120; J2000.0 is at its noon
J2000_OFFSET = 730120.5


def julian_day(year: int, month: int, day: int) -> int:
    """Return the day count for a proleptic Gregorian date.

    Raises:
        InvalidDate: If month or day are outside their valid range.
    """
    try:
        return date(year, month, day).toordinal()
    except (TypeError, ValueError) as e:
        raise InvalidDate(
            f"Invalid date {year:04d}-{month:02d}-{day:02d}: {e}",
            value=f"{year}-{month}-{day}",
        ) from e


def julian_day_from_date(value: date) -> int:
    """Return the day count for a `date` (or `datetime`, time ignored)."""
    return value.toordinal()


def days_since_j2000(julian: float) -> float:
    """Days from J2000.0 to 00:00 UTC of the given day count."""
    return julian - J2000_OFFSET


def days_in_year(year: int) -> int:
    if (year % 4 == 0) and ((year % 100 != 0) or (year % 400 == 0)):
        return 366
    return 365


def day_of_year(value: date) -> int:
    """1-based ordinal of the day within its year."""
    return value.timetuple().tm_yday


def parse_date(text: str) -> date:
    """Parse `YYYY-MM-DD` or an ISO-8601 date-time into a calendar date.

    Only the calendar date is kept; a time or offset part is ignored.

    Raises:
        InvalidDate: If the text is not a valid date.
    """
    value = text.strip()
    try:
        if "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate(f"Invalid date format: {text}", value=text) from e
