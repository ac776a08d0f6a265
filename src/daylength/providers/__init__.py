"""External data providers."""

from daylength.providers.geolocation import (
    GeolocationClient,
    GeolocationError,
    GeolocationResult,
    detect_location,
    local_utc_offset_hours,
    parse_utc_offset,
    reconcile_timezone,
)

__all__ = [
    "GeolocationClient",
    "GeolocationError",
    "GeolocationResult",
    "detect_location",
    "local_utc_offset_hours",
    "parse_utc_offset",
    "reconcile_timezone",
]
