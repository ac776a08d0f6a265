"""IP geolocation lookup for filling in a missing location or timezone.

The engine never depends on this module: callers resolve a complete
(latitude, longitude, timezone) triple first and only then calculate.

## Endpoint
- Default URL: https://ipapi.co/json/
- Auth: None
- Response fields used: latitude, longitude, utc_offset, error, reason

## Response Format
```json
{
  "latitude": 51.5074,
  "longitude": -0.1278,
  "utc_offset": "+0100",
  "error": false
}
```
On failure the service answers `{"error": true, "reason": "RateLimited"}`.

## Timeout
The whole lookup, retries included, is bounded by
`geolocation_timeout_seconds` (5 seconds by default). Cancelling the
awaiting task cancels the request.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from daylength.config import get_settings

logger = logging.getLogger(__name__)

UTC_OFFSET_PATTERN = re.compile(r"^(?P<sign>[-+])?(?P<hours>\d{1,2}):?(?P<minutes>\d{2})$")

TimezoneChoice = Literal["network", "system"]


class GeolocationError(Exception):
    """Raised when the location cannot be determined."""

    def __init__(
        self,
        message: str,
        provider: str = "ipapi",
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


@dataclass(frozen=True)
class GeolocationResult:
    """Location reported by the geolocation service."""

    latitude: float
    longitude: float
    utc_offset_hours: float | None  # None if the service gave no usable offset


def parse_utc_offset(value: Any) -> float | None:
    """Convert a '+HHMM' style offset to hours.

    Examples:
        '+0530' -> 5.5
        '-0800' -> -8.0
        '+05:45' -> 5.75
    """
    if not isinstance(value, str):
        return None
    match = UTC_OFFSET_PATTERN.match(value.strip())
    if not match:
        return None
    hours = int(match.group("hours")) + int(match.group("minutes")) / 60.0
    return -hours if match.group("sign") == "-" else hours


class GeolocationClient:
    """Async client for an IP geolocation JSON service.

    Example:
        ```python
        async with GeolocationClient() as client:
            result = await client.locate()
        ```
    """

    name = "ipapi"

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            url: Geolocation endpoint, defaults to the configured URL
            timeout: Bound in seconds for the whole lookup
            user_agent: User-Agent string for requests
            transport: Optional httpx transport (used by tests)
        """
        settings = get_settings()
        self.url = url or settings.geolocation_url
        self.timeout = timeout if timeout is not None else settings.geolocation_timeout_seconds
        self.user_agent = user_agent or settings.geolocation_user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GeolocationClient:
        self._client = self._create_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=1),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _fetch(self) -> httpx.Response:
        """Fetch the geolocation document, retrying transient network errors."""
        client = self._get_client()
        response = await client.get(
            self.url,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )
        if response.status_code >= 400:
            raise GeolocationError(
                f"Location service request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    async def _locate(self) -> GeolocationResult:
        try:
            response = await self._fetch()
        except httpx.HTTPError as e:
            raise GeolocationError(f"Failed to get location: {e}", provider=self.name) from e

        try:
            data = response.json()
        except ValueError as e:
            raise GeolocationError(
                f"Failed to parse response: {e}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        return self._translate_response(data)

    async def locate(self) -> GeolocationResult:
        """Look up the current location.

        Returns:
            GeolocationResult with coordinates and, if available, UTC offset

        Raises:
            GeolocationError: On timeout, HTTP or service errors, or missing data
        """
        try:
            result = await asyncio.wait_for(self._locate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GeolocationError(
                f"Location lookup timed out after {self.timeout:g}s", provider=self.name
            ) from e
        logger.info(
            f"Detected location {result.latitude:.2f},{result.longitude:.2f} "
            f"(UTC offset: {result.utc_offset_hours})"
        )
        return result

    def _translate_response(self, data: Any) -> GeolocationResult:
        """Translate the service JSON into a GeolocationResult."""
        if not isinstance(data, dict):
            raise GeolocationError("Unexpected response format", provider=self.name)

        if data.get("error", False):
            reason = data.get("reason", "Unknown error")
            raise GeolocationError(f"Location service error: {reason}", provider=self.name)

        latitude = data.get("latitude")
        longitude = data.get("longitude")
        if latitude is None or longitude is None:
            raise GeolocationError("No coordinates found in the response", provider=self.name)

        try:
            return GeolocationResult(
                latitude=float(latitude),
                longitude=float(longitude),
                utc_offset_hours=parse_utc_offset(data.get("utc_offset")),
            )
        except (TypeError, ValueError) as e:
            raise GeolocationError(f"Invalid coordinates: {e}", provider=self.name) from e


async def detect_location(
    client: GeolocationClient | None = None,
) -> GeolocationResult:
    """Look up the current location with a short-lived client."""
    async with client or GeolocationClient() as active:
        return await active.locate()


def local_utc_offset_hours(at: datetime | None = None) -> float:
    """UTC offset of the system timezone in hours at the given instant."""
    moment = (at or datetime.now()).astimezone()
    offset = moment.utcoffset()
    return offset.total_seconds() / 3600.0 if offset is not None else 0.0


def reconcile_timezone(
    network_offset: float | None,
    local_offset: float,
    choose: Callable[[float, float], TimezoneChoice] | None = None,
    tolerance: float | None = None,
) -> float:
    """Decide between the network-reported and system timezone offsets.

    The system offset is used unless the network offset differs by more than
    `tolerance`, in which case `choose` picks one. Without a `choose`
    callback the system offset wins.
    """
    if tolerance is None:
        tolerance = get_settings().timezone_tolerance_hours
    if network_offset is None or abs(network_offset - local_offset) <= tolerance:
        return local_offset

    logger.info(
        f"Timezone mismatch: network UTC{network_offset:+.2f}, system UTC{local_offset:+.2f}"
    )
    if choose is not None and choose(network_offset, local_offset) == "network":
        return network_offset
    return local_offset
