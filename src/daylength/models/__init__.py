"""Input models for the daylight engine."""

from daylength.models.location import Coordinates, TimeContext

__all__ = [
    "Coordinates",
    "TimeContext",
]
