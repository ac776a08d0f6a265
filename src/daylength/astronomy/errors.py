"""Exceptions raised by the astronomy engine.

Polar day and polar night are not errors: the sunrise/sunset solver reports
them as result kinds (see `DaylightKind`). Only inputs the engine cannot work
with at all raise.
"""

from __future__ import annotations


class AstronomyError(Exception):
    """Base exception for engine errors."""


class InvalidDate(AstronomyError, ValueError):
    """Raised when calendar date fields are out of range or unparsable."""

    def __init__(self, message: str, value: str | None = None):
        super().__init__(message)
        self.value = value


class ParameterOutOfDomain(AstronomyError, ValueError):
    """Raised when an input cannot be used by the formulas.

    Examples are a latitude outside [-90, 90] or a non-finite timezone offset.
    """

    def __init__(self, parameter: str, value: float):
        super().__init__(f"Parameter '{parameter}' is out of domain: {value!r}")
        self.parameter = parameter
        self.value = value
