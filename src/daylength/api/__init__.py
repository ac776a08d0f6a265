"""FastAPI application and routes.

This module provides a JSON front-end to the daylight engine, for chart
clients that only handle presentation.

## API Structure

- /health - Health check
- /api/sun/daylength - Day length, sunrise and sunset for one date
- /api/sun/daylength/year - Day length for every day of a year
- /api/sun/elevation - Solar elevation for each minute of a day
- /api/moon - Lunar elevation, distance and phase for each minute of a day

All routes take `latitude`, `longitude`, `timezone`, `date` and `horizon`
query parameters.
"""

from daylength.api.app import create_app

__all__ = ["create_app"]
