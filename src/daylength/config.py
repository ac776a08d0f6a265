"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Every variable is prefixed with `DAYLENGTH_` and has a default, so the CLI
and API run without any configuration.

## Environment Variables

- DAYLENGTH_LOG_LEVEL: Logging level for the CLI (default: WARNING)
- DAYLENGTH_DEFAULT_HORIZON_DEG: Horizon angle correction (default: -0.83)
- DAYLENGTH_DEFAULT_MODEL: Day length model, iterative or simplified
- DAYLENGTH_GEOLOCATION_URL: IP geolocation endpoint (default: https://ipapi.co/json/)
- DAYLENGTH_GEOLOCATION_TIMEOUT_SECONDS: Bound for the whole lookup (default: 5)
- DAYLENGTH_DEBUG: Enable API docs and debug logging (default: false)

## Example .env file

```
DAYLENGTH_DEFAULT_HORIZON_DEG=-0.833
DAYLENGTH_DEFAULT_MODEL=iterative
DAYLENGTH_GEOLOCATION_TIMEOUT_SECONDS=3
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DAYLENGTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Day Length Calculator"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # Calculation defaults
    default_horizon_deg: float = Field(
        default=-0.83,
        ge=-90,
        le=90,
        description="Horizon angle correction for refraction and disk radius",
    )
    default_model: Literal["iterative", "simplified"] = "iterative"

    # Geolocation
    geolocation_url: str = "https://ipapi.co/json/"
    geolocation_timeout_seconds: float = Field(default=5.0, gt=0, le=60)
    geolocation_user_agent: str = "daylength/0.1.0"
    timezone_tolerance_hours: float = Field(
        default=0.01,
        ge=0,
        description="Network and system offsets closer than this are treated as equal",
    )

    # Server
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
