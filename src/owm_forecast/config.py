"""Configuration settings for the weather forecast service."""

import os
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# API Configuration
OWM_BASE_URL: str = os.getenv("OWM_BASE_URL", "http://api.openweathermap.org/data/2.5")
OWM_API_KEY: str = os.getenv("OWM_API_KEY", "137c557bce8219f3a930f1bdb5eaab84")
OWM_CITY_ID: str = os.getenv("OWM_CITY_ID", "3078610")

CURRENT_WEATHER_URL: str = os.getenv(
    "OWM_CURRENT_URL",
    f"{OWM_BASE_URL}/weather?id={OWM_CITY_ID}&appid={OWM_API_KEY}"
)
FORECAST_URL: str = os.getenv(
    "OWM_FORECAST_URL",
    f"{OWM_BASE_URL}/forecast?id={OWM_CITY_ID}&appid={OWM_API_KEY}"
)
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
USER_AGENT: Final[str] = "OwmForecastService/0.1"

# Display settings
DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "UTC")  # IANA name or "local"

# Forecast sampling: the 3-hour list holds 8 entries per day
SAMPLES_PER_DAY: Final[int] = 8
SAMPLE_OFFSET: Final[int] = 6
FORECAST_DAYS: Final[int] = 5

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
REFRESH_ON_STARTUP: bool = os.getenv("REFRESH_ON_STARTUP", "true").lower() == "true"


class FetchConfig(BaseModel):
    """Endpoints and timeout handed to the weather client."""
    current_url: str = Field(..., description="Current-weather endpoint")
    forecast_url: str = Field(..., description="5-day/3-hour forecast endpoint")
    timeout_seconds: float = Field(10.0, gt=0, description="Per-request timeout")


def default_fetch_config() -> FetchConfig:
    """Build the fetch configuration from environment settings."""
    return FetchConfig(
        current_url=CURRENT_WEATHER_URL,
        forecast_url=FORECAST_URL,
        timeout_seconds=REQUEST_TIMEOUT_SECONDS
    )
