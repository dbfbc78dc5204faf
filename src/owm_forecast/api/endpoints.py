"""API endpoints for weather forecast service."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from owm_forecast.config import DISPLAY_TIMEZONE, OWM_CITY_ID, REQUEST_TIMEOUT_SECONDS
from owm_forecast.weather.models import ErrorResponse, WeatherReport
from owm_forecast.weather.service import build_report
from owm_forecast.weather.store import WeatherStore

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_store(request: Request) -> WeatherStore:
    """Dependency to get the application's weather store."""
    return request.app.state.weather_store


@router.get("/", response_model=WeatherReport)
async def get_weather(store: WeatherStore = Depends(get_weather_store)) -> WeatherReport:
    """Get the most recently published weather.

    Returns:
        WeatherReport for today and the forecast days
    """
    return build_report(store.collection, store.generation)


@router.post(
    "/refresh",
    response_model=WeatherReport,
    responses={502: {"model": ErrorResponse}}
)
async def refresh_weather(store: WeatherStore = Depends(get_weather_store)) -> WeatherReport:
    """Download and parse new weather data.

    Returns:
        WeatherReport built from the refreshed data

    Raises:
        HTTPException: If downloading or parsing failed
    """
    error = await store.refresh()
    if error is not None:
        logger.error(f"Refresh failed: {error}")
        raise HTTPException(status_code=502, detail=error.message)

    logger.info(f"Successfully refreshed weather, generation {store.generation}")
    return build_report(store.collection, store.generation)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "owm-forecast"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including city and display settings
    """
    return {
        "service": "OpenWeatherMap Forecast Service",
        "version": "0.1.0",
        "city_id": OWM_CITY_ID,
        "display_timezone": DISPLAY_TIMEZONE,
        "request_timeout_seconds": REQUEST_TIMEOUT_SECONDS,
        "features": [
            "Current weather with cloudiness, pressure, humidity, wind and sun times",
            "Five day forecast",
            "Day and night cycle"
        ],
        "data_source": "OpenWeatherMap API"
    }
