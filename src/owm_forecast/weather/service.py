"""Weather service for downloading and processing weather data."""

import logging
from typing import Optional

from owm_forecast.config import DISPLAY_TIMEZONE
from owm_forecast.weather.client import OwmWeatherClient
from owm_forecast.weather.errors import WeatherError
from owm_forecast.weather.formatting import hour_string, weekday_name
from owm_forecast.weather.models import (
    AttributeReport, DayReport, ExtendedWeatherDay, WeatherCollection,
    WeatherDay, WeatherReport
)
from owm_forecast.weather.parser import build_collection, identify_roles
from owm_forecast.weather.timezones import TimezoneResolver

logger = logging.getLogger(__name__)


class WeatherService:
    """Service that downloads both payloads and builds a collection."""

    def __init__(
        self,
        client: Optional[OwmWeatherClient] = None,
        timezone_resolver: Optional[TimezoneResolver] = None,
        timezone_option: str = DISPLAY_TIMEZONE
    ):
        """Initialize the weather service.

        Args:
            client: Weather client instance (creates default if None)
            timezone_resolver: Resolver instance (creates default if None)
            timezone_option: IANA timezone name or "local"
        """
        self.client = client or OwmWeatherClient()
        self.timezone_resolver = timezone_resolver or TimezoneResolver()
        self.timezone_option = timezone_option

    async def fetch_collection(
        self,
        previous: Optional[WeatherCollection] = None
    ) -> WeatherCollection:
        """Download current weather and forecast and parse them.

        Args:
            previous: Collection whose days fill forecast slots without data

        Returns:
            Newly built WeatherCollection

        Raises:
            FetchError: If a download fails
            ParseError: If the payloads cannot be parsed
        """
        try:
            payloads = await self.client.fetch_payloads()
            current, forecast = identify_roles(payloads.current, payloads.forecast)
            timezone_str = self.timezone_resolver.resolve(self.timezone_option, current)
            return build_collection(current, forecast, previous, timezone_str)

        except WeatherError as e:
            logger.error(f"Error getting weather collection: {type(e).__name__}: {e}")
            raise

    async def aclose(self):
        """Close the weather client."""
        if self.client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


def _day_report(day: WeatherDay, timezone_str: str) -> DayReport:
    attributes = []
    if isinstance(day, ExtendedWeatherDay):
        attributes = [
            AttributeReport(name=a.name, unit=a.unit, value=a.display_value)
            for a in day.attributes
        ]
    return DayReport(
        weekday=weekday_name(day.timestamp, timezone_str),
        time=hour_string(day.timestamp, timezone_str),
        condition_id=day.condition_id,
        temperature_c=day.celsius,
        icon=day.icon,
        description=day.description,
        attributes=attributes
    )


def build_report(
    collection: WeatherCollection,
    generation: int = 0,
    now: Optional[float] = None
) -> WeatherReport:
    """Turn a collection into the strings renderers display.

    Args:
        collection: Collection to describe
        generation: Refresh generation that produced the collection
        now: Epoch seconds for the day/night cycle, defaults to current time

    Returns:
        WeatherReport
    """
    return WeatherReport(
        timezone=collection.timezone,
        day_cycle=collection.today.day_cycle(now),
        forecast_day_count=collection.forecast_day_count,
        generation=generation,
        days=[_day_report(day, collection.timezone) for day in collection.days]
    )
