"""HTTP client for the OpenWeatherMap API."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from owm_forecast.config import USER_AGENT, FetchConfig, default_fetch_config
from owm_forecast.weather.errors import FetchError, MalformedResponseError
from owm_forecast.weather.models import FetchedPayloads

logger = logging.getLogger(__name__)

# Always ask for fresh data, never a cached copy
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class OwmWeatherClient:
    """Async client for the current-weather and forecast endpoints."""

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the weather client.

        Args:
            config: Endpoints and timeout (read from environment if None)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or default_fetch_config()
        self.client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT, **NO_CACHE_HEADERS},
            timeout=self.config.timeout_seconds,
            transport=transport
        )

    async def fetch_payloads(self) -> FetchedPayloads:
        """Download both payloads concurrently and wait for both to finish.

        A failing request does not cancel the other one. When any request
        fails, the failure of the earliest request (current before forecast)
        is raised once both have completed.

        Returns:
            Raw payloads tagged by the request that produced them

        Raises:
            FetchError: If a request fails or returns a non-200 status
            MalformedResponseError: If a response body is not a JSON object
        """
        slots = {
            "current": self.config.current_url,
            "forecast": self.config.forecast_url,
        }
        logger.info("Fetching current weather and forecast")

        outcomes = await asyncio.gather(
            *(self._fetch_json(slot, url) for slot, url in slots.items()),
            return_exceptions=True
        )

        errors = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        for error in errors:
            logger.error(f"Weather download failed: {error}")
        if errors:
            raise errors[0]

        current, forecast = outcomes
        logger.info("Successfully fetched current weather and forecast")
        return FetchedPayloads(current=current, forecast=forecast)

    async def _fetch_json(self, slot: str, url: str) -> Dict[str, Any]:
        """Fetch one endpoint.

        Args:
            slot: Request name used in errors and logs
            url: Endpoint URL

        Returns:
            Decoded JSON object
        """
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Request error for {slot} weather: {e!r}")
            raise FetchError(str(e) or type(e).__name__, slot=slot) from e

        if response.status_code != 200:
            logger.error(f"HTTP error for {slot} weather: {response.status_code} - {response.text}")
            raise FetchError(str(response.status_code), slot=slot)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in {slot} weather response: {e}")
            raise MalformedResponseError(f"{slot} response is not valid JSON") from e

        if not isinstance(data, dict):
            raise MalformedResponseError(f"{slot} response is not a JSON object")

        logger.debug(f"Fetched {slot} weather")
        return data

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
