"""Holder of the weather collection currently shown to clients."""

import logging
from typing import Callable, Optional

from owm_forecast.weather.errors import WeatherError
from owm_forecast.weather.models import DayCycle, WeatherCollection
from owm_forecast.weather.service import WeatherService

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Optional[WeatherError]], None]


class WeatherStore:
    """Publishes the newest successfully parsed collection.

    Every refresh is numbered. A refresh that finishes after a newer one has
    been published is discarded, and a failed refresh leaves the published
    collection in place.
    """

    def __init__(self, service: Optional[WeatherService] = None):
        self.service = service or WeatherService()
        self._collection = WeatherCollection.placeholder()
        self._latest_generation = 0
        self._published_generation = 0
        self.last_error: Optional[WeatherError] = None

    @property
    def collection(self) -> WeatherCollection:
        return self._collection

    @property
    def generation(self) -> int:
        return self._published_generation

    async def refresh(
        self,
        on_complete: Optional[CompletionCallback] = None
    ) -> Optional[WeatherError]:
        """Fetch and parse new data, then publish it.

        Args:
            on_complete: Called with None on success or the error on failure

        Returns:
            The same value passed to on_complete
        """
        self._latest_generation += 1
        generation = self._latest_generation
        logger.info(f"Starting weather refresh {generation}")

        error: Optional[WeatherError] = None
        try:
            collection = await self.service.fetch_collection(previous=self._collection)
        except WeatherError as e:
            logger.error(f"Weather refresh {generation} failed: {e}")
            error = e
            self.last_error = e
        else:
            self._publish(collection, generation)

        if on_complete is not None:
            on_complete(error)
        return error

    def _publish(self, collection: WeatherCollection, generation: int):
        if generation <= self._published_generation:
            logger.info(
                f"Discarding refresh {generation}, "
                f"refresh {self._published_generation} is already published"
            )
            return
        self._collection = collection
        self._published_generation = generation
        self.last_error = None
        logger.info(f"Published weather refresh {generation}")

    def day_cycle(self, now: Optional[float] = None) -> DayCycle:
        """Day or night according to the published sunrise and sunset."""
        return self._collection.today.day_cycle(now)

    async def aclose(self):
        await self.service.aclose()
