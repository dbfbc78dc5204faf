"""Timezone resolution for display strings."""

import logging
import zoneinfo
from typing import Dict, Optional

from timezonefinder import TimezoneFinder

logger = logging.getLogger(__name__)

LOCAL_TIMEZONE_OPTION = "local"


class TimezoneResolver:
    """Picks the timezone sunrise, sunset and weekday strings are shown in."""

    def __init__(self, finder: Optional[TimezoneFinder] = None):
        """Initialize the resolver.

        Args:
            finder: TimezoneFinder instance (created on first use if None)
        """
        self._finder = finder

    @property
    def finder(self) -> TimezoneFinder:
        # Loading the boundary data is slow, only do it when "local" is used
        if self._finder is None:
            self._finder = TimezoneFinder()
            logger.info("TimezoneFinder initialized")
        return self._finder

    def resolve(self, option: str, payload: Optional[Dict] = None) -> str:
        """Resolve a timezone option.

        Args:
            option: IANA timezone name, or "local" for the city's own timezone
            payload: Current-weather payload holding the city's "coord"

        Returns:
            Timezone string (e.g., "Europe/Prague") or "UTC" if not found
        """
        if option != LOCAL_TIMEZONE_OPTION:
            try:
                zoneinfo.ZoneInfo(option)
                return option
            except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
                logger.warning(f"Unknown timezone '{option}', defaulting to UTC: {e}")
                return "UTC"

        coord = (payload or {}).get("coord") or {}
        lat, lon = coord.get("lat"), coord.get("lon")
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            logger.warning("No coordinates in current weather payload, defaulting to UTC")
            return "UTC"
        return self.get_timezone(lat, lon)

    def get_timezone(self, lat: float, lon: float) -> str:
        """Get timezone for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Timezone string or "UTC" if not found
        """
        logger.info(f"Finding timezone for coordinates: ({lat}, {lon})")
        timezone = self.finder.timezone_at(lng=lon, lat=lat)

        if timezone:
            logger.info(f"Found timezone '{timezone}' for ({lat}, {lon})")
            return timezone

        logger.warning(f"No timezone found for ({lat}, {lon}), defaulting to UTC")
        return "UTC"
