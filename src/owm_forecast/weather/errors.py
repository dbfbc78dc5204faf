"""Errors raised while fetching and parsing weather data."""

from typing import Optional


class WeatherError(Exception):
    """Base class for refresh failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(WeatherError):
    """Raised when a request fails in transport or returns a non-200 status."""

    def __init__(self, message: str, slot: Optional[str] = None):
        super().__init__(message)
        self.slot = slot


class ParseError(WeatherError):
    """Raised when downloaded payloads cannot be turned into a collection."""
    pass


class MalformedResponseError(ParseError):
    """Payload roles cannot be told apart or a payload has the wrong shape."""
    pass


class NoForecastDataError(ParseError):
    """The forecast list yielded no day samples."""
    pass


class InvalidDayRecordError(ParseError):
    """A day record is missing one of its base fields."""
    pass
