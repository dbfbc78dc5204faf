"""Turn OpenWeatherMap payloads into a weather collection."""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from owm_forecast.config import FORECAST_DAYS, SAMPLE_OFFSET, SAMPLES_PER_DAY
from owm_forecast.weather.errors import (
    InvalidDayRecordError, MalformedResponseError, NoForecastDataError
)
from owm_forecast.weather.formatting import (
    compass_point, format_measurement, hour_string, is_displayable_timestamp
)
from owm_forecast.weather.models import (
    Attribute, ExtendedWeatherDay, WeatherCollection, WeatherDay
)

logger = logging.getLogger(__name__)

# (name, unit, path in the current-weather payload, display formatter)
ATTRIBUTE_SOURCES: List[Tuple[str, str, Tuple[str, ...], str]] = [
    ("cloudiness", "%", ("clouds", "all"), "measurement"),
    ("pressure", "hPa", ("main", "pressure"), "measurement"),
    ("humidity", "%", ("main", "humidity"), "measurement"),
    ("wind speed", "m/s", ("wind", "speed"), "measurement"),
    ("wind direction", "", ("wind", "deg"), "compass"),
    ("sunrise", "", ("sys", "sunrise"), "time"),
    ("sunset", "", ("sys", "sunset"), "time"),
    ("rain (3h)", "mm", ("rain", "3h"), "measurement"),
    ("snow (3h)", "mm", ("snow", "3h"), "measurement"),
]


def _lookup(data: Any, *path: Any) -> Any:
    """Follow dict keys and list indices, returning None when a step is missing."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(data, list) or not -len(data) <= step < len(data):
                return None
        elif not isinstance(data, dict):
            return None
        elif step not in data:
            return None
        data = data[step]
    return data


def _as_number(value: Any) -> Optional[float]:
    # bool is an int subclass but not a JSON number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    # JSON Infinity and NaN decode to non-finite floats
    if not math.isfinite(number):
        return None
    return number


def _as_int(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_timestamp(value: Any) -> Optional[int]:
    epoch = _as_int(value)
    if epoch is None or not is_displayable_timestamp(epoch):
        return None
    return epoch


def identify_roles(first: Dict, second: Dict) -> Tuple[Dict, Dict]:
    """Tell the current-weather payload from the forecast payload.

    The forecast is the payload carrying a "cnt" field, whichever request
    produced it.

    Args:
        first: One downloaded payload
        second: The other downloaded payload

    Returns:
        Tuple of (current, forecast)

    Raises:
        MalformedResponseError: If neither or both payloads carry "cnt"
    """
    if not isinstance(first, dict) or not isinstance(second, dict):
        raise MalformedResponseError("Weather payloads must be JSON objects")

    first_is_forecast = "cnt" in first
    second_is_forecast = "cnt" in second
    if first_is_forecast == second_is_forecast:
        raise MalformedResponseError("Cannot tell current weather from forecast")

    if first_is_forecast:
        logger.info("Forecast payload arrived in the current-weather slot, swapping")
        return second, first
    return first, second


def sample_forecast(forecast: Dict) -> List[Dict]:
    """Pick one 3-hour entry per day from the forecast list.

    Takes the entries at positions 6, 14, 22, ... for cnt // 8 days, stopping
    early if the list is shorter and never taking more than the forecast slots.

    Raises:
        MalformedResponseError: If "cnt" is not an integer or "list" is not a list
        NoForecastDataError: If no entry is selected
    """
    count = _as_int(forecast.get("cnt"))
    entries = forecast.get("list", [])
    if count is None or not isinstance(entries, list):
        raise MalformedResponseError("Forecast payload has an invalid cnt or list")

    samples = []
    for day in range(min(count // SAMPLES_PER_DAY, FORECAST_DAYS)):
        position = SAMPLE_OFFSET + day * SAMPLES_PER_DAY
        if position >= len(entries):
            logger.warning(f"Forecast list ends before position {position}, cnt={count}")
            break
        samples.append(entries[position])

    if not samples:
        raise NoForecastDataError("Weather website having some trouble: no forecast data")

    logger.info(f"Selected {len(samples)} forecast samples from {len(entries)} entries")
    return samples


def build_day(entry: Dict) -> WeatherDay:
    """Build a plain day from one payload entry.

    Raises:
        InvalidDayRecordError: If a base field is missing or has the wrong type
    """
    day = WeatherDay.from_fields(
        condition_id=_as_int(_lookup(entry, "weather", 0, "id")),
        temperature=_as_number(_lookup(entry, "main", "temp")),
        icon=_as_str(_lookup(entry, "weather", 0, "icon")),
        timestamp=_as_timestamp(_lookup(entry, "dt")),
        description=_as_str(_lookup(entry, "weather", 0, "description"))
    )
    if day is None:
        raise InvalidDayRecordError("API Parse Error: day record is missing a base field")
    return day


def build_attributes(entry: Dict, timezone_str: str = "UTC") -> List[Attribute]:
    """Extract today's attributes, skipping absent or non-numeric values."""
    formatters: Dict[str, Callable[[float], str]] = {
        "measurement": format_measurement,
        "compass": compass_point,
        "time": lambda epoch: hour_string(epoch, timezone_str),
    }

    attributes = []
    for name, unit, path, style in ATTRIBUTE_SOURCES:
        value = _as_number(_lookup(entry, *path))
        if value is None:
            continue
        if style == "time" and not is_displayable_timestamp(value):
            logger.warning(f"Dropping {name}: timestamp {value} is out of range")
            continue
        attributes.append(Attribute(
            name=name,
            unit=unit,
            display_value=formatters[style](value),
            numeric_value=value
        ))
    return attributes


def build_today(entry: Dict, timezone_str: str = "UTC") -> ExtendedWeatherDay:
    """Build today's extended day from the current-weather payload.

    Raises:
        InvalidDayRecordError: If a base field is missing
    """
    day = build_day(entry)
    return ExtendedWeatherDay.extend(day, build_attributes(entry, timezone_str))


def build_collection(
    current: Dict,
    forecast: Dict,
    previous: Optional[WeatherCollection] = None,
    timezone_str: str = "UTC"
) -> WeatherCollection:
    """Build a new collection from payloads whose roles are known.

    Forecast slots without a sample keep the day from the previous
    collection, or a placeholder when there is none.

    Args:
        current: Current-weather payload
        forecast: Forecast payload
        previous: Collection whose days fill slots left without data
        timezone_str: Timezone for sunrise and sunset strings

    Returns:
        New WeatherCollection

    Raises:
        ParseError: If any record fails; no collection is produced
    """
    base = previous or WeatherCollection.placeholder()
    samples = sample_forecast(forecast)

    days = [build_today(current, timezone_str)]
    days.extend(build_day(sample) for sample in samples)
    days.extend(base.days[len(days):])

    collection = WeatherCollection(days=tuple(days), timezone=timezone_str)
    logger.info(
        f"Parsed today with {len(collection.today.attributes)} attributes "
        f"and {len(samples)} forecast days"
    )
    return collection


def parse_weather(
    first: Dict,
    second: Dict,
    previous: Optional[WeatherCollection] = None,
    timezone_str: str = "UTC"
) -> WeatherCollection:
    """Parse two payloads in any order into a weather collection.

    Raises:
        MalformedResponseError: If the payload roles cannot be determined
        NoForecastDataError: If the forecast yields no day samples
        InvalidDayRecordError: If a day misses a base field
    """
    current, forecast = identify_roles(first, second)
    return build_collection(current, forecast, previous, timezone_str)
