"""Display strings for temperatures, measurements and timestamps."""

import math
import zoneinfo
from datetime import datetime, timezone

COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW", "N"]

KELVIN_OFFSET = 273.15


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def format_measurement(value: float) -> str:
    """Format a number with at most one fraction digit.

    Args:
        value: Number to format

    Returns:
        String such as "12", "12.5" or "1013"
    """
    result = f"{value:.1f}"
    if result.endswith(".0"):
        result = result[:-2]
    if result == "-0":
        result = "0"
    return result


def celsius_string(kelvin: float) -> str:
    """Convert Kelvin to a Celsius label rounded to the nearest half degree."""
    celsius = _round_half_away((kelvin - KELVIN_OFFSET) * 2) / 2
    return f"{format_measurement(celsius)} °C"


def compass_point(degrees: float) -> str:
    """Map a wind direction in degrees to one of eight compass points."""
    return COMPASS_POINTS[int(_round_half_away((degrees % 360) / 45))]


def _local_datetime(epoch: float, timezone_str: str) -> datetime:
    utc_time = datetime.fromtimestamp(epoch, tz=timezone.utc)
    return utc_time.astimezone(zoneinfo.ZoneInfo(timezone_str))


def is_displayable_timestamp(epoch: float) -> bool:
    """Check that epoch seconds convert to a date in any timezone.

    Years 1 and 9999 are excluded so a timezone shift cannot leave the
    supported datetime range.
    """
    try:
        year = datetime.fromtimestamp(epoch, tz=timezone.utc).year
    except (OverflowError, ValueError, OSError):
        return False
    return 1 < year < 9999


def hour_string(epoch: float, timezone_str: str = "UTC") -> str:
    """Format epoch seconds as HH:MM in the given timezone."""
    return _local_datetime(epoch, timezone_str).strftime("%H:%M")


def weekday_name(epoch: float, timezone_str: str = "UTC") -> str:
    """Full English weekday name of epoch seconds in the given timezone."""
    # %A depends on the process locale
    names = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    return names[_local_datetime(epoch, timezone_str).weekday()]
