import copy

import httpx
import pytest

from owm_forecast.config import FetchConfig

# Monday 2024-01-15, 12:00 UTC
CURRENT_DT = 1705320000
SUNRISE = 1705303800  # 07:30 UTC
SUNSET = 1705335300  # 16:15 UTC
THREE_HOURS = 3 * 3600

CURRENT_URL = "http://owm.test/data/2.5/weather?id=3078610&appid=test"
FORECAST_URL = "http://owm.test/data/2.5/forecast?id=3078610&appid=test"

CURRENT_PAYLOAD = {
    "coord": {"lon": 16.61, "lat": 49.2},
    "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    "main": {"temp": 274.65, "pressure": 1013, "humidity": 86},
    "wind": {"speed": 4.1, "deg": 230},
    "clouds": {"all": 75},
    "rain": {"3h": 0.3},
    "snow": {"3h": 1},
    "dt": CURRENT_DT,
    "sys": {"sunrise": SUNRISE, "sunset": SUNSET},
    "id": 3078610,
}


def forecast_entry(position: int) -> dict:
    return {
        "dt": CURRENT_DT + (position + 1) * THREE_HOURS,
        "main": {"temp": 270.0 + position},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
    }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def current_payload():
    """Well-formed current-weather payload with every attribute present."""
    return copy.deepcopy(CURRENT_PAYLOAD)


@pytest.fixture
def make_forecast():
    """Factory for forecast payloads with a given cnt and list length."""
    def _make(cnt: int = 40, length=None) -> dict:
        length = cnt if length is None else length
        return {
            "cod": "200",
            "cnt": cnt,
            "list": [forecast_entry(position) for position in range(length)],
        }
    return _make


@pytest.fixture
def forecast_payload(make_forecast):
    return make_forecast(40)


@pytest.fixture
def fetch_config():
    return FetchConfig(current_url=CURRENT_URL, forecast_url=FORECAST_URL, timeout_seconds=10)


@pytest.fixture
def owm_handler(current_payload, forecast_payload):
    """Mock OpenWeatherMap handler serving both endpoints."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/weather"):
            return httpx.Response(200, json=current_payload)
        return httpx.Response(200, json=forecast_payload)
    return handler
