import pytest

from owm_forecast.weather.errors import (
    InvalidDayRecordError, MalformedResponseError, NoForecastDataError
)
from owm_forecast.weather.models import ExtendedWeatherDay, WeatherCollection, WeatherDay
from owm_forecast.weather.parser import (
    build_today, identify_roles, parse_weather, sample_forecast
)

from conftest import CURRENT_DT


def test_identify_roles_in_order(current_payload, forecast_payload):
    current, forecast = identify_roles(current_payload, forecast_payload)
    assert current is current_payload
    assert forecast is forecast_payload


def test_identify_roles_swapped(current_payload, forecast_payload):
    current, forecast = identify_roles(forecast_payload, current_payload)
    assert current is current_payload
    assert forecast is forecast_payload


def test_identify_roles_without_cnt(current_payload):
    with pytest.raises(MalformedResponseError):
        identify_roles(current_payload, dict(current_payload))


def test_identify_roles_with_two_forecasts(forecast_payload):
    with pytest.raises(MalformedResponseError):
        identify_roles(forecast_payload, dict(forecast_payload))


def test_identify_roles_rejects_non_objects(current_payload):
    with pytest.raises(MalformedResponseError):
        identify_roles(current_payload, [])


def test_swapping_payloads_gives_identical_collection(current_payload, forecast_payload):
    in_order = parse_weather(current_payload, forecast_payload)
    swapped = parse_weather(forecast_payload, current_payload)
    assert in_order == swapped


def test_sample_forecast_takes_one_entry_per_day(forecast_payload):
    samples = sample_forecast(forecast_payload)

    expected = [forecast_payload["list"][position] for position in (6, 14, 22, 30, 38)]
    assert samples == expected


def test_sample_forecast_short_count(make_forecast):
    assert len(sample_forecast(make_forecast(16))) == 2
    assert len(sample_forecast(make_forecast(8))) == 1


def test_sample_forecast_stops_at_end_of_list(make_forecast):
    samples = sample_forecast(make_forecast(cnt=40, length=20))
    assert [s["main"]["temp"] for s in samples] == [276.0, 284.0]


def test_sample_forecast_never_exceeds_forecast_slots(make_forecast):
    assert len(sample_forecast(make_forecast(48))) == 5


@pytest.mark.parametrize("cnt, length", [(7, 7), (0, 0), (40, 5)])
def test_sample_forecast_without_samples(make_forecast, cnt, length):
    with pytest.raises(NoForecastDataError):
        sample_forecast(make_forecast(cnt, length))


@pytest.mark.parametrize("payload", [{"cnt": "40", "list": []}, {"cnt": 40, "list": {}}])
def test_sample_forecast_malformed(payload):
    with pytest.raises(MalformedResponseError):
        sample_forecast(payload)


def test_parse_full_payloads(current_payload, forecast_payload):
    collection = parse_weather(current_payload, forecast_payload)

    assert len(collection) == 6
    today = collection.today
    assert isinstance(today, ExtendedWeatherDay)
    assert today.condition_id == 803
    assert today.temperature == 274.65
    assert today.icon == "04d"
    assert today.timestamp == CURRENT_DT
    assert today.description == "broken clouds"

    assert [(a.name, a.unit, a.display_value) for a in today.attributes] == [
        ("cloudiness", "%", "75"),
        ("pressure", "hPa", "1013"),
        ("humidity", "%", "86"),
        ("wind speed", "m/s", "4.1"),
        ("wind direction", "", "SW"),
        ("sunrise", "", "07:30"),
        ("sunset", "", "16:15"),
        ("rain (3h)", "mm", "0.3"),
        ("snow (3h)", "mm", "1"),
    ]
    assert today.attribute("wind direction").numeric_value == 230.0

    assert all(type(day) is WeatherDay for day in collection.forecast)
    assert [day.temperature for day in collection.forecast] == [276.0, 284.0, 292.0, 300.0, 308.0]
    assert collection.forecast_day_count == 4


def test_missing_attribute_is_dropped(current_payload, forecast_payload):
    del current_payload["wind"]["deg"]

    today = parse_weather(current_payload, forecast_payload).today

    assert today.attribute("wind direction") is None
    assert today.attribute("wind speed") is not None
    assert len(today.attributes) == 8


def test_non_numeric_attributes_are_dropped(current_payload):
    current_payload["main"]["humidity"] = "high"
    current_payload["clouds"]["all"] = True
    del current_payload["rain"]
    current_payload["snow"] = None

    names = [a.name for a in build_today(current_payload).attributes]

    assert names == ["pressure", "wind speed", "wind direction", "sunrise", "sunset"]


def test_integer_and_float_values_are_accepted(current_payload):
    current_payload["main"]["temp"] = 280
    current_payload["wind"]["speed"] = 3

    today = build_today(current_payload)

    assert today.temperature == 280.0
    assert today.attribute("wind speed").numeric_value == 3.0
    assert today.attribute("wind speed").display_value == "3"


def test_sun_times_follow_timezone(current_payload):
    today = build_today(current_payload, "Europe/Prague")

    assert today.attribute("sunrise").display_value == "08:30"
    assert today.attribute("sunset").display_value == "17:15"


def test_missing_base_field_fails_parse(current_payload, forecast_payload):
    del current_payload["main"]["temp"]

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)


def test_empty_weather_list_fails_parse(current_payload, forecast_payload):
    current_payload["weather"] = []

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)


def test_broken_forecast_day_fails_parse(current_payload, forecast_payload):
    del forecast_payload["list"][22]["dt"]

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)


def test_failed_parse_leaves_previous_collection_untouched(current_payload, forecast_payload):
    previous = parse_weather(current_payload, forecast_payload)
    snapshot = previous.model_copy(deep=True)
    del forecast_payload["list"][38]["main"]

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload, previous=previous)

    assert previous == snapshot


def test_missing_forecast_days_keep_previous_values(current_payload, forecast_payload, make_forecast):
    previous = parse_weather(current_payload, forecast_payload)

    collection = parse_weather(current_payload, make_forecast(16), previous=previous)

    assert len(collection) == 6
    assert [day.temperature for day in collection.forecast[:2]] == [276.0, 284.0]
    assert collection.days[3:] == previous.days[3:]


def test_missing_forecast_days_without_previous_are_placeholders(current_payload, make_forecast):
    collection = parse_weather(current_payload, make_forecast(8))

    assert collection.days[2:] == WeatherCollection.placeholder().days[2:]
    assert collection.forecast_day_count == 0


def test_collection_records_timezone(current_payload, forecast_payload):
    collection = parse_weather(current_payload, forecast_payload, timezone_str="Europe/Prague")
    assert collection.timezone == "Europe/Prague"


@pytest.mark.parametrize("degrees", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_attribute_is_dropped(current_payload, degrees):
    current_payload["wind"]["deg"] = degrees

    today = build_today(current_payload)

    assert today.attribute("wind direction") is None
    assert len(today.attributes) == 8


def test_number_too_large_for_float_is_dropped(current_payload):
    current_payload["main"]["pressure"] = 10 ** 400

    assert build_today(current_payload).attribute("pressure") is None


@pytest.mark.parametrize("temperature", [float("inf"), float("nan")])
def test_non_finite_temperature_fails_parse(current_payload, forecast_payload, temperature):
    current_payload["main"]["temp"] = temperature

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)


@pytest.mark.parametrize("sunrise", [1e20, -1e20, 10 ** 15])
def test_out_of_range_sun_time_is_dropped(current_payload, sunrise):
    current_payload["sys"]["sunrise"] = sunrise

    today = build_today(current_payload)

    assert today.attribute("sunrise") is None
    assert today.attribute("sunset").display_value == "16:15"


@pytest.mark.parametrize("dt", [10 ** 15, -10 ** 15, 10 ** 400])
def test_out_of_range_day_timestamp_fails_parse(current_payload, forecast_payload, dt):
    current_payload["dt"] = dt

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)


def test_out_of_range_forecast_timestamp_fails_parse(current_payload, forecast_payload):
    forecast_payload["list"][14]["dt"] = 10 ** 15

    with pytest.raises(InvalidDayRecordError):
        parse_weather(current_payload, forecast_payload)
