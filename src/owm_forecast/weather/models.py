"""Data models for weather forecast service."""

import time
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from owm_forecast.weather.formatting import celsius_string

COLLECTION_SIZE = 6


class DayCycle(str, Enum):
    """Whether the sun is up at the city."""
    DAY = "day"
    NIGHT = "night"


class Attribute(BaseModel):
    """One measured property of today's weather."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Attribute identifier, e.g. 'humidity'")
    unit: str = Field("", description="Display unit, empty for derived values")
    display_value: str = Field(..., description="Formatted value for display")
    numeric_value: float = Field(..., description="Raw numeric value")


class WeatherDay(BaseModel):
    """Weather for one day: condition, temperature and icon."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["plain"] = "plain"
    condition_id: int = Field(..., description="OpenWeatherMap condition code")
    temperature: float = Field(..., description="Temperature in Kelvin")
    icon: str = Field(..., description="OpenWeatherMap icon identifier")
    timestamp: int = Field(..., description="Unix epoch seconds")
    description: str = Field(..., description="Condition description")

    @classmethod
    def from_fields(
        cls,
        condition_id: Optional[int],
        temperature: Optional[float],
        icon: Optional[str],
        timestamp: Optional[int],
        description: Optional[str]
    ) -> Optional["WeatherDay"]:
        """Build a day only when every base field is present.

        Returns:
            WeatherDay, or None if any field is missing
        """
        fields = (condition_id, temperature, icon, timestamp, description)
        if any(value is None for value in fields):
            return None
        return cls(
            condition_id=condition_id,
            temperature=temperature,
            icon=icon,
            timestamp=timestamp,
            description=description
        )

    @classmethod
    def placeholder(cls) -> "WeatherDay":
        """Day shown before any data has been downloaded."""
        return cls(
            condition_id=800,
            temperature=0.0,
            icon="01d",
            timestamp=0,
            description="clear sky"
        )

    @property
    def celsius(self) -> str:
        return celsius_string(self.temperature)


class ExtendedWeatherDay(WeatherDay):
    """Today's weather with its measured attributes."""
    kind: Literal["extended"] = "extended"
    attributes: Tuple[Attribute, ...] = Field((), description="Attributes in display order")

    @classmethod
    def extend(cls, day: WeatherDay, attributes: List[Attribute]) -> "ExtendedWeatherDay":
        """Attach attributes to a base day."""
        return cls(
            condition_id=day.condition_id,
            temperature=day.temperature,
            icon=day.icon,
            timestamp=day.timestamp,
            description=day.description,
            attributes=tuple(attributes)
        )

    @classmethod
    def placeholder(cls) -> "ExtendedWeatherDay":
        return cls.extend(WeatherDay.placeholder(), [])

    def attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def attribute_at(self, index: int) -> Optional[Attribute]:
        if index < 0 or index >= len(self.attributes):
            return None
        return self.attributes[index]

    def day_cycle(self, now: Optional[float] = None) -> DayCycle:
        """Day between sunrise and sunset, night otherwise.

        Args:
            now: Epoch seconds to evaluate at, defaults to the current time

        Returns:
            DayCycle.DAY if sunrise <= now < sunset, DayCycle.NIGHT otherwise.
            Without sunrise and sunset attributes the cycle stays DAY.
        """
        sunrise = self.attribute("sunrise")
        sunset = self.attribute("sunset")
        if sunrise is None or sunset is None:
            return DayCycle.DAY

        if now is None:
            now = time.time()
        now = int(now)

        if int(sunrise.numeric_value) <= now < int(sunset.numeric_value):
            return DayCycle.DAY
        return DayCycle.NIGHT


DayRecord = Annotated[Union[ExtendedWeatherDay, WeatherDay], Field(discriminator="kind")]


class WeatherCollection(BaseModel):
    """Today plus five forecast days, always six entries."""
    model_config = ConfigDict(frozen=True)

    days: Tuple[DayRecord, ...] = Field(..., description="Today followed by forecast days")
    timezone: str = Field("UTC", description="Timezone used for display strings")

    @model_validator(mode="after")
    def check_layout(self) -> "WeatherCollection":
        if len(self.days) != COLLECTION_SIZE:
            raise ValueError(f"Collection must hold {COLLECTION_SIZE} days, got {len(self.days)}")
        if not isinstance(self.days[0], ExtendedWeatherDay):
            raise ValueError("First day must be extended")
        if any(isinstance(day, ExtendedWeatherDay) for day in self.days[1:]):
            raise ValueError("Forecast days must not be extended")
        return self

    @classmethod
    def placeholder(cls, timezone: str = "UTC") -> "WeatherCollection":
        days = [ExtendedWeatherDay.placeholder()]
        days.extend(WeatherDay.placeholder() for _ in range(COLLECTION_SIZE - 1))
        return cls(days=tuple(days), timezone=timezone)

    @property
    def today(self) -> ExtendedWeatherDay:
        return self.days[0]

    @property
    def forecast(self) -> Tuple[WeatherDay, ...]:
        return self.days[1:]

    @property
    def forecast_day_count(self) -> int:
        """Forecast days with a non-zero temperature, minus one.

        Returns -1 when no forecast day holds data.
        """
        return len([day for day in self.forecast if day.temperature != 0]) - 1

    def __len__(self) -> int:
        return len(self.days)

    def __getitem__(self, index: int) -> WeatherDay:
        return self.days[index]


class AttributeReport(BaseModel):
    """Attribute as shown to clients."""
    name: str = Field(..., description="Attribute identifier")
    unit: str = Field(..., description="Display unit")
    value: str = Field(..., description="Formatted value")


class DayReport(BaseModel):
    """One day as shown to clients."""
    weekday: str = Field(..., description="Weekday name in the display timezone")
    time: str = Field(..., description="Sample time as HH:MM")
    condition_id: int = Field(..., description="OpenWeatherMap condition code")
    temperature_c: str = Field(..., description="Temperature label in Celsius")
    icon: str = Field(..., description="Icon identifier")
    description: str = Field(..., description="Condition description")
    attributes: List[AttributeReport] = Field(default_factory=list, description="Today's attributes")


class WeatherReport(BaseModel):
    """Published weather collection response model."""
    timezone: str = Field(..., description="Timezone of the display strings")
    day_cycle: DayCycle = Field(..., description="Day or night at the city")
    forecast_day_count: int = Field(..., description="Forecast days with data, minus one")
    generation: int = Field(..., description="Refresh generation that produced the data")
    days: List[DayReport] = Field(..., description="Today followed by forecast days")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")


class FetchedPayloads(BaseModel):
    """Raw payloads keyed by the request that produced them."""
    current: dict = Field(..., description="Body of the current-weather request")
    forecast: dict = Field(..., description="Body of the forecast request")
