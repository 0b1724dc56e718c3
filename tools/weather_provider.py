"""Weather provider abstractions, implementations and the store-backed cache."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

from models.weather import WeatherSnapshot
from tools.observability import instrument_call
from tools.wardrobe_store import WardrobeStore

LOGGER = logging.getLogger(__name__)

OPENWEATHER_CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_CACHE_WINDOW = timedelta(minutes=30)

_CONDITION_MAP = {
    "rain": "rainy",
    "drizzle": "rainy",
    "thunderstorm": "rainy",
    "snow": "snowy",
    "clear": "sunny",
    "clouds": "cloudy",
}


class _WeatherCondition(BaseModel):
    main: str = "Clear"
    description: str = "unknown"


class _Wind(BaseModel):
    speed: float = 0.0


class _Main(BaseModel):
    temp: float
    humidity: float = 0.0


class _CurrentWeatherResponse(BaseModel):
    main: _Main
    wind: _Wind = _Wind()
    weather: List[_WeatherCondition] = []


def map_condition(main: str) -> str:
    """Map an OpenWeather ``weather[0].main`` value onto our condition vocabulary."""

    key = main.strip().lower()
    return _CONDITION_MAP.get(key, key or "clear")


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def get_current(self, location: str) -> Optional[WeatherSnapshot]:
        """Return current conditions, or ``None`` when unavailable."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeather provider with schema validation; failures yield ``None``."""

    def __init__(self, api_key: str | None = None, timeout_seconds: float = 5.0, units: str = "metric") -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.units = units

    @instrument_call("openweather_current")
    def get_current(self, location: str) -> Optional[WeatherSnapshot]:
        if not location:
            return None
        if not self.api_key:
            LOGGER.warning("Weather unavailable", extra={"reason": "missing_api_key"})
            return None

        params = {"q": location, "appid": self.api_key, "units": self.units}
        try:
            response = requests.get(OPENWEATHER_CURRENT_URL, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _CurrentWeatherResponse.model_validate(response.json())
        except requests.RequestException as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            return None
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            return None

        condition = map_condition(parsed.weather[0].main) if parsed.weather else "clear"
        return WeatherSnapshot(
            temperature=parsed.main.temp,
            condition=condition,
            humidity=parsed.main.humidity,
            wind_speed=parsed.wind.speed,
        )


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(self, snapshot: WeatherSnapshot | None = None) -> None:
        self.snapshot = snapshot
        self.calls = 0

    def get_current(self, location: str) -> Optional[WeatherSnapshot]:
        self.calls += 1
        LOGGER.info("Returning mock weather")
        return self.snapshot


class CachedWeatherProvider(WeatherProvider):
    """Serve fresh snapshots from the store cache before asking ``provider``."""

    def __init__(
        self,
        provider: WeatherProvider,
        store: WardrobeStore,
        max_age: timedelta = DEFAULT_CACHE_WINDOW,
    ) -> None:
        self.provider = provider
        self.store = store
        self.max_age = max_age

    def get_current(self, location: str) -> Optional[WeatherSnapshot]:
        if not location:
            return None
        cached = self.store.get_cached_weather(location, self.max_age)
        if cached is not None:
            LOGGER.debug("weather cache hit")
            return cached
        snapshot = self.provider.get_current(location)
        if snapshot is not None:
            self.store.cache_weather(location, snapshot)
        return snapshot


__all__ = [
    "WeatherProvider",
    "OpenWeatherProvider",
    "MockWeatherProvider",
    "CachedWeatherProvider",
    "map_condition",
]
