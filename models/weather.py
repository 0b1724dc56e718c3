"""Weather snapshot schema shared by providers, filters and scorers."""

from dataclasses import dataclass

from models.taxonomy import RAINY_CONDITIONS


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for one location; immutable for a request."""

    temperature: float
    condition: str = "clear"
    humidity: float = 0.0
    wind_speed: float = 0.0

    @property
    def is_rainy(self) -> bool:
        return self.condition.strip().lower() in RAINY_CONDITIONS


__all__ = ["WeatherSnapshot"]
