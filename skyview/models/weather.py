"""Weather and forecast view models."""

from dataclasses import dataclass, field
from typing import Any

from skyview.models.search import CitySuggestion


@dataclass(frozen=True)
class CurrentWeather:
    city: str
    description: str
    timestamp: int
    temperature: float | None = None
    feels_like: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    timezone_offset: int = 0
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: int  # unix seconds
    temperature: float
    description: str
    dt_txt: str  # "YYYY-MM-DD HH:MM:SS", UTC

    @property
    def day_label(self) -> str:
        return self.dt_txt[:10]

    @property
    def time_label(self) -> str:
        return self.dt_txt[11:16]


@dataclass(frozen=True)
class TodayForecastItem:
    time: str
    temperature: float
    description: str


@dataclass(frozen=True)
class WeekForecastItem:
    day: str
    min_temp: float
    max_temp: float
    description: str


@dataclass(frozen=True)
class WeatherViewModel:
    current: CurrentWeather
    today_timeline: list[TodayForecastItem]
    week_summary: list[WeekForecastItem]


@dataclass
class ViewState:
    """Everything an external renderer receives."""

    loading: bool = False
    error: str | None = None
    suggestions: list[CitySuggestion] = field(default_factory=list)
    weather: WeatherViewModel | None = None
