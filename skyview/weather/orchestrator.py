"""Weather orchestrator: concurrent current + forecast fetch and view model assembly."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

from skyview.config.defaults import DEFAULT_DESCRIPTION_PRIORITY
from skyview.errors import WeatherFetchError
from skyview.forecast.deriver import (
    derive_today_timeline,
    derive_week_summary,
    parse_forecast_entries,
    today_label,
)
from skyview.models.common import Coordinates, utc_now
from skyview.models.weather import CurrentWeather, WeatherViewModel

logger = logging.getLogger(__name__)


class WeatherSource(Protocol):
    async def get_current_weather(self, latitude: float, longitude: float) -> dict: ...

    async def get_forecast(self, latitude: float, longitude: float) -> dict: ...


class WeatherOrchestrator:
    def __init__(
        self,
        client: WeatherSource,
        description_priority: list[str] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.description_priority = (
            description_priority
            if description_priority is not None
            else list(DEFAULT_DESCRIPTION_PRIORITY)
        )
        self.clock = clock

    async def fetch(self, coordinates: Coordinates, label: str | None = None) -> WeatherViewModel:
        """Fetch current conditions and forecast together.

        Both requests must succeed; the first failure cancels the other and
        the whole call raises WeatherFetchError. No retry is attempted.
        """
        lat, lon = coordinates.latitude, coordinates.longitude
        try:
            async with asyncio.TaskGroup() as tg:
                current_task = tg.create_task(self.client.get_current_weather(lat, lon))
                forecast_task = tg.create_task(self.client.get_forecast(lat, lon))
        except ExceptionGroup as eg:
            # TaskGroup reports the first failure plus any raised while cancelling
            cause = eg.exceptions[0]
            logger.error("Failed to fetch weather data for (%s, %s): %s", lat, lon, cause)
            raise WeatherFetchError(cause, getattr(cause, "status_code", None)) from cause

        now = self.clock()
        current = parse_current_weather(current_task.result(), label)
        entries = parse_forecast_entries(forecast_task.result())

        return WeatherViewModel(
            current=current,
            today_timeline=derive_today_timeline(
                entries, today_label(now), int(now.timestamp())
            ),
            week_summary=derive_week_summary(entries, self.description_priority),
        )


def parse_current_weather(raw: Any, label: str | None) -> CurrentWeather:
    """Build CurrentWeather from an OpenWeather /weather payload.

    ``label`` is the display name of the selected city and takes precedence
    over the provider's own name.
    """
    try:
        description = raw["weather"][0]["description"]
        timestamp = int(raw["dt"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.error("Malformed current weather payload: %r", e)
        raise WeatherFetchError(ValueError("Malformed current weather payload")) from e

    main = raw.get("main") or {}
    wind = raw.get("wind") or {}
    return CurrentWeather(
        city=label or raw.get("name", ""),
        description=str(description),
        timestamp=timestamp,
        temperature=main.get("temp"),
        feels_like=main.get("feels_like"),
        humidity=main.get("humidity"),
        wind_speed=wind.get("speed"),
        timezone_offset=int(raw.get("timezone", 0) or 0),
        raw=raw,
    )
