"""OpenWeatherMap client for current conditions and the 5-day/3-hour forecast."""

import logging

import httpx

from skyview.errors import ApiError

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "metric",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise ApiError("OpenWeather API key not set")
        self.api_key = api_key
        self.base_url = base_url
        self.units = units
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def get_current_weather(self, latitude: float, longitude: float) -> dict:
        return await self._get("weather", latitude, longitude)

    async def get_forecast(self, latitude: float, longitude: float) -> dict:
        return await self._get("forecast", latitude, longitude)

    async def _get(self, endpoint: str, latitude: float, longitude: float) -> dict:
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": self.units,
        }
        resp = await self.http_client.get(f"{self.base_url}/{endpoint}", params=params)
        if not resp.is_success:
            logger.error(
                "OpenWeather /%s returned %d for (%s, %s)",
                endpoint, resp.status_code, latitude, longitude,
            )
            raise ApiError(
                f"Weather API request failed with status {resp.status_code}",
                resp.status_code,
            )
        return resp.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
