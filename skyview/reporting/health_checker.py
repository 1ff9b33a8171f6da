"""Health checker: API host reachability and key presence."""

import asyncio

import httpx

from skyview.config.schema import AppConfig
from skyview.models.reporting import HealthStatus


class HealthChecker:
    def __init__(self, config: AppConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.http_client = http_client

    async def check(self) -> HealthStatus:
        if self.http_client is not None:
            geo_ok, weather_ok = await self._probe_all(self.http_client)
        else:
            async with httpx.AsyncClient(timeout=10.0) as client:
                geo_ok, weather_ok = await self._probe_all(client)

        return HealthStatus(
            geo_api_reachable=geo_ok,
            weather_api_reachable=weather_ok,
            geo_api_key_set=bool(self.config.geo.api_key),
            weather_api_key_set=bool(self.config.weather.api_key),
        )

    async def _probe_all(self, client: httpx.AsyncClient) -> tuple[bool, bool]:
        geo_ok, weather_ok = await asyncio.gather(
            self._probe(client, self.config.geo.base_url),
            self._probe(client, self.config.weather.base_url),
        )
        return geo_ok, weather_ok

    @staticmethod
    async def _probe(client: httpx.AsyncClient, url: str) -> bool:
        # Any HTTP answer, even 401/404, means the host is up.
        try:
            resp = await client.get(url)
            return resp.status_code < 500
        except httpx.HTTPError:
            return False
