"""GeoDB Cities (RapidAPI) client for city name lookups."""

import asyncio
import logging

import httpx

from skyview.errors import ApiError, RateLimitedError
from skyview.search.cancel import CancelToken

logger = logging.getLogger(__name__)

GEO_BASE_URL = "https://wft-geo-db.p.rapidapi.com/v1/geo"
GEO_HOST = "wft-geo-db.p.rapidapi.com"


class GeoDbClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = GEO_BASE_URL,
        host: str = GEO_HOST,
        min_population: int = 10000,
        limit: int = 10,
        timeout: float = 30.0,
        soft_timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise ApiError("GeoDB API key not set")
        self.api_key = api_key
        self.base_url = base_url
        self.host = host
        self.min_population = min_population
        self.limit = limit
        self.soft_timeout = soft_timeout
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host}

    async def search_cities(
        self, name_prefix: str, token: CancelToken | None = None
    ) -> dict:
        """Fetch cities whose name starts with ``name_prefix``.

        Raises RateLimitedError on 429, ApiError on any other non-2xx and
        RequestCancelled when ``token`` fires first. The soft timeout only
        logs; it never aborts the request.
        """
        token = token or CancelToken()
        token.raise_if_cancelled()
        params = {
            "minPopulation": self.min_population,
            "namePrefix": name_prefix.strip(),
            "limit": self.limit,
        }
        loop = asyncio.get_running_loop()
        timer = loop.call_later(self.soft_timeout, self._log_slow, name_prefix, token)
        try:
            resp = await token.run(
                self.http_client.get(
                    f"{self.base_url}/cities", params=params, headers=self._headers()
                )
            )
        finally:
            timer.cancel()

        if resp.status_code == 429:
            logger.warning("GeoDB rate limit exceeded for prefix=%r", name_prefix)
            raise RateLimitedError()
        if not resp.is_success:
            logger.error("GeoDB API %d for prefix=%r", resp.status_code, name_prefix)
            raise ApiError(f"GeoDB HTTP {resp.status_code}", resp.status_code)
        return resp.json()

    def _log_slow(self, name_prefix: str, token: CancelToken) -> None:
        if not token.cancelled:
            logger.info(
                "City search for %r still pending after %.1fs",
                name_prefix, self.soft_timeout,
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
