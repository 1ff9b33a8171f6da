"""Tests for the weather orchestrator."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from skyview.errors import ApiError, WeatherFetchError
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.models.common import Coordinates
from skyview.weather.orchestrator import WeatherOrchestrator, parse_current_weather

BASE = "https://test-owm.example.com/data/2.5"
LONDON = Coordinates(51.5072, -0.1276)


def _fixed_now() -> datetime:
    return datetime(2026, 10, 18, 13, 30, tzinfo=UTC)


def _mock_client(current=None, forecast=None) -> AsyncMock:
    client = AsyncMock(spec=OpenWeatherClient)
    client.get_current_weather.return_value = current
    client.get_forecast.return_value = forecast
    return client


class TestFetch:
    @pytest.mark.asyncio
    async def test_combined_view_model(self, current_payload: dict, forecast_payload: dict):
        client = _mock_client(current_payload, forecast_payload)
        orchestrator = WeatherOrchestrator(client, clock=_fixed_now)

        vm = await orchestrator.fetch(LONDON, label="London, GB")

        client.get_current_weather.assert_awaited_once_with(51.5072, -0.1276)
        client.get_forecast.assert_awaited_once_with(51.5072, -0.1276)
        assert vm.current.city == "London, GB"
        assert vm.current.description == "broken clouds"
        assert vm.current.temperature == 14.6
        assert [i.time for i in vm.today_timeline] == ["15:00", "18:00", "21:00"]
        assert [d.day for d in vm.week_summary] == ["2026-10-18", "2026-10-19", "2026-10-20"]

    @pytest.mark.asyncio
    async def test_requests_run_concurrently(self, current_payload: dict, forecast_payload: dict):
        both_started = asyncio.Event()
        started = []

        async def current(lat, lon):
            started.append("current")
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return current_payload

        async def forecast(lat, lon):
            started.append("forecast")
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return forecast_payload

        client = _mock_client()
        client.get_current_weather.side_effect = current
        client.get_forecast.side_effect = forecast

        vm = await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        assert sorted(started) == ["current", "forecast"]
        assert vm.current.city == "London"

    @pytest.mark.asyncio
    async def test_provider_name_when_no_label(self, current_payload: dict, forecast_payload: dict):
        client = _mock_client(current_payload, forecast_payload)
        vm = await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        assert vm.current.city == "London"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["get_current_weather", "get_forecast"])
    async def test_either_failure_fails_whole_fetch(
        self, failing: str, current_payload: dict, forecast_payload: dict
    ):
        client = _mock_client(current_payload, forecast_payload)
        getattr(client, failing).side_effect = ApiError("status 500", 500)

        with pytest.raises(WeatherFetchError) as exc_info:
            await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.cause, ApiError)

    @pytest.mark.asyncio
    async def test_failure_cancels_sibling(self, current_payload: dict):
        sibling_cancelled = asyncio.Event()

        async def slow_forecast(lat, lon):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                sibling_cancelled.set()
                raise

        async def failing_current(lat, lon):
            await asyncio.sleep(0.01)
            raise httpx.ConnectError("down")

        client = _mock_client()
        client.get_current_weather.side_effect = failing_current
        client.get_forecast.side_effect = slow_forecast

        with pytest.raises(WeatherFetchError) as exc_info:
            await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.status_code is None
        assert sibling_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_malformed_current_payload(self, forecast_payload: dict):
        client = _mock_client({"main": {"temp": 3}}, forecast_payload)
        with pytest.raises(WeatherFetchError):
            await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)

    @pytest.mark.asyncio
    async def test_empty_forecast_yields_empty_views(self, current_payload: dict):
        client = _mock_client(current_payload, {"list": []})
        vm = await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        assert vm.today_timeline == []
        assert vm.week_summary == []

    @pytest.mark.asyncio
    async def test_custom_priority(self, current_payload: dict, forecast_payload: dict):
        client = _mock_client(current_payload, forecast_payload)
        orchestrator = WeatherOrchestrator(
            client, description_priority=["clear"], clock=_fixed_now
        )
        vm = await orchestrator.fetch(LONDON)
        assert vm.week_summary[0].description == "clear sky"


class TestScenarioOverHttp:
    @pytest.mark.asyncio
    @respx.mock
    async def test_london_end_to_end(self, current_payload: dict, forecast_payload: dict):
        respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(200, json=current_payload))
        respx.get(f"{BASE}/forecast").mock(return_value=httpx.Response(200, json=forecast_payload))

        client = OpenWeatherClient(api_key="k", base_url=BASE)
        try:
            vm = await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON, "London, GB")
        finally:
            await client.aclose()

        assert vm.today_timeline
        days = {e["dt_txt"][:10] for e in forecast_payload["list"]}
        assert len(vm.week_summary) == len(days)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["weather", "forecast"])
    @pytest.mark.parametrize("failure_status", [500, 302])
    @respx.mock
    async def test_non_2xx_on_either_endpoint(
        self, failing: str, failure_status: int, current_payload: dict, forecast_payload: dict
    ):
        payloads = {"weather": current_payload, "forecast": forecast_payload}
        for endpoint, payload in payloads.items():
            status = failure_status if endpoint == failing else 200
            respx.get(f"{BASE}/{endpoint}").mock(
                return_value=httpx.Response(status, json=payload)
            )

        client = OpenWeatherClient(api_key="k", base_url=BASE)
        try:
            with pytest.raises(WeatherFetchError) as exc_info:
                await WeatherOrchestrator(client, clock=_fixed_now).fetch(LONDON)
        finally:
            await client.aclose()
        assert exc_info.value.status_code == failure_status


class TestParseCurrentWeather:
    def test_fields(self, current_payload: dict):
        current = parse_current_weather(current_payload, "London, GB")
        assert current.city == "London, GB"
        assert current.timestamp == 1792330200
        assert current.feels_like == 13.9
        assert current.humidity == 76
        assert current.wind_speed == 5.14
        assert current.timezone_offset == 3600
        assert current.raw is current_payload

    def test_missing_description(self, current_payload: dict):
        payload = dict(current_payload, weather=[])
        with pytest.raises(WeatherFetchError):
            parse_current_weather(payload, None)
