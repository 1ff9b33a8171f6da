"""CLI entry point for city search and weather lookups."""

import argparse
import asyncio
import logging

from skyview.config.loader import get_config_value, load_config
from skyview.config.schema import AppConfig
from skyview.errors import ApiError, SearchError, WeatherFetchError
from skyview.ingest.geodb_client import GeoDbClient
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.models.common import Coordinates
from skyview.models.weather import ViewState
from skyview.reporting.formatters import (
    format_stats_text,
    format_suggestions_text,
    format_view_state_json,
    format_weather_text,
)
from skyview.reporting.health_checker import HealthChecker
from skyview.search.controller import SearchController
from skyview.weather.orchestrator import WeatherOrchestrator

DEFAULT_CONFIG = "configs/default.yaml"

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="City search and weather forecast lookups",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the renderer view state as JSON"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # search
    search_p = sub.add_parser(
        "search", help="Type one or more inputs in quick succession"
    )
    search_p.add_argument("inputs", nargs="+", help="Successive search box contents")
    search_p.add_argument(
        "--gap-ms", type=int, default=50, help="Delay between inputs in milliseconds"
    )

    # weather
    weather_p = sub.add_parser("weather", help="Current weather and forecast")
    weather_p.add_argument("latitude", type=float)
    weather_p.add_argument("longitude", type=float)
    weather_p.add_argument("--label", default=None, help="City display name")

    # health
    sub.add_parser("health", help="Check API reachability")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. search.debounce_ms")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "weather":
        return asyncio.run(_cmd_weather(config, args))
    elif args.command == "health":
        return asyncio.run(_cmd_health(config))
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


async def _cmd_search(config: AppConfig, args) -> int:
    try:
        client = _geo_client(config)
    except ApiError as e:
        print(f"Error: {e}")
        return 1

    controller = SearchController(
        client,
        min_chars=config.search.min_chars,
        debounce=config.search.debounce_ms / 1000,
        min_interval=config.search.min_interval_ms / 1000,
    )
    try:
        async with controller:
            tasks = []
            for text in args.inputs:
                tasks.append(asyncio.create_task(controller.submit(text)))
                await asyncio.sleep(args.gap_ms / 1000)
            results = await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        await client.aclose()

    # Only the last input can carry the active result.
    final = results[-1]
    state = ViewState()
    if isinstance(final, SearchError):
        # Failed searches are shown as "no results", not as an error.
        logger.error("Search failed: %s", final)
    elif isinstance(final, BaseException):
        raise final
    else:
        state.suggestions = final

    if args.json:
        print(format_view_state_json(state))
    else:
        print(
            format_suggestions_text(
                state.suggestions, args.inputs[-1], config.search.min_chars
            )
        )
        print(format_stats_text(controller.stats))
    return 1 if isinstance(final, SearchError) else 0


async def _cmd_weather(config: AppConfig, args) -> int:
    try:
        client = _weather_client(config)
    except ApiError as e:
        print(f"Error: {e}")
        return 1

    orchestrator = WeatherOrchestrator(
        client, description_priority=config.forecast.description_priority
    )
    state = ViewState()
    try:
        state.weather = await orchestrator.fetch(
            Coordinates(args.latitude, args.longitude), label=args.label
        )
    except WeatherFetchError as e:
        state.error = str(e)
    finally:
        await client.aclose()

    if args.json:
        print(format_view_state_json(state))
    elif state.weather is not None:
        print(format_weather_text(state.weather))
    else:
        print(f"Error: {state.error}")
    return 0 if state.error is None else 1


async def _cmd_health(config: AppConfig) -> int:
    status = await HealthChecker(config).check()
    print(f"GeoDB API: {'OK' if status.geo_api_reachable else 'FAIL'}")
    print(f"OpenWeather API: {'OK' if status.weather_api_reachable else 'FAIL'}")
    print(f"GeoDB key: {'set' if status.geo_api_key_set else 'missing'}")
    print(f"OpenWeather key: {'set' if status.weather_api_key_set else 'missing'}")
    return 0 if status.ok else 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(
            config.model_dump_json(
                indent=2, exclude={"geo": {"api_key"}, "weather": {"api_key"}}
            )
        )
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get key")
        return 1


def _geo_client(config: AppConfig) -> GeoDbClient:
    return GeoDbClient(
        api_key=config.geo.api_key,
        base_url=config.geo.base_url,
        host=config.geo.host,
        min_population=config.geo.min_population,
        limit=config.geo.limit,
        timeout=config.geo.timeout,
        soft_timeout=config.search.soft_timeout_seconds,
    )


def _weather_client(config: AppConfig) -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key=config.weather.api_key,
        base_url=config.weather.base_url,
        units=config.weather.units,
        timeout=config.weather.timeout,
    )
