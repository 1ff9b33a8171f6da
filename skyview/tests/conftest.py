"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from skyview.config.schema import AppConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def cities_payload() -> dict:
    return load_fixture("geodb_cities_lon.json")


@pytest.fixture
def current_payload() -> dict:
    return load_fixture("openweather_current_london.json")


@pytest.fixture
def forecast_payload() -> dict:
    return load_fixture("openweather_forecast_london.json")


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "geo": {"api_key": "geo-test-key", "limit": 5},
        "weather": {"api_key": "weather-test-key"},
        "search": {"debounce_ms": 100},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
