"""YAML config loader with environment fallback for API keys."""

import os
from pathlib import Path
from typing import Any

import yaml

from skyview.config.defaults import GEO_API_KEY_ENV, WEATHER_API_KEY_ENV
from skyview.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. Empty API keys are filled from
    SKYVIEW_GEO_API_KEY / SKYVIEW_WEATHER_API_KEY.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    config = AppConfig(**raw)
    return apply_env_keys(config)


def apply_env_keys(config: AppConfig) -> AppConfig:
    updates: dict[str, Any] = {}
    if not config.geo.api_key and os.environ.get(GEO_API_KEY_ENV):
        updates["geo"] = config.geo.model_copy(
            update={"api_key": os.environ[GEO_API_KEY_ENV]}
        )
    if not config.weather.api_key and os.environ.get(WEATHER_API_KEY_ENV):
        updates["weather"] = config.weather.model_copy(
            update={"api_key": os.environ[WEATHER_API_KEY_ENV]}
        )
    if not updates:
        return config
    return config.model_copy(update=updates)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
