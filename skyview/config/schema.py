"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from skyview.config.defaults import DEFAULT_DESCRIPTION_PRIORITY


class GeoApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://wft-geo-db.p.rapidapi.com/v1/geo"
    host: str = "wft-geo-db.p.rapidapi.com"
    api_key: str = ""
    min_population: int = Field(default=10000, ge=0)
    limit: int = Field(default=10, ge=1, le=100)
    timeout: float = Field(default=30.0, gt=0.0)


class WeatherApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key: str = ""
    units: str = "metric"
    timeout: float = Field(default=30.0, gt=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    min_chars: int = Field(default=2, ge=1)
    debounce_ms: int = Field(default=250, ge=0)
    min_interval_ms: int = Field(default=300, ge=0)
    soft_timeout_seconds: float = Field(default=5.0, gt=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    description_priority: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DESCRIPTION_PRIORITY)
    )


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    geo: GeoApiConfig = GeoApiConfig()
    weather: WeatherApiConfig = WeatherApiConfig()
    search: SearchConfig = SearchConfig()
    forecast: ForecastConfig = ForecastConfig()
