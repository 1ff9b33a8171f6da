"""Operational health models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    geo_api_reachable: bool
    weather_api_reachable: bool
    geo_api_key_set: bool
    weather_api_key_set: bool

    @property
    def ok(self) -> bool:
        return all(
            (
                self.geo_api_reachable,
                self.weather_api_reachable,
                self.geo_api_key_set,
                self.weather_api_key_set,
            )
        )
