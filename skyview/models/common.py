"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def utc_now() -> datetime:
    return datetime.now(UTC)

