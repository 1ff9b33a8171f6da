"""City search models."""

from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum

from skyview.models.common import Coordinates

MAX_RECORDED_ERRORS = 50


class QueryState(StrEnum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RATE_LIMIT_WAITING = "rate_limit_waiting"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    STALE = "stale"
    FAILED = "failed"


@dataclass(frozen=True)
class Query:
    text: str
    sequence_id: int


@dataclass(frozen=True)
class CitySuggestion:
    label: str  # "<name>, <countryCode>"
    latitude: float
    longitude: float

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


@dataclass
class SearchStats:
    submitted: int = 0
    dispatched: int = 0
    resolved: int = 0
    cancelled: int = 0
    stale: int = 0
    rate_limited: int = 0
    failed: int = 0
    # most recent failures only
    errors: deque[str] = field(default_factory=lambda: deque(maxlen=MAX_RECORDED_ERRORS))
