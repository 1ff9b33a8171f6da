"""Forecast derivation: today's hourly timeline and the per-day summary.

Every function here is total. Malformed records are dropped and an empty
or unusable payload yields an empty list.
"""

import logging
from datetime import datetime
from typing import Any

from skyview.models.common import utc_now
from skyview.models.weather import ForecastEntry, TodayForecastItem, WeekForecastItem

logger = logging.getLogger(__name__)


def today_label(now: datetime | None = None) -> str:
    """Calendar date label for "today" in the provider's dt_txt clock (UTC)."""
    if now is None:
        now = utc_now()
    return now.strftime("%Y-%m-%d")


def parse_forecast_entries(raw: Any) -> list[ForecastEntry]:
    """Extract ForecastEntry records from an OpenWeather /forecast payload."""
    if not isinstance(raw, dict):
        return []
    items = raw.get("list")
    if not isinstance(items, list):
        return []

    entries: list[ForecastEntry] = []
    for item in items:
        entry = _parse_entry(item)
        if entry is not None:
            entries.append(entry)

    dropped = len(items) - len(entries)
    if dropped:
        logger.warning("Dropped %d malformed forecast entries of %d", dropped, len(items))
    return entries


def _parse_entry(item: Any) -> ForecastEntry | None:
    try:
        dt_txt = item["dt_txt"]
        description = item["weather"][0]["description"]
        entry = ForecastEntry(
            timestamp=int(item["dt"]),
            temperature=float(item["main"]["temp"]),
            description=str(description),
            dt_txt=str(dt_txt),
        )
    except (KeyError, IndexError, TypeError, ValueError):
        return None
    # "YYYY-MM-DD HH:MM..." is required for the day/time labels
    if len(entry.dt_txt) < 16:
        return None
    return entry


def _coerce_entries(entries: Any) -> list[ForecastEntry]:
    """Accept parsed entries or raw provider records; drop anything else."""
    if not isinstance(entries, (list, tuple)):
        return []
    coerced: list[ForecastEntry] = []
    for item in entries:
        if isinstance(item, ForecastEntry):
            coerced.append(item)
        elif isinstance(item, dict):
            entry = _parse_entry(item)
            if entry is not None:
                coerced.append(entry)
    return coerced


def derive_today_timeline(
    entries: list[ForecastEntry] | list[dict], today: str, now_epoch: int
) -> list[TodayForecastItem]:
    """Entries of ``today`` whose timestamp is at or after ``now_epoch``.

    Provider order is already chronological and is kept as-is.
    """
    entries = _coerce_entries(entries)
    return [
        TodayForecastItem(
            time=entry.time_label,
            temperature=entry.temperature,
            description=entry.description,
        )
        for entry in entries
        if entry.day_label == today and entry.timestamp >= now_epoch
    ]


def derive_week_summary(
    entries: list[ForecastEntry] | list[dict], description_priority: list[str] | None
) -> list[WeekForecastItem]:
    """One item per distinct day, in first-seen order.

    The description is the most severe one of the day according to
    ``description_priority``, not the most frequent.
    """
    entries = _coerce_entries(entries)
    description_priority = description_priority or []
    days: dict[str, list[ForecastEntry]] = {}
    for entry in entries:
        days.setdefault(entry.day_label, []).append(entry)

    summary: list[WeekForecastItem] = []
    for day, group in days.items():
        temps = [e.temperature for e in group]
        dominant = min(group, key=lambda e: description_rank(e.description, description_priority))
        summary.append(
            WeekForecastItem(
                day=day,
                min_temp=min(temps),
                max_temp=max(temps),
                description=dominant.description,
            )
        )
    return summary


def description_rank(description: str, description_priority: list[str]) -> int:
    """Index of the first priority keyword found in ``description``.

    Lower is more severe; unmatched descriptions rank after every keyword.
    """
    text = description.lower()
    for rank, keyword in enumerate(description_priority):
        if keyword.lower() in text:
            return rank
    return len(description_priority)
