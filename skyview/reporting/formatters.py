"""Plain text and JSON formatters for search and weather view state."""

import json
from dataclasses import asdict

from skyview.models.search import CitySuggestion, SearchStats
from skyview.models.weather import ViewState, WeatherViewModel


def format_suggestions_text(
    suggestions: list[CitySuggestion], query: str | None = None, min_chars: int = 2
) -> str:
    if not suggestions:
        if query is not None and len(query.strip()) < min_chars:
            return f"Type at least {min_chars} characters to search"
        return "No cities found"
    return "\n".join(
        f"{s.label} ({s.latitude:.4f}, {s.longitude:.4f})" for s in suggestions
    )


def format_weather_text(vm: WeatherViewModel) -> str:
    c = vm.current
    lines = [f"=== {c.city or 'Unknown location'} ==="]
    now_line = f"Now: {c.description}"
    if c.temperature is not None:
        now_line += f", {c.temperature:.1f}°C"
    if c.feels_like is not None:
        now_line += f" (feels like {c.feels_like:.1f}°C)"
    lines.append(now_line)
    if c.humidity is not None or c.wind_speed is not None:
        lines.append(
            f"Humidity: {_or_na(c.humidity, '%')} | Wind: {_or_na(c.wind_speed, ' m/s')}"
        )

    lines.append("Today:")
    if vm.today_timeline:
        for item in vm.today_timeline:
            lines.append(f"  {item.time}  {item.temperature:5.1f}°C  {item.description}")
    else:
        lines.append("  no more forecast hours today")

    lines.append("Next days:")
    for day in vm.week_summary:
        lines.append(
            f"  {day.day}  {day.min_temp:5.1f} / {day.max_temp:5.1f}°C  {day.description}"
        )
    return "\n".join(lines)


def format_view_state_json(state: ViewState) -> str:
    """JSON payload for an external renderer."""
    data = {
        "loading": state.loading,
        "error": state.error,
        "suggestions": [asdict(s) for s in state.suggestions],
        "weather": _weather_dict(state.weather),
    }
    return json.dumps(data, indent=2)


def format_stats_text(stats: SearchStats) -> str:
    return (
        f"Searches: {stats.submitted} submitted, {stats.dispatched} dispatched, "
        f"{stats.resolved} resolved, {stats.cancelled} cancelled, "
        f"{stats.stale} stale, {stats.rate_limited} rate limited, {stats.failed} failed"
    )


def _weather_dict(vm: WeatherViewModel | None) -> dict | None:
    if vm is None:
        return None
    data = asdict(vm)
    data["current"].pop("raw", None)
    return data


def _or_na(value: float | None, unit: str) -> str:
    return "n/a" if value is None else f"{value:g}{unit}"
