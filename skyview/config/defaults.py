"""Default description severity ranking used by the weekly summary."""

# Most severe first. Matched as keywords against lower-cased provider
# descriptions, so "light rain" ranks as "rain".
DEFAULT_DESCRIPTION_PRIORITY: list[str] = [
    "thunderstorm",
    "storm",
    "snow",
    "sleet",
    "rain",
    "drizzle",
    "mist",
    "fog",
    "haze",
    "smoke",
    "overcast",
    "clouds",
    "clear",
]

GEO_API_KEY_ENV = "SKYVIEW_GEO_API_KEY"
WEATHER_API_KEY_ENV = "SKYVIEW_WEATHER_API_KEY"
