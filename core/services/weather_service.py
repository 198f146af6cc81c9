# =============================================================================
# core/services/weather_service.py - Local Weather
# =============================================================================
# Current conditions and a 3-day forecast from Open-Meteo (no API key) at
# the configured coordinates, in Fahrenheit and mph.
#
# Results are cached for 15 minutes. When Open-Meteo is down the last
# result is served no matter how old it is.
# =============================================================================

import logging
from datetime import date
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError, TTLCache

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
CACHE_TTL_SECONDS = 15 * 60
FORECAST_DAYS = 3

WEATHER_CODES: dict[int, tuple[str, str]] = {
    0: ("Clear sky", "☀️"),
    1: ("Mainly clear", "🌤️"),
    2: ("Partly cloudy", "⛅"),
    3: ("Overcast", "☁️"),
    45: ("Foggy", "🌫️"),
    48: ("Depositing rime fog", "🌫️"),
    51: ("Light drizzle", "🌧️"),
    53: ("Moderate drizzle", "🌧️"),
    55: ("Dense drizzle", "🌧️"),
    61: ("Slight rain", "🌧️"),
    63: ("Moderate rain", "🌧️"),
    65: ("Heavy rain", "🌧️"),
    66: ("Light freezing rain", "🌨️"),
    67: ("Heavy freezing rain", "🌨️"),
    71: ("Slight snow", "🌨️"),
    73: ("Moderate snow", "❄️"),
    75: ("Heavy snow", "❄️"),
    77: ("Snow grains", "❄️"),
    80: ("Slight rain showers", "🌦️"),
    81: ("Moderate rain showers", "🌦️"),
    82: ("Violent rain showers", "⛈️"),
    85: ("Slight snow showers", "🌨️"),
    86: ("Heavy snow showers", "🌨️"),
    95: ("Thunderstorm", "⛈️"),
    96: ("Thunderstorm with hail", "⛈️"),
    99: ("Thunderstorm with heavy hail", "⛈️"),
}
UNKNOWN_WEATHER = ("Unknown", "🌡️")

_cache: TTLCache[dict[str, Any]] = TTLCache(ttl_seconds=CACHE_TTL_SECONDS)


class WeatherError(ApplicationError):
    """Raised when Open-Meteo fails and nothing is cached."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="WEATHER_UNAVAILABLE", **kwargs)


def describe(code: int | None) -> tuple[str, str]:
    """(description, icon) for a WMO weather code."""
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER) if code is not None else UNKNOWN_WEATHER


def day_label(index: int, day: str) -> str:
    """'Today', 'Tomorrow', then the short weekday name ('Wed')."""
    if index == 0:
        return "Today"
    if index == 1:
        return "Tomorrow"
    return date.fromisoformat(day).strftime("%a")


def build_weather(data: dict[str, Any]) -> dict[str, Any]:
    """Map an Open-Meteo response to the kiosk's weather payload."""
    current = data["current"]
    daily = data["daily"]
    description, icon = describe(current.get("weather_code"))

    forecast = []
    for index, day in enumerate(daily["time"][:FORECAST_DAYS]):
        day_description, day_icon = describe(daily["weather_code"][index])
        forecast.append({
            "day": day_label(index, day),
            "high": round(daily["temperature_2m_max"][index]),
            "low": round(daily["temperature_2m_min"][index]),
            "icon": day_icon,
            "description": day_description,
        })

    return {
        "temperature": round(current["temperature_2m"]),
        "feels_like": round(current["apparent_temperature"]),
        "description": description,
        "icon": icon,
        "humidity": current.get("relative_humidity_2m"),
        "wind_speed": round(current["wind_speed_10m"]),
        "high": round(daily["temperature_2m_max"][0]),
        "low": round(daily["temperature_2m_min"][0]),
        "forecast": forecast,
    }


class WeatherService:
    """Service for the weather widget."""

    @staticmethod
    def _fetch() -> dict[str, Any]:
        params = {
            "latitude": settings.WEATHER_LATITUDE,
            "longitude": settings.WEATHER_LONGITUDE,
            "current": "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,wind_speed_10m",
            "daily": "temperature_2m_max,temperature_2m_min,weather_code",
            "forecast_days": FORECAST_DAYS,
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "timezone": settings.TIMEZONE,
        }
        response = httpx.get(OPEN_METEO_URL, params=params, timeout=10.0)
        response.raise_for_status()
        return build_weather(response.json())

    @staticmethod
    def get_weather() -> dict[str, Any]:
        """
        Cached weather, refreshed every 15 minutes.

        Raises:
            WeatherError: If Open-Meteo fails and nothing was ever cached
        """
        cached = _cache.get()
        if cached is not None:
            return cached

        try:
            weather = WeatherService._fetch()
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Weather API error: {e}")
            stale = _cache.stale()
            if stale is not None:
                logger.warning("Serving stale weather")
                return stale
            raise WeatherError(
                message="Failed to fetch weather",
                suggestion="Open-Meteo may be down; try again shortly",
                details={"error": str(e)},
            )

        _cache.set(weather)
        return weather

    @staticmethod
    def clear_cache() -> None:
        _cache.clear()
