# =============================================================================
# app/routers/weather.py - Weather Widget
# =============================================================================

from typing import Any

from fastapi import APIRouter

from core.services.weather_service import WeatherService

router = APIRouter()


@router.get("")
async def get_weather() -> dict[str, Any]:
    """
    Current conditions and a 3-day forecast.

    Cached for 15 minutes; a stale copy is served while Open-Meteo is
    down (502 only when nothing was ever cached).
    """
    return WeatherService.get_weather()
