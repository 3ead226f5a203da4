"""
Orchestrators for GeoWeather.

This module contains the orchestrators that drive the core engine
on a schedule.
"""
from .weather_scheduler import WeatherScheduler

__all__ = ["WeatherScheduler"]
