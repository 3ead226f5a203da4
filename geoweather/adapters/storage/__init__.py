"""
Storage adapters for GeoWeather hexagonal architecture.

This module contains the weather event stores (SQLite and in-memory)
and the static entity position source.
"""

from .memory import InMemoryWeatherStore, StaticPositionSource
from .sqlite_weather import SQLiteWeatherStore

__all__ = ["SQLiteWeatherStore", "InMemoryWeatherStore", "StaticPositionSource"]
