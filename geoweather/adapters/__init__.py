"""
Adapters for GeoWeather hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import SQLiteWeatherStore, InMemoryWeatherStore, StaticPositionSource
from .elevation import OpenElevationClient
from .notify import LogNotifier

__all__ = [
    "SQLiteWeatherStore", "InMemoryWeatherStore", "StaticPositionSource",
    "OpenElevationClient", "LogNotifier",
]
