"""
Port interfaces for GeoWeather hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core engine and external collaborators.
"""

from .elevation import ElevationPort
from .event_store import WeatherEventStorePort
from .notifier import WeatherNotifierPort
from .positions import EntityPositionSource

__all__ = ["ElevationPort", "WeatherEventStorePort", "WeatherNotifierPort", "EntityPositionSource"]
