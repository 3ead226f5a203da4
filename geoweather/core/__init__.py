"""
Core domain models and algorithms for GeoWeather.

This module contains the domain models and the placement, weather and
routing logic that depend on external I/O only through ports.
"""

from .errors import GeoWeatherError, InvalidWeatherType, LookupUnavailable, SearchExhausted, UnknownRegion
from .models import Coordinate, Region, Surface, WeatherCatalog, WeatherEvent, WeatherTypeDef, WorldDataset

__all__ = [
    "GeoWeatherError", "InvalidWeatherType", "LookupUnavailable", "SearchExhausted", "UnknownRegion",
    "Coordinate", "Region", "Surface", "WeatherCatalog", "WeatherEvent", "WeatherTypeDef", "WorldDataset",
]
