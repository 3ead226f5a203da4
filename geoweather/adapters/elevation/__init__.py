"""
Elevation lookup adapters for GeoWeather.
"""

from .client import OpenElevationClient

__all__ = ["OpenElevationClient"]
